"""Resolve introspection type references into SDL type expressions.

Introspection describes the type of a field, argument or input field as a
chain of ``{"kind", "name", "ofType"}`` nodes. ``NON_NULL`` and ``LIST``
nodes wrap an inner reference and the chain ends in a named leaf, so
``[String!]!`` arrives as ``NON_NULL -> LIST -> NON_NULL -> String``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from gqlfetch.errors import DecodeError, TypeResolutionError

NON_NULL = "NON_NULL"
LIST = "LIST"

WRAPPER_KINDS = (NON_NULL, LIST)


@dataclass(frozen=True)
class TypeRef:
    """One node of an introspection type reference chain."""

    kind: str
    name: str | None = None
    of_type: TypeRef | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TypeRef:
        if not isinstance(data, dict):
            raise DecodeError(f"Type reference must be a mapping, got {data!r}.")

        # Decode the chain outermost first, then link it from the leaf up.
        nodes: list[dict[str, Any]] = []
        current: Any = data
        while current is not None:
            if not isinstance(current, dict):
                raise DecodeError(
                    f"Type reference 'ofType' must be a mapping, got {current!r}."
                )
            nodes.append(current)
            current = current.get("ofType")

        ref: TypeRef | None = None
        for node in reversed(nodes):
            kind = node.get("kind")
            if not isinstance(kind, str):
                raise DecodeError(f"Type reference is missing its 'kind': {node!r}.")
            name = node.get("name")
            if name is not None and not isinstance(name, str):
                raise DecodeError(f"Type reference name must be a string: {node!r}.")
            ref = cls(kind=kind, name=name, of_type=ref)
        assert ref is not None
        return ref


@dataclass(frozen=True)
class TypeExpr:
    """A resolved type: a named type or a list of another expression."""

    named_type: str | None = None
    non_null: bool = False
    elem: TypeExpr | None = None

    def __str__(self) -> str:
        if self.elem is not None:
            text = f"[{self.elem}]"
        else:
            text = self.named_type or ""
        if self.non_null:
            text += "!"
        return text


def format_type_ref(ref: TypeRef | None) -> str:
    """Render a reference chain for error messages, e.g. ``NON_NULL(SCALAR String)``."""
    if ref is None:
        return "<none>"
    parts: list[str] = []
    depth = 0
    node: TypeRef | None = ref
    while node is not None:
        label = node.kind if node.name is None else f"{node.kind} {node.name}"
        if node.of_type is not None:
            parts.append(f"{label}(")
            depth += 1
        else:
            parts.append(label)
        node = node.of_type
    return "".join(parts) + ")" * depth


def resolve_type_ref(ref: TypeRef) -> TypeExpr:
    """Turn a type reference chain into a :class:`TypeExpr`.

    Raises :class:`TypeResolutionError` when a wrapping node is neither
    ``NON_NULL`` nor ``LIST`` or when the leaf has no name.
    """
    wrappers: list[str] = []
    node = ref
    while node.of_type is not None:
        if node.kind not in WRAPPER_KINDS:
            raise TypeResolutionError(
                _with_context(f"type kind unknown: {node.kind}", node, ref),
                type_ref=node,
            )
        wrappers.append(node.kind)
        node = node.of_type

    if not node.name:
        raise TypeResolutionError(
            _with_context(f"named type missing for kind {node.kind}", node, ref),
            type_ref=node,
        )

    expr = TypeExpr(named_type=node.name)
    for kind in reversed(wrappers):
        if kind == NON_NULL:
            expr = replace(expr, non_null=True)
        else:
            expr = TypeExpr(elem=expr)
    return expr


def _with_context(message: str, node: TypeRef, ref: TypeRef) -> str:
    if node is ref:
        return message
    return f"{message} (in {format_type_ref(ref)})"
