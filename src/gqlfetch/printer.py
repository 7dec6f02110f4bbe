"""Print a decoded introspection schema as SDL text."""

from __future__ import annotations

import logging

from gqlfetch.errors import TypeResolutionError, UnhandledKindError
from gqlfetch.introspection import (
    Directive,
    EnumType,
    Field,
    InputObjectType,
    InputValue,
    InterfaceType,
    IntrospectionSchema,
    ObjectType,
    ScalarType,
    TypeDefinition,
    UnionType,
)
from gqlfetch.typeref import TypeRef, format_type_ref, resolve_type_ref

logger = logging.getLogger(__name__)

BUILTIN_SCALARS = frozenset({"ID", "Int", "String", "Float", "Boolean"})
BUILTIN_DIRECTIVES = frozenset({"deprecated", "include", "skip"})

META_TYPE_PREFIX = "__"


def print_schema(schema: IntrospectionSchema, without_builtins: bool = False) -> str:
    """Render every directive, then every type, each followed by a blank line.

    With ``without_builtins`` the directives and scalars defined by the
    GraphQL specification itself are left out. Introspection meta types
    (``__Type``, ``__Schema``, ...) are always left out.
    """
    out: list[str] = []

    printed_directives = 0
    for directive in schema.directives:
        if without_builtins and directive.name in BUILTIN_DIRECTIVES:
            logger.debug("Skipping builtin directive @%s.", directive.name)
            continue
        _print_directive(out, directive)
        out.append("\n\n")
        printed_directives += 1

    printed_types = 0
    for type_def in schema.types:
        if type_def.name.startswith(META_TYPE_PREFIX):
            logger.debug("Skipping introspection type %s.", type_def.name)
            continue
        if (
            without_builtins
            and isinstance(type_def, ScalarType)
            and type_def.name in BUILTIN_SCALARS
        ):
            logger.debug("Skipping builtin scalar %s.", type_def.name)
            continue
        _print_type(out, type_def)
        out.append("\n\n")
        printed_types += 1

    logger.debug(
        "Printed %d directive(s) and %d type(s).", printed_directives, printed_types
    )
    return "".join(out)


def _print_type(out: list[str], type_def: TypeDefinition) -> None:
    _print_description(out, type_def.description)

    if isinstance(type_def, ObjectType):
        out.append(f"type {type_def.name} ")
        if type_def.interfaces:
            out.append(f"implements {' & '.join(type_def.interfaces)} ")
        _print_fields(out, type_def.name, type_def.fields)
    elif isinstance(type_def, InterfaceType):
        out.append(f"interface {type_def.name} ")
        _print_fields(out, type_def.name, type_def.fields)
    elif isinstance(type_def, UnionType):
        members = [
            _render_type(ref, f"union {type_def.name}")
            for ref in type_def.possible_types
        ]
        out.append(f"union {type_def.name} = {' | '.join(members)}")
    elif isinstance(type_def, EnumType):
        out.append(f"enum {type_def.name} {{\n")
        for value in type_def.values:
            _print_description(out, value.description, indent="\t")
            out.append(f"\t{value.name}\n")
        out.append("}")
    elif isinstance(type_def, ScalarType):
        out.append(f"scalar {type_def.name}")
    elif isinstance(type_def, InputObjectType):
        out.append(f"input {type_def.name} {{\n")
        for input_field in type_def.input_fields:
            _print_description(out, input_field.description, indent="\t")
            type_expr = _render_type(
                input_field.type, f"{type_def.name}.{input_field.name}"
            )
            out.append(f"\t{input_field.name}: {type_expr}\n")
        out.append("}")
    else:
        raise UnhandledKindError(type_def.kind)


def _print_fields(out: list[str], owner: str, fields: list[Field]) -> None:
    out.append("{\n")
    for field in fields:
        where = f"{owner}.{field.name}"
        _print_description(out, field.description, indent="\t")
        out.append(f"\t{field.name}")
        if field.args:
            out.append("(\n")
            _print_args(out, where, field.args, indent="\t\t")
            out.append("\t)")
        out.append(f": {_render_type(field.type, where)}\n")
    out.append("}")


def _print_directive(out: list[str], directive: Directive) -> None:
    _print_description(out, directive.description)
    out.append(f"directive @{directive.name}")
    if directive.args:
        out.append("(\n")
        _print_args(out, f"@{directive.name}", directive.args, indent="\t")
        out.append(")")
    if directive.is_repeatable:
        out.append(" repeatable")
    out.append(f" on {' | '.join(directive.locations)}")


def _print_args(
    out: list[str], owner: str, args: list[InputValue], indent: str
) -> None:
    for arg in args:
        _print_description(out, arg.description, indent=indent)
        type_expr = _render_type(arg.type, f"{owner}({arg.name})")
        out.append(f"{indent}{arg.name}: {type_expr}\n")


def _print_description(out: list[str], description: str, indent: str = "") -> None:
    if description:
        out.append(f'{indent}"""{description}"""\n')


def _render_type(ref: TypeRef, where: str) -> str:
    try:
        return str(resolve_type_ref(ref))
    except TypeResolutionError as exc:
        raise TypeResolutionError(
            f"convert introspection type of {where} to SDL type: {exc}\n"
            f"{format_type_ref(ref)}",
            type_ref=ref,
        ) from exc
