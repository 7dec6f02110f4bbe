"""Exceptions raised while fetching and printing an introspected schema."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gqlfetch.typeref import TypeRef


class GqlFetchError(RuntimeError):
    """Base class for every gqlfetch failure."""


class TransportError(GqlFetchError):
    """Raised when the introspection request could not be sent or read."""


class GraphQLResponseError(GqlFetchError):
    """Raised when the server answered with a non-empty ``errors`` array."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__(
            "encountered the following GraphQL errors: " + ",".join(messages)
        )


class DecodeError(GqlFetchError):
    """Raised when the payload does not have the introspection shape."""


class TypeResolutionError(GqlFetchError):
    """Raised when a type reference cannot be turned into a type expression."""

    def __init__(self, message: str, type_ref: "TypeRef | None" = None):
        self.type_ref = type_ref
        super().__init__(message)


class UnhandledKindError(GqlFetchError):
    """Raised when a type definition has a kind the printer does not know."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"not handling kind: {kind}")
