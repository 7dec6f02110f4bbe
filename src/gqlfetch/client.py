"""Fetch a schema over HTTP with the introspection query and print it as SDL."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from gqlfetch.config import DEFAULT_METHOD, merge_headers
from gqlfetch.errors import TransportError
from gqlfetch.introspection import (
    INTROSPECTION_QUERY,
    INTROSPECTION_QUERY_VERSION,
    schema_from_response,
)
from gqlfetch.printer import print_schema

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 120.0


@dataclass(frozen=True)
class BuildClientSchemaOptions:
    """Everything needed to fetch and print one schema."""

    endpoint: str
    method: str = DEFAULT_METHOD
    headers: Mapping[str, str] | None = None
    without_builtins: bool = False


def build_client_schema(endpoint: str, without_builtins: bool = False) -> str:
    return build_client_schema_with_options(
        BuildClientSchemaOptions(endpoint=endpoint, without_builtins=without_builtins)
    )


def build_client_schema_with_headers(
    endpoint: str, headers: Mapping[str, str] | None, without_builtins: bool = False
) -> str:
    return build_client_schema_with_options(
        BuildClientSchemaOptions(
            endpoint=endpoint, headers=headers, without_builtins=without_builtins
        )
    )


def build_client_schema_with_options(options: BuildClientSchemaOptions) -> str:
    """Run the introspection query against ``options.endpoint`` and return SDL.

    ``Content-Type: application/json`` is always sent, on top of whatever
    headers the caller passes.
    """
    payload = fetch_introspection(options)
    return sdl_from_response(payload, without_builtins=options.without_builtins)


def fetch_introspection(options: BuildClientSchemaOptions) -> Any:
    """Send the introspection query and return the decoded JSON body."""
    headers = merge_headers(options.headers, {"Content-Type": "application/json"})
    method = options.method.upper()

    logger.debug(
        "Sending introspection query (version %s): %s %s",
        INTROSPECTION_QUERY_VERSION,
        method,
        options.endpoint,
    )
    try:
        with httpx.Client(headers=headers, timeout=REQUEST_TIMEOUT) as client:
            response = client.request(
                method,
                options.endpoint,
                json={"query": INTROSPECTION_QUERY},
            )
    except httpx.HTTPError as exc:
        raise TransportError(str(exc)) from exc

    logger.debug("Introspection response status: %s", response.status_code)
    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(
            f"Introspection response from {options.endpoint} is not JSON "
            f"(status {response.status_code}): {exc}"
        ) from exc


def sdl_from_response(payload: Any, without_builtins: bool = False) -> str:
    """Print the schema held by an already fetched introspection response."""
    schema = schema_from_response(payload)
    return print_schema(schema, without_builtins=without_builtins)
