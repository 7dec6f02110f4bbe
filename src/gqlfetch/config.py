"""Configuration helpers for gqlfetch."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import yaml

from gqlfetch.errors import GqlFetchError

DEFAULT_METHOD = "POST"


def get_default_endpoint() -> str | None:
    """Endpoint used when none is given on the command line."""
    endpoint = os.environ.get("GQLFETCH_ENDPOINT")
    if endpoint:
        trimmed = endpoint.strip()
        if trimmed:
            return trimmed
    return None


def get_default_method() -> str:
    """HTTP method for the introspection request."""
    method = os.environ.get("GQLFETCH_METHOD")
    if method and method.strip():
        return method.strip().upper()
    return DEFAULT_METHOD


def get_env_headers() -> dict[str, str]:
    """Headers taken from the environment."""
    headers: dict[str, str] = {}
    authorization = os.environ.get("GQLFETCH_AUTHORIZATION")
    if authorization and authorization.strip():
        headers["Authorization"] = authorization.strip()
    return headers


def load_headers_file(path: Path) -> dict[str, str]:
    """Read a YAML mapping of header names to values."""
    if not path.exists():
        raise GqlFetchError(f"Headers file {path} does not exist.")
    if path.is_dir():
        raise GqlFetchError(f"Headers file {path} is a directory, expected a YAML file.")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise GqlFetchError(f"Cannot read headers file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise GqlFetchError(f"Headers file {path} is not valid YAML: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise GqlFetchError(f"Headers file {path} must contain a mapping.")

    headers: dict[str, str] = {}
    for name, value in raw.items():
        if not isinstance(name, str) or not name.strip():
            raise GqlFetchError(f"Header names in {path} must be non-empty strings.")
        if isinstance(value, bool) or value is None or isinstance(value, (list, dict)):
            raise GqlFetchError(f"Header '{name}' in {path} must have a scalar value.")
        headers[name.strip()] = str(value)
    return headers


def parse_header(text: str) -> tuple[str, str]:
    """Split a ``Name: value`` header given on the command line."""
    name, sep, value = text.partition(":")
    name = name.strip()
    if not sep or not name:
        raise GqlFetchError(f"Header '{text}' must look like 'Name: value'.")
    return name, value.strip()


def merge_headers(*sources: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings; later sources win, names compare case-insensitively."""
    merged: dict[str, str] = {}
    names: dict[str, str] = {}
    for source in sources:
        if not source:
            continue
        for name, value in source.items():
            previous = names.get(name.lower())
            if previous is not None and previous != name:
                del merged[previous]
            names[name.lower()] = name
            merged[name] = value
    return merged
