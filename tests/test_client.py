"""Tests for fetching a schema over HTTP."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock, Mock, patch

import httpx
import pytest

from gqlfetch.client import (
    REQUEST_TIMEOUT,
    BuildClientSchemaOptions,
    build_client_schema,
    build_client_schema_with_headers,
    build_client_schema_with_options,
    sdl_from_response,
)
from gqlfetch.errors import GraphQLResponseError, TransportError
from gqlfetch.introspection import INTROSPECTION_QUERY, INTROSPECTION_QUERY_VERSION

PAYLOAD: dict[str, Any] = {
    "data": {
        "__schema": {
            "queryType": {"name": "Query"},
            "mutationType": None,
            "types": [
                {
                    "kind": "OBJECT",
                    "name": "Query",
                    "description": None,
                    "fields": [
                        {
                            "name": "hello",
                            "description": None,
                            "args": [],
                            "type": {
                                "kind": "NON_NULL",
                                "name": None,
                                "ofType": {"kind": "SCALAR", "name": "String", "ofType": None},
                            },
                        }
                    ],
                    "interfaces": [],
                },
                {"kind": "SCALAR", "name": "String", "description": None},
            ],
            "directives": [],
        }
    }
}


class TestBuildClientSchema:
    """Test the HTTP entry points with a mocked httpx client."""

    @pytest.fixture
    def mock_client(self) -> Mock:
        """Create a mock httpx client that answers with PAYLOAD."""
        client = Mock(spec=httpx.Client)
        response = Mock()
        response.status_code = 200
        response.json.return_value = PAYLOAD
        client.request.return_value = response
        return client

    @pytest.fixture
    def mock_httpx(self, mock_client: Mock):
        """Patch httpx.Client so that its context manager yields mock_client."""
        with patch("gqlfetch.client.httpx.Client") as mock_cls:
            context = MagicMock()
            context.__enter__.return_value = mock_client
            mock_cls.return_value = context
            yield mock_cls

    def test_build_client_schema_posts_query(self, mock_httpx: Mock, mock_client: Mock) -> None:
        sdl = build_client_schema("https://example.com/graphql")
        assert "type Query {\n\thello: String!\n}" in sdl
        assert "scalar String" in sdl

        args, kwargs = mock_client.request.call_args
        assert args == ("POST", "https://example.com/graphql")
        assert kwargs["json"] == {"query": INTROSPECTION_QUERY}

        client_kwargs = mock_httpx.call_args[1]
        assert client_kwargs["timeout"] == REQUEST_TIMEOUT == 120.0
        assert client_kwargs["headers"] == {"Content-Type": "application/json"}

    def test_query_asks_for_repeatable_directives(self) -> None:
        directives = INTROSPECTION_QUERY.split("directives {", 1)[1].split("}", 1)[0]
        assert "isRepeatable" in directives

    def test_logs_query_version(
        self, mock_httpx: Mock, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="gqlfetch.client"):
            build_client_schema("https://example.com/graphql")
        assert f"version {INTROSPECTION_QUERY_VERSION}" in caplog.text

    def test_without_builtins(self, mock_httpx: Mock) -> None:
        sdl = build_client_schema("https://example.com/graphql", without_builtins=True)
        assert "type Query" in sdl
        assert "scalar String" not in sdl

    def test_headers_are_merged_with_content_type(self, mock_httpx: Mock) -> None:
        build_client_schema_with_headers(
            "https://example.com/graphql",
            {"Authorization": "Bearer token", "content-type": "text/plain"},
        )
        headers = mock_httpx.call_args[1]["headers"]
        assert headers == {
            "Authorization": "Bearer token",
            "Content-Type": "application/json",
        }

    def test_none_headers(self, mock_httpx: Mock) -> None:
        build_client_schema_with_headers("https://example.com/graphql", None)
        assert mock_httpx.call_args[1]["headers"] == {"Content-Type": "application/json"}

    def test_custom_method(self, mock_httpx: Mock, mock_client: Mock) -> None:
        build_client_schema_with_options(
            BuildClientSchemaOptions(endpoint="https://example.com/graphql", method="get")
        )
        assert mock_client.request.call_args[0][0] == "GET"

    def test_transport_error(self, mock_httpx: Mock, mock_client: Mock) -> None:
        mock_client.request.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(TransportError, match="connection refused") as exc_info:
            build_client_schema("https://example.com/graphql")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_non_json_body(self, mock_httpx: Mock, mock_client: Mock) -> None:
        response = Mock()
        response.status_code = 502
        response.json.side_effect = ValueError("Expecting value")
        mock_client.request.return_value = response
        with pytest.raises(TransportError, match="status 502"):
            build_client_schema("https://example.com/graphql")

    def test_graphql_errors(self, mock_client: Mock, mock_httpx: Mock) -> None:
        response = Mock()
        response.status_code = 200
        response.json.return_value = {
            "errors": [{"message": "introspection disabled"}, {"message": "try again"}],
            "data": PAYLOAD["data"],
        }
        mock_client.request.return_value = response
        with pytest.raises(
            GraphQLResponseError,
            match="introspection disabled,try again",
        ):
            build_client_schema("https://example.com/graphql")


class TestSdlFromResponse:
    def test_converts_saved_payload(self) -> None:
        assert sdl_from_response(PAYLOAD) == (
            "type Query {\n\thello: String!\n}\n\nscalar String\n\n"
        )

    def test_error_payload_produces_no_sdl(self) -> None:
        payload = dict(PAYLOAD, errors=[{"message": "boom"}])
        with pytest.raises(GraphQLResponseError, match="boom"):
            sdl_from_response(payload)
