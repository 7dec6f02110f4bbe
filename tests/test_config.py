"""Tests for configuration helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from gqlfetch import config
from gqlfetch.errors import GqlFetchError


class TestEnvironment:
    def test_default_endpoint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GQLFETCH_ENDPOINT", "  https://example.com/graphql ")
        assert config.get_default_endpoint() == "https://example.com/graphql"

    def test_default_endpoint_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GQLFETCH_ENDPOINT", raising=False)
        assert config.get_default_endpoint() is None

    def test_default_method(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GQLFETCH_METHOD", raising=False)
        assert config.get_default_method() == "POST"
        monkeypatch.setenv("GQLFETCH_METHOD", "get")
        assert config.get_default_method() == "GET"

    def test_env_headers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GQLFETCH_AUTHORIZATION", "Bearer abc")
        assert config.get_env_headers() == {"Authorization": "Bearer abc"}
        monkeypatch.delenv("GQLFETCH_AUTHORIZATION")
        assert config.get_env_headers() == {}


class TestHeadersFile:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "headers.yaml"
        path.write_text("Authorization: Bearer abc\nX-Retries: 3\n", encoding="utf-8")
        assert config.load_headers_file(path) == {
            "Authorization": "Bearer abc",
            "X-Retries": "3",
        }

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "headers.yaml"
        path.write_text("", encoding="utf-8")
        assert config.load_headers_file(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GqlFetchError, match="does not exist"):
            config.load_headers_file(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "headers.yaml"
        path.write_text("- Authorization\n", encoding="utf-8")
        with pytest.raises(GqlFetchError, match="must contain a mapping"):
            config.load_headers_file(path)

    def test_nested_value(self, tmp_path: Path) -> None:
        path = tmp_path / "headers.yaml"
        path.write_text("X-Things:\n  - a\n", encoding="utf-8")
        with pytest.raises(GqlFetchError, match="must have a scalar value"):
            config.load_headers_file(path)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "headers.yaml"
        path.write_text("Authorization: [unclosed\n", encoding="utf-8")
        with pytest.raises(GqlFetchError, match="is not valid YAML"):
            config.load_headers_file(path)

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "headers.yaml"
        path.write_bytes(b"\xff\xfeAuthorization: x\n")
        with pytest.raises(GqlFetchError, match="Cannot read headers file"):
            config.load_headers_file(path)


class TestHeaderParsing:
    def test_parse_header(self) -> None:
        assert config.parse_header("Authorization: Bearer a:b") == (
            "Authorization",
            "Bearer a:b",
        )

    def test_parse_header_without_colon(self) -> None:
        with pytest.raises(GqlFetchError, match="must look like"):
            config.parse_header("Authorization")

    def test_merge_headers_later_wins(self) -> None:
        merged = config.merge_headers(
            {"Authorization": "one", "X-A": "a"},
            None,
            {"authorization": "two"},
        )
        assert merged == {"X-A": "a", "authorization": "two"}
