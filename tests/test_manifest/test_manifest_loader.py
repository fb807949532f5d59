"""Tests for routespec.manifest."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from pydantic import ValidationError

from routespec.exceptions import ManifestError
from routespec.manifest import (
    _load_from_file,
    _load_from_stdin,
    _load_from_url,
    _parse_content,
    join_path,
    load_manifest,
    load_manifest_source,
    parse_manifest,
)
from routespec.models import HTTPMethod, ParameterKind

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# load_manifest_source dispatch
# ---------------------------------------------------------------------------


class TestLoadManifestSource:
    """Test load_manifest_source routes to the correct loader."""

    def test_loads_from_file_yaml(self) -> None:
        result = load_manifest_source(str(FIXTURES_DIR / "routes.yaml"))
        assert result["info"]["title"] == "Foo API"

    def test_loads_from_file_json(self) -> None:
        result = load_manifest_source(str(FIXTURES_DIR / "routes.json"))
        assert result["web_services"][0]["root_path"] == "/healthz"

    def test_loads_from_stdin(self) -> None:
        manifest_json = json.dumps({"web_services": [], "info": {"title": "stdin"}})
        with patch("routespec.manifest.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(manifest_json)
            result = load_manifest_source("-")
        assert result["info"]["title"] == "stdin"

    def test_loads_from_url(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            json={"info": {"title": "remote"}},
            request=httpx.Request("GET", "https://example.com/routes.json"),
        )
        with patch("routespec.manifest.httpx.get", return_value=mock_response) as mock_get:
            result = load_manifest_source("https://example.com/routes.json")
        assert result["info"]["title"] == "remote"
        mock_get.assert_called_once_with(
            "https://example.com/routes.json", timeout=30.0, follow_redirects=True
        )


# ---------------------------------------------------------------------------
# _load_from_file
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    """Test loading manifests from local files."""

    def test_file_not_found_raises(self) -> None:
        with pytest.raises(ManifestError, match="not found"):
            _load_from_file("/nonexistent/path/to/routes.yaml")

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.yaml"
        empty.write_text("   \n", encoding="utf-8")
        with pytest.raises(ManifestError, match="empty"):
            _load_from_file(str(empty))

    def test_invalid_json_file_raises(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{invalid json", encoding="utf-8")
        with pytest.raises(ManifestError, match="Invalid JSON"):
            _load_from_file(str(bad))

    def test_non_object_raises(self, tmp_path: Path) -> None:
        array_file = tmp_path / "array.json"
        array_file.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ManifestError, match="must be a JSON/YAML object"):
            _load_from_file(str(array_file))

    def test_unknown_extension_detects_yaml(self, tmp_path: Path) -> None:
        manifest = tmp_path / "routes.txt"
        manifest.write_text("web_services: []\n", encoding="utf-8")
        assert _load_from_file(str(manifest)) == {"web_services": []}


# ---------------------------------------------------------------------------
# _load_from_stdin
# ---------------------------------------------------------------------------


class TestLoadFromStdin:
    def test_reads_yaml_from_stdin(self) -> None:
        with patch("routespec.manifest.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("info:\n  title: YAML stdin\n")
            result = _load_from_stdin()
        assert result["info"]["title"] == "YAML stdin"

    def test_empty_stdin_raises(self) -> None:
        with patch("routespec.manifest.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("  \n\t")
            with pytest.raises(ManifestError, match="No input"):
                _load_from_stdin()


# ---------------------------------------------------------------------------
# _load_from_url
# ---------------------------------------------------------------------------


class TestLoadFromUrl:
    def test_yaml_content_type(self) -> None:
        mock_response = httpx.Response(
            status_code=200,
            text="info:\n  title: Remote YAML\n",
            headers={"content-type": "application/yaml"},
            request=httpx.Request("GET", "https://example.com/routes.yaml"),
        )
        with patch("routespec.manifest.httpx.get", return_value=mock_response):
            result = _load_from_url("https://example.com/routes.yaml")
        assert result["info"]["title"] == "Remote YAML"

    def test_http_error_raises(self) -> None:
        mock_response = httpx.Response(
            status_code=404,
            request=httpx.Request("GET", "https://example.com/missing.json"),
        )
        with patch("routespec.manifest.httpx.get", return_value=mock_response):
            with pytest.raises(ManifestError, match="HTTP 404"):
                _load_from_url("https://example.com/missing.json")

    def test_connection_error_raises(self) -> None:
        with patch(
            "routespec.manifest.httpx.get",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            with pytest.raises(ManifestError, match="Failed to fetch"):
                _load_from_url("https://example.com/routes.json")


# ---------------------------------------------------------------------------
# _parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    def test_json_without_hint(self) -> None:
        assert _parse_content('{"a": 1}') == {"a": 1}

    def test_yaml_hint_skips_json(self) -> None:
        assert _parse_content("a: 1", hint="yaml") == {"a": 1}

    def test_empty_yaml_document_raises(self) -> None:
        with pytest.raises(ManifestError, match="empty document"):
            _parse_content("# just a comment\n", hint="yaml")

    def test_unparseable_content_reports_both_errors(self) -> None:
        with pytest.raises(ManifestError) as exc_info:
            _parse_content("key: [unclosed")
        message = str(exc_info.value)
        assert "JSON error" in message
        assert "YAML error" in message


# ---------------------------------------------------------------------------
# parse_manifest
# ---------------------------------------------------------------------------


class TestParseManifest:
    """Test validation and path joining."""

    def test_route_paths_are_joined_to_root(self, routes_raw: dict[str, Any]) -> None:
        manifest = parse_manifest(routes_raw)
        foo = manifest.web_services[0]
        assert [r.path for r in foo.routes] == ["/foo/test/{path:*}", "/foo/test/{path}"]
        assert manifest.web_services[1].routes[0].path == "/internal/status"

    def test_fields_are_validated(self, routes_raw: dict[str, Any]) -> None:
        manifest = parse_manifest(routes_raw)
        get = manifest.web_services[0].routes[0]
        assert get.method == HTTPMethod.GET
        assert get.parameters[0].kind == ParameterKind.PATH
        assert get.parameters[0].required is True
        assert get.response_errors[0].model == "example.com/foo.Foo"
        assert manifest.definitions["example.com/foo.Foo"].dependencies == [
            "example.com/foo.Bar",
            "string",
        ]

    def test_top_level_info_fills_config(self, routes_raw: dict[str, Any]) -> None:
        manifest = parse_manifest(routes_raw)
        assert manifest.config.info.title == "Foo API"
        assert manifest.config.protocol_list == ["https"]

    def test_config_info_wins_over_top_level(self) -> None:
        manifest = parse_manifest({
            "info": {"title": "Top"},
            "config": {"info": {"title": "Config"}},
        })
        assert manifest.config.info.title == "Config"

    def test_routes_are_frozen(self, routes_raw: dict[str, Any]) -> None:
        route = parse_manifest(routes_raw).web_services[0].routes[0]
        with pytest.raises(ValidationError):
            route.path = "/elsewhere"

    def test_invalid_manifest_raises(self) -> None:
        with pytest.raises(ManifestError, match="Invalid route manifest"):
            parse_manifest({"web_services": [{"routes": [{"method": "fetch", "path": "/"}]}]})

    def test_load_manifest_from_json_fixture(self) -> None:
        manifest = load_manifest(str(FIXTURES_DIR / "routes.json"))
        assert manifest.web_services[0].routes[0].path == "/healthz"
        assert manifest.config.info.version == "2.0"


class TestJoinPath:
    @pytest.mark.parametrize(
        "root,path,expected",
        [
            ("/foo", "/test/{path:*}", "/foo/test/{path:*}"),
            ("/foo/", "test", "/foo/test"),
            ("/", "/pods", "/pods"),
            ("/", "", "/"),
            ("/healthz", "", "/healthz"),
            ("/healthz", "/", "/healthz"),
        ],
    )
    def test_join(self, root: str, path: str, expected: str) -> None:
        assert join_path(root, path) == expected
