"""Shared test fixtures for routespec.

Provides reusable fixtures for loading manifest fixtures, building route
declarations, creating isolated config environments, managing output state,
and running CLI commands. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from routespec.builder import DefinitionRegistry
from routespec.models import (
    HTTPMethod,
    ParameterDeclaration,
    ParameterKind,
    ResponseDeclaration,
    RouteDeclaration,
    SchemaDefinition,
    WebService,
)
from routespec.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Manifest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def routes_yaml_path() -> Path:
    """Path to the YAML manifest with the /foo and /internal services."""
    return FIXTURES_DIR / "routes.yaml"


@pytest.fixture
def routes_json_path() -> Path:
    """Path to the JSON manifest with the /healthz service."""
    return FIXTURES_DIR / "routes.json"


@pytest.fixture
def routes_raw(routes_yaml_path: Path) -> dict[str, Any]:
    """Load the raw YAML manifest dict."""
    with open(routes_yaml_path) as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# Route registry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def path_param() -> ParameterDeclaration:
    """The required ``path`` path parameter shared by the /foo/test routes."""
    return ParameterDeclaration(
        name="path",
        kind=ParameterKind.PATH,
        required=True,
        description="path to the resource",
    )


@pytest.fixture
def pretty_param() -> ParameterDeclaration:
    return ParameterDeclaration(
        name="pretty",
        kind=ParameterKind.QUERY,
        description="If 'true', then the output is pretty printed.",
    )


@pytest.fixture
def foo_service(
    path_param: ParameterDeclaration, pretty_param: ParameterDeclaration
) -> WebService:
    """A web service with a GET and a POST sharing ``/foo/test/{path}``.

    The GET route uses the greedy ``{path:*}`` form and also declares
    ``pretty``; the POST route declares only ``path``.
    """
    return WebService(
        root_path="/foo",
        routes=[
            RouteDeclaration(
                method=HTTPMethod.GET,
                path="/foo/test/{path:*}",
                operation="getTest",
                doc="Read a test object.",
                consumes=["application/json"],
                produces=["application/json"],
                parameters=[path_param, pretty_param],
                response_errors=[
                    ResponseDeclaration(code=200, message="OK", model="example.com/foo.Foo"),
                ],
            ),
            RouteDeclaration(
                method=HTTPMethod.POST,
                path="/foo/test/{path}",
                operation="postTest",
                consumes=["application/json"],
                parameters=[path_param],
                write_sample="example.com/foo.Foo",
            ),
        ],
    )


@pytest.fixture
def cyclic_definitions() -> dict[str, SchemaDefinition]:
    """``Foo`` and ``Bar`` reference each other; ``Foo`` also has a string field."""
    return {
        "example.com/foo.Foo": SchemaDefinition(
            schema={
                "type": "object",
                "properties": {"bar": {"$ref": "#/components/schemas/foo.Bar"}},
            },
            dependencies=["example.com/foo.Bar", "string"],
        ),
        "example.com/foo.Bar": SchemaDefinition(
            schema={
                "type": "object",
                "properties": {"foo": {"$ref": "#/components/schemas/foo.Foo"}},
            },
            dependencies=["example.com/foo.Foo"],
        ),
    }


@pytest.fixture
def registry(cyclic_definitions: dict[str, SchemaDefinition]) -> DefinitionRegistry:
    return DefinitionRegistry(cyclic_definitions)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that crash logs
    never touch the real home directory, clears all ROUTESPEC_* environment
    variables, and changes the working directory to tmp_path so no
    ``routespec.json`` is picked up by accident.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["ROUTESPEC_IGNORE_PREFIXES", "ROUTESPEC_PROTOCOLS"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
