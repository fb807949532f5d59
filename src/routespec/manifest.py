"""Load route manifests from a URL, local file, or stdin.

A route manifest bundles everything a build needs in one JSON or YAML
document: the web services and their routes, the schema definitions of the
payload types they reference, and the builder configuration.  This module
handles fetching the raw document, detecting its format, and validating it
into a :class:`~routespec.models.RouteManifest`.

The public functions are:

* :func:`load_manifest` -- Load, parse and validate in one call.
* :func:`load_manifest_source` -- Load and parse a raw dict from any
  supported source.
* :func:`parse_manifest` -- Validate a raw dict and join each route's path
  onto its web service root.

Example manifest::

    info: {title: Pets, version: "1.0"}
    config:
      protocol_list: [https]
      default_response: {description: Default Response.}
    definitions:
      example.com/pets.Pet:
        schema: {type: object, properties: {name: {type: string}}}
    web_services:
      - root_path: /pets
        routes:
          - method: get
            path: /{name}
            operation: readPet
            parameters:
              - {name: name, kind: path, required: true}
            response_errors:
              - {code: 200, message: OK, model: example.com/pets.Pet}
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from routespec.exceptions import ManifestError
from routespec.models import RouteManifest, WebService


def load_manifest(source: str) -> RouteManifest:
    """Load and validate a route manifest from URL, file path, or stdin ('-')."""
    return parse_manifest(load_manifest_source(source))


def load_manifest_source(source: str) -> dict[str, Any]:
    """Load a raw manifest from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed manifest as a dictionary.

    Raises:
        ManifestError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise ManifestError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise ManifestError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a manifest over HTTP(S), using the content type as a format hint."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ManifestError(
            f"HTTP {exc.response.status_code} fetching manifest from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ManifestError(f"Failed to fetch manifest from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a manifest from a local ``.json``, ``.yaml`` or ``.yml`` file.

    Falls back to content-based detection for other extensions.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ManifestError(f"Manifest file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest file {path}: {exc}") from exc

    if not content.strip():
        raise ManifestError(f"Manifest file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        ManifestError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise ManifestError(
                    "Manifest must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise ManifestError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise ManifestError(
                "Manifest must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse manifest as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise ManifestError(msg)


def parse_manifest(data: dict[str, Any]) -> RouteManifest:
    """Validate a raw manifest dict into a :class:`~routespec.models.RouteManifest`.

    Route paths in the raw manifest are relative to their web service's
    ``root_path``; the returned manifest carries full path templates.  A
    top-level ``info`` block fills ``config.info`` when the latter is unset.

    Raises:
        ManifestError: If the data does not match the manifest schema.
    """
    try:
        manifest = RouteManifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Invalid route manifest: {exc}") from exc

    manifest.web_services = [_with_full_paths(ws) for ws in manifest.web_services]
    if manifest.config.info is None and manifest.info is not None:
        manifest.config.info = manifest.info
    return manifest


def _with_full_paths(web_service: WebService) -> WebService:
    routes = [
        route.model_copy(update={"path": join_path(web_service.root_path, route.path)})
        for route in web_service.routes
    ]
    return web_service.model_copy(update={"routes": routes})


def join_path(root_path: str, path: str) -> str:
    """Join a web service root and a route path with exactly one ``/``.

    Example::

        >>> join_path("/foo", "/test/{path:*}")
        '/foo/test/{path:*}'
        >>> join_path("/", "")
        '/'
    """
    root = root_path.rstrip("/")
    if not path or path == "/":
        return root or "/"
    return f"{root}/{path.lstrip('/')}"
