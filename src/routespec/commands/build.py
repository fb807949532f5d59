"""Build command -- assemble a document from a route manifest.

Provides ``routespec build MANIFEST``, which loads the manifest, resolves the
effective :class:`~routespec.models.BuilderConfig`, runs the builder with
the default collaborators, and renders the document as JSON or YAML to
stdout or to a file.
"""

from __future__ import annotations

from typing import Optional

import typer

from routespec.builder import (
    DefinitionRegistry,
    build_openapi_spec,
    default_definition_name,
    default_operation_identifier,
)
from routespec.config import resolve_builder_config
from routespec.exceptions import InvalidUsageError
from routespec.manifest import load_manifest
from routespec.models import Document
from routespec.output import debug, get_output, success, warning


def build_document(
    source: str,
    ignore_prefixes: Optional[list[str]] = None,
    protocols: Optional[list[str]] = None,
) -> Document:
    """Load the manifest at *source* and build its document.

    Args:
        source: Manifest URL, file path, or ``-`` for stdin.
        ignore_prefixes: CLI override for ``ignore_prefixes``.
        protocols: CLI override for ``protocol_list``.

    Raises:
        ManifestError: If the manifest cannot be loaded.
        ConfigError: If the project config is invalid.
        BuildError: If the document cannot be assembled.
        CollaboratorError: If a route has no operation name.
    """
    manifest = load_manifest(source)
    config = resolve_builder_config(
        manifest.config,
        cli_ignore_prefixes=ignore_prefixes,
        cli_protocols=protocols,
    )
    debug(
        f"Building {len(manifest.web_services)} web services "
        f"with {len(manifest.definitions)} definitions"
    )
    return build_openapi_spec(
        manifest.web_services,
        config,
        resolver=DefinitionRegistry(manifest.definitions),
        definition_namer=default_definition_name,
        operation_identifier=default_operation_identifier,
    )


def build_command(
    manifest: str = typer.Argument(
        ..., help="Route manifest: file path, URL, or '-' for stdin."
    ),
    ignore_prefix: Optional[list[str]] = typer.Option(
        None, "--ignore-prefix", "-i", help="Skip paths starting with this prefix (repeatable)."
    ),
    protocol: Optional[list[str]] = typer.Option(
        None, "--protocol", help="Scheme to list on every operation (repeatable)."
    ),
) -> None:
    """Build an OpenAPI document from a route manifest.

    The document goes to stdout (Rich-highlighted on a TTY, JSON when piped)
    or, with the global ``-o``, to a file.

    Example::

        routespec build routes.yaml > openapi.json
        routespec --yaml -o openapi.yaml build routes.yaml --ignore-prefix /internal
    """
    for prefix in ignore_prefix or []:
        if not prefix.startswith("/"):
            raise InvalidUsageError(
                f"--ignore-prefix must be an absolute path prefix starting with '/', got {prefix!r}"
            )

    document = build_document(manifest, ignore_prefix, protocol)
    if not document.paths:
        warning("No paths were built; check the manifest and ignore prefixes.")

    output = get_output()
    output.format_document(document.to_dict())
    if output.output_file:
        success(
            f"Wrote {len(document.paths)} paths and "
            f"{len(document.components.schemas)} schemas to {output.output_file}"
        )
