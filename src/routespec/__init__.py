"""routespec -- Build OpenAPI 3 documents from declared HTTP routes.

This package turns a registry of web services, each a group of routes with
their parameters, response declarations and payload types, into a single
OpenAPI-style document. Routes sharing a path become one path item,
parameters common to every route on a path are hoisted to path level, and
the payload types are resolved into a de-duplicated ``components/schemas``
map.

Typical workflow::

    routespec build routes.yaml > openapi.json
    routespec inspect paths routes.yaml

Library use goes through :func:`routespec.builder.build_openapi_spec`.

Modules:
    app: Typer application and CLI entry point.
    builder: The document assembly engine.
    models: Pydantic models shared across the entire package.
    manifest: Route manifest loading (file, URL, stdin).
    config: Build configuration precedence and file helpers.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
