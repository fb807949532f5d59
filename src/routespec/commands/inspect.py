"""Inspect commands -- examine the document a manifest builds into.

Provides the ``routespec inspect`` sub-command group with read-only
commands for reviewing a build before publishing it: the paths with their
operations and parameter split, and the schema map. Both commands build the
document from scratch and present it in table or structured output format.
"""

from __future__ import annotations

import typer

from routespec.commands.build import build_document
from routespec.output import get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("paths")
def inspect_paths(
    manifest: str = typer.Argument(
        ..., help="Route manifest: file path, URL, or '-' for stdin."
    ),
) -> None:
    """List every built operation.

    Shows the path, method, operation id, and how many parameters were
    hoisted to path level versus kept on the operation.

    Example::

        routespec inspect paths routes.yaml
    """
    document = build_document(manifest)

    headers = ["Path", "Method", "Operation", "Path Params", "Op Params", "Responses"]
    rows: list[list[str]] = []
    for path, item in sorted(document.paths.items()):
        for method, op in item.operations().items():
            codes = [str(c) for c in sorted(op.responses.status_code_responses)]
            if op.responses.default is not None:
                codes.append("default")
            rows.append([
                path,
                method.value.upper(),
                op.operation_id or "-",
                str(len(item.parameters)),
                str(len(op.parameters)),
                ", ".join(codes) or "-",
            ])

    get_output().print_table(headers, rows, title=f"Paths ({len(document.paths)})")


@inspect_app.command("schemas")
def inspect_schemas(
    manifest: str = typer.Argument(
        ..., help="Route manifest: file path, URL, or '-' for stdin."
    ),
) -> None:
    """List every schema the build registered.

    Shows each ``components/schemas`` entry with its type and up to five
    property names.

    Example::

        routespec inspect schemas routes.yaml
    """
    document = build_document(manifest)
    schemas = document.components.schemas

    if not schemas:
        info("No schemas were registered by this build.")
        return

    headers = ["Schema", "Type", "Properties"]
    rows: list[list[str]] = []
    for name, schema in sorted(schemas.items()):
        schema_type = schema.get("type", "object")
        prop_names = list(schema.get("properties", {}).keys())
        props = ", ".join(prop_names[:5])
        if len(prop_names) > 5:
            props += "..."
        rows.append([name, str(schema_type), props])

    get_output().print_table(headers, rows, title=f"Schemas ({len(rows)})")
