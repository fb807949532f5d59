"""Typer application and CLI entry point for routespec.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``build`` and ``inspect``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the
Typer app. :class:`~routespec.exceptions.RoutespecError` maps to its exit
code; any other exception is written to a crash log under the data directory.

See Also:
    :mod:`routespec.config`: Build configuration resolution.
    :mod:`routespec.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from routespec import __version__
from routespec.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="routespec",
    help="Build OpenAPI 3 documents from declared HTTP routes.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from routespec.commands.build import build_command  # noqa: E402
from routespec.commands.inspect import inspect_app  # noqa: E402

app.command("build")(build_command)
app.add_typer(inspect_app, name="inspect", help="Inspect a built document.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"routespec {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, no_color: bool) -> None:
    """Route the package's ``logging`` records to stderr when verbose."""
    logger = logging.getLogger("routespec")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    if not verbose:
        logger.setLevel(logging.WARNING)
        return
    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_path=False,
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    yaml_output: bool = typer.Option(
        False, "--yaml", help="YAML output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the built document to this file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~routespec.output.OutputManager` from
    CLI flags and attaches a Rich logging handler when ``--verbose`` is
    given.

    Args:
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        yaml_output: Force YAML output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        output_file: Redirect the built document to a file path.
    """
    from routespec.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif yaml_output:
        fmt = OutputFormat.YAML
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    _configure_logging(verbose, no_color)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from routespec.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``routespec`` console script.

    Performs the following sequence:

    1. Install signal handlers for clean Ctrl-C behaviour.
    2. Invoke the Typer application.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from routespec.exceptions import RoutespecError
        from routespec.output import error

        if isinstance(exc, RoutespecError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
