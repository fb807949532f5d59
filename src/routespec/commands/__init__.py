"""Built-in CLI sub-commands for routespec.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~routespec.commands.build` -- build a document from a route
  manifest.
* :mod:`~routespec.commands.inspect` -- examine the paths and schemas a
  manifest builds into.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect``) or a plain callback function
registered directly on the root app (for single commands like ``build``).
"""
