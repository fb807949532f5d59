"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles configuration and file output for routespec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.routespec/`` on macOS and Windows. See :func:`get_data_dir`, where
  crash logs are written.
* **Project config** -- An optional ``./routespec.json`` holding
  :class:`~routespec.models.BuilderConfig` defaults for a repository.
* **Precedence resolution** -- :func:`resolve_builder_config` merges CLI
  flags, environment variables, the manifest's ``config`` block, and the
  project config into the configuration a build consumes.

Document files are written with an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so an interrupted build never leaves a truncated
document behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from routespec.exceptions import ConfigError
from routespec.models import BuilderConfig

_APP_NAME = "routespec"
_PROJECT_CONFIG_FILENAME = "routespec.json"

ENV_IGNORE_PREFIXES = "ROUTESPEC_IGNORE_PREFIXES"
ENV_PROTOCOLS = "ROUTESPEC_PROTOCOLS"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/routespec/`` (default ``~/.local/share/routespec/``).
    On macOS/Windows: ``~/.routespec/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./routespec.json``.

    Project-local config has the lowest precedence above the built-in
    defaults. It typically pins ``ignore_prefixes`` and ``protocol_list``
    for every manifest in a repository.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _split_env_list(var_name: str) -> Optional[list[str]]:
    """Read a comma-separated list from the environment; ``None`` when unset."""
    value = os.environ.get(var_name)
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


# --- Precedence resolution ---


def resolve_builder_config(
    manifest_config: Optional[BuilderConfig] = None,
    cli_ignore_prefixes: Optional[Sequence[str]] = None,
    cli_protocols: Optional[Sequence[str]] = None,
) -> BuilderConfig:
    """Resolve the build configuration with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_ignore_prefixes``, ``cli_protocols``)
        2. Environment variables (``ROUTESPEC_IGNORE_PREFIXES``,
           ``ROUTESPEC_PROTOCOLS``, comma separated)
        3. The manifest's ``config`` block (fields it sets explicitly)
        4. Project config (``./routespec.json``)
        5. Defaults

    Returns:
        The effective :class:`~routespec.models.BuilderConfig`.

    Raises:
        ConfigError: If the project config is invalid.
    """
    # 5 + 4. Defaults, then project-local config
    merged: dict[str, Any] = {}
    project = load_project_config()
    if project is not None:
        try:
            merged.update(
                BuilderConfig.model_validate(project).model_dump(exclude_unset=True)
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 3. Manifest config block
    if manifest_config is not None:
        merged.update(manifest_config.model_dump(exclude_unset=True))

    # 2. Environment variables
    env_prefixes = _split_env_list(ENV_IGNORE_PREFIXES)
    if env_prefixes is not None:
        merged["ignore_prefixes"] = env_prefixes
    env_protocols = _split_env_list(ENV_PROTOCOLS)
    if env_protocols is not None:
        merged["protocol_list"] = env_protocols

    # 1. CLI flags (highest precedence)
    if cli_ignore_prefixes:
        merged["ignore_prefixes"] = list(cli_ignore_prefixes)
    if cli_protocols:
        merged["protocol_list"] = list(cli_protocols)

    return BuilderConfig.model_validate(merged)
