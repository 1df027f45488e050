"""Configuration management with XDG paths, atomic writes, and option layering.

This module handles all persistent configuration for marvin_cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.marvin-cli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Persisted config** -- a single JSON object with camelCase keys
  (``apiToken``, ``fullAccessToken``, ``target``, ``outputFormat``, ...),
  read by :func:`load_persisted_config` and written by
  :func:`save_persisted_config`.
* **Option layering** -- :func:`resolve_options` merges compiled-in
  defaults, the persisted config, and CLI flags into the immutable
  :class:`~marvin_cli.models.OptionConfig` used by every command.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) so a crash never leaves a half-written config.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from marvin_cli.exceptions import ConfigError
from marvin_cli.models import OptionConfig

_APP_NAME = "marvin-cli"
_CONFIG_FILENAME = "config.json"

DEFAULT_OPTIONS: dict[str, Any] = {
    name: field.default for name, field in OptionConfig.model_fields.items()
}
"""Compiled-in defaults, the lowest layer of :func:`resolve_options`."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform uses the XDG Base Directory layout (Linux/BSD)."""
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


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/marvin-cli/`` (default
    ``~/.config/marvin-cli/``). On macOS/Windows: ``~/.marvin-cli/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/marvin-cli/`` (default
    ``~/.local/share/marvin-cli/``). On macOS/Windows: ``~/.marvin-cli/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_path() -> Path:
    """Path to the persisted config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. The file is created
    with mode 0600 since it holds API tokens.
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
        fd = None
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Persisted config ---


def load_persisted_config() -> dict[str, Any]:
    """Load the persisted config as a raw dict.

    Values are not validated here; type problems surface as
    :class:`~marvin_cli.exceptions.ConfigError` from :func:`resolve_options`.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or is not an object.
    """
    path = config_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def save_persisted_config(data: Mapping[str, Any]) -> None:
    """Persist *data* atomically as the config file.

    Args:
        data: Key/value pairs keyed by their camelCase names.
    """
    _atomic_write(config_path(), json.dumps(dict(data), indent=2) + "\n")


def persisted_key(key: str) -> str:
    """Normalise *key* to its persisted camelCase spelling.

    Accepts either the snake_case field name or the camelCase alias.

    Raises:
        ConfigError: If *key* names no option.
    """
    for name, field in OptionConfig.model_fields.items():
        if key in (name, field.alias):
            return field.alias or name
    known = ", ".join(f.alias or n for n, f in OptionConfig.model_fields.items())
    raise ConfigError(f"Unknown config key: {key}", hint=f"Known keys: {known}")


# --- Option layering ---


def _present(layer: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Return the fields of *layer* that are set, keyed by field name."""
    if not layer:
        return {}
    fields = OptionConfig.model_fields
    by_alias = {f.alias: n for n, f in fields.items() if f.alias}
    present: dict[str, Any] = {}
    for key, value in layer.items():
        if value is None:
            continue
        name = key if key in fields else by_alias.get(key)
        if name is not None:
            present[name] = value
    return present


def resolve_options(
    defaults: Optional[Mapping[str, Any]] = None,
    persisted: Optional[Mapping[str, Any]] = None,
    flags: Optional[Mapping[str, Any]] = None,
) -> OptionConfig:
    """Merge the option layers into one immutable :class:`OptionConfig`.

    Precedence (high to low):
        1. CLI flags
        2. Persisted config file
        3. Compiled-in defaults (:data:`DEFAULT_OPTIONS` when *defaults* is None)

    A key that is missing from a layer, or whose value is ``None``, keeps
    the value of the layer below it. Unknown keys are ignored. Values are
    coerced to the field types (``"yes"`` becomes ``True``, ``"public"``
    becomes :attr:`Target.PUBLIC`).

    Raises:
        ConfigError: If a value cannot be coerced to its field's type.
    """
    merged = _present(DEFAULT_OPTIONS if defaults is None else defaults)
    merged.update(_present(persisted))
    merged.update(_present(flags))
    try:
        return OptionConfig.model_validate(merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(
            f"Invalid option value ({problems})",
            hint="Fix it with: marvin config set <key> <value>, or marvin config unset <key>",
        ) from exc
