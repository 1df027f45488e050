"""Config commands -- view and modify the persisted configuration.

Provides the ``marvin config`` sub-command group for reading, updating, and
resetting the config file that forms the middle layer of the option merge
(see :func:`~marvin_cli.config.resolve_options`). Keys use their camelCase
names (``apiToken``, ``fullAccessToken``, ``target``, ``outputFormat``,
``desktopUrl``, ``publicUrl``, ``timeout``, ``quiet``, ``verbose``); the
snake_case spelling is accepted too.
"""

from __future__ import annotations

from typing import Optional

import typer

from marvin_cli.api import load_options
from marvin_cli.config import (
    config_path,
    load_persisted_config,
    persisted_key,
    resolve_options,
    save_persisted_config,
)
from marvin_cli.output import format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)

_SECRET_KEYS = ("apiToken", "fullAccessToken")


def _mask(value: str) -> str:
    if not value:
        return ""
    return value[:4] + "..." if len(value) > 8 else "***"


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Tokens are masked. The values shown are what commands would use,
    including the global flags passed alongside.

    Example::

        marvin config show
        marvin --public --text config show
    """
    options = load_options(ctx)
    data = options.model_dump(mode="json", by_alias=True)
    for key in _SECRET_KEYS:
        data[key] = _mask(data[key])
    info(f"Config file: {config_path()}")
    format_response(data)


@config_app.command("path")
def config_path_command() -> None:
    """Print the path of the config file."""
    print_data(str(config_path()))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, e.g. 'apiToken' or 'target'."),
    value: Optional[str] = typer.Argument(
        None, help="Value to set. Prompted for (hidden) when omitted."
    ),
) -> None:
    """Set a configuration value.

    The value is coerced to the option's type and validated before the
    file is written, so an invalid value never reaches the config file.

    Raises:
        ConfigError: If the key is unknown or the value is invalid.

    Example::

        marvin config set apiToken
        marvin config set target public
        marvin config set timeout 10
    """
    name = persisted_key(key)
    if value is None:
        value = typer.prompt(name, hide_input=True)

    data = load_persisted_config()
    data[name] = value
    options = resolve_options(None, data, None)

    data[name] = options.model_dump(mode="json", by_alias=True)[name]
    save_persisted_config(data)
    shown = _mask(str(data[name])) if name in _SECRET_KEYS else data[name]
    success(f"Set {name} = {shown}")


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(help="Config key to remove."),
) -> None:
    """Remove a value so its compiled-in default applies again."""
    name = persisted_key(key)
    data = load_persisted_config()
    if data.pop(name, None) is None:
        info(f"{name} was not set.")
        return
    save_persisted_config(data)
    success(f"Unset {name}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Removes every persisted value, tokens included. Asks for confirmation
    unless ``--yes`` is given.

    Raises:
        typer.Exit: If the user declines confirmation.
    """
    if not yes:
        confirmed = typer.confirm("Reset all config (including tokens) to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_persisted_config({})
    success("Configuration reset to defaults.")
