"""Typer application and CLI entry point for marvin_cli.

This module wires together the top-level Typer application and registers
the sub-commands (``add``, ``today``, ``due``, ``get``, ``list``,
``children``, ``done``, ``profile``, ``tracking``, ``track``, ``api``,
``config``).

The root callback only records the global flags in ``ctx.obj``; commands
turn them into the effective :class:`~marvin_cli.models.OptionConfig` via
:func:`~marvin_cli.api.load_options`. The :func:`main` function is the
console-script entry point declared in ``pyproject.toml`` and the single
place where errors become exit codes.

See Also:
    :mod:`marvin_cli.config`: Option layering and the persisted config file.
    :mod:`marvin_cli.output`: Output formatting.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from marvin_cli import __version__
from marvin_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="marvin",
    help="Manage Amazing Marvin tasks from the command line.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from marvin_cli.commands.add import ADD_CONTEXT_SETTINGS, add_command  # noqa: E402
from marvin_cli.commands.config import config_app  # noqa: E402
from marvin_cli.commands.items import (  # noqa: E402
    children_command,
    done_command,
    due_command,
    get_command,
    list_command,
    profile_command,
    today_command,
)
from marvin_cli.commands.raw import api_command  # noqa: E402
from marvin_cli.commands.tracking import track_command, tracking_command  # noqa: E402

app.command("add", context_settings=ADD_CONTEXT_SETTINGS)(add_command)
app.command("today")(today_command)
app.command("due")(due_command)
app.command("get")(get_command)
app.command("list")(list_command)
app.command("children")(children_command)
app.command("done")(done_command)
app.command("profile")(profile_command)
app.command("tracking")(tracking_command)
app.command("track")(track_command)
app.command("api")(api_command)
app.add_typer(config_app, name="config", help="View and change persisted settings.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"marvin {__version__}")
        raise typer.Exit()


def _exclusive(name: str, choices: dict[str, bool]) -> Optional[str]:
    """Return the single chosen value among flag *choices*, or None."""
    chosen = [value for value, on in choices.items() if on]
    if len(chosen) > 1:
        flags = ", ".join(f"--{c}" for c in chosen)
        raise typer.BadParameter(f"{flags} cannot be combined.", param_hint=name)
    return chosen[0] if chosen else None


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    desktop: bool = typer.Option(
        False, "--desktop", help="Only talk to the desktop app."
    ),
    public: bool = typer.Option(
        False, "--public", help="Only talk to the public API."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output."),
    csv_output: bool = typer.Option(False, "--csv", help="CSV output."),
    text_output: bool = typer.Option(False, "--text", help="Plain text output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Stores the global flags in ``ctx.obj["flags"]`` as the top layer of the
    option merge. Flags that were not passed are left out so that the
    persisted config can supply them. A provisional
    :class:`~marvin_cli.output.OutputManager` is installed so that errors
    raised before the options are resolved still honour ``--no-color``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        desktop: Pin all requests to the desktop app.
        public: Pin all requests to the public API.
        json_output: Render data as JSON.
        csv_output: Render data as CSV.
        text_output: Render data as plain text.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        no_color: Disable all colour on stderr.
    """
    from marvin_cli.output import OutputManager, set_output

    target = _exclusive("target", {"desktop": desktop, "public": public})
    fmt = _exclusive(
        "output format", {"json": json_output, "csv": csv_output, "text": text_output}
    )

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["no_color"] = no_color
    ctx.obj["flags"] = {
        "target": target,
        "output_format": fmt,
        "quiet": True if quiet else None,
        "verbose": True if verbose else None,
    }


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from marvin_cli.config import get_data_dir

    logs_dir = get_data_dir()
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point invoked by the ``marvin`` console script.

    Unhandled :class:`~marvin_cli.exceptions.MarvinError` instances are
    printed to stderr (with their hint, if any) and cause an exit with the
    error's ``exit_code``. All other exceptions produce a crash log and a
    generic failure exit.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(args=argv, prog_name="marvin")
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from marvin_cli.exceptions import MarvinError
        from marvin_cli.output import error, suggest

        if isinstance(exc, MarvinError):
            error(str(exc))
            if exc.hint:
                suggest(exc.hint)
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
