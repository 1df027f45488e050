"""The ``marvin add`` command -- create a task or a project.

Argument and file handling is decided by
:func:`~marvin_cli.classifier.decide`; this module only performs the side
effects around it: reading the file or stdin, printing help, raising on an
error decision, and posting the request.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from marvin_cli.api import call_api, load_options
from marvin_cli.classifier import FILE_EMPTY, decide
from marvin_cli.exceptions import ClassificationError, MarvinError
from marvin_cli.exit_codes import EXIT_INVALID_USAGE
from marvin_cli.models import STANDARD, Action
from marvin_cli.output import format_response, print_data, success

STDIN_SENTINEL = "-"
STDIN_EMPTY = "Stdin was empty"

# --help is a regular option here so the classifier decides what it means.
ADD_CONTEXT_SETTINGS = {"help_option_names": []}

ADD_HELP = """\
marvin add - create a task or project

USAGE:
  marvin add <title>
  marvin add task <title>
  marvin add project <title>
  marvin add --file <path>
  marvin add --file -

Titles are parsed by Marvin, so shortcuts such as +today, #Project,
@label or ~30m work as in the app.

With --file, a JSON object is sent as-is: {"db": "Categories", ...}
creates a project, anything else a task. Other content is sent as a
plain-text title. Use "-" to read from stdin.

EXAMPLE:
  marvin add "Buy milk +today"
  marvin add project "Q1 Planning"
  echo '{"db":"Tasks","title":"From JSON"}' | marvin add --file -
"""


def _read_input(file: str) -> str:
    """Read the content named by ``--file``."""
    if file == STDIN_SENTINEL:
        return sys.stdin.read()
    try:
        return Path(file).expanduser().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MarvinError(
            f"Cannot read {file}: {exc}", exit_code=EXIT_INVALID_USAGE
        ) from exc


def add_command(
    ctx: typer.Context,
    params: Optional[List[str]] = typer.Argument(
        None, help="Title, or 'task <title>' / 'project <title>'."
    ),
    file: Optional[str] = typer.Option(
        None, "--file", "-f", help="Read the item from a file ('-' for stdin)."
    ),
    show_help: bool = typer.Option(
        False, "--help", "-h", help="Show this message and exit."
    ),
) -> None:
    """Create a task or project.

    Example::

        marvin add "Buy milk +today"
        marvin add project "Q1 Planning"
        marvin add --file task.json
    """
    params = params or []
    content = None
    if file and not params and not show_help:
        content = _read_input(file)

    decision = decide(params, help=show_help, file=file, file_content=content)

    if decision.action == Action.SHOW_HELP:
        print_data(ADD_HELP)
        return

    if decision.action == Action.ERROR:
        message = decision.error_message or ""
        if file == STDIN_SENTINEL and message == FILE_EMPTY:
            message = STDIN_EMPTY
        raise ClassificationError(message, hint="Usage: marvin add --help")

    options = load_options(ctx)
    data = call_api(
        options,
        "POST",
        decision.endpoint_path,
        STANDARD,
        body=decision.body,
        content_type=decision.content_type.value,
    )
    kind = "project" if decision.action == Action.CREATE_PROJECT else "task"
    success(f"Added {kind}.")
    format_response(data)
