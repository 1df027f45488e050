"""Classify ``marvin add`` input into a routing decision.

:func:`decide` is a pure function: it never reads files, touches the
network, prints, or exits. The command layer reads the file (or stdin)
first and hands over its content, then acts on the returned
:class:`~marvin_cli.models.RoutingDecision`.

Accepted shapes::

    marvin add "Buy milk"               -> task, text/plain
    marvin add task "Buy milk"          -> task, text/plain
    marvin add project "Q1 Planning"    -> project, text/plain
    marvin add --file item.json         -> task or project, application/json
    marvin add --file notes.txt         -> task, text/plain
    echo "Buy milk" | marvin add -f -   -> task, text/plain

Only a document starting with ``{`` is sniffed as JSON. Arrays and
malformed JSON are sent as plain text.
"""

from __future__ import annotations

import json
from typing import Optional, Sequence

from marvin_cli.models import Action, ContentType, RoutingDecision

ADD_TASK_PATH = "/api/addTask"
ADD_PROJECT_PATH = "/api/addProject"

# The ``db`` value the service uses for projects and categories.
PROJECT_DB = "Categories"

FILE_EMPTY = "File was empty"
NO_PARAMETERS = "No parameters provided"
INVALID_FORMAT = "Invalid command format"


def decide(
    params: Sequence[str],
    help: bool = False,
    file: Optional[str] = None,
    file_content: Optional[str] = None,
) -> RoutingDecision:
    """Decide what ``marvin add`` should do.

    Args:
        params: Positional arguments, e.g. ``["task", "Buy milk"]``.
        help: Whether ``--help`` was passed.
        file: The ``--file`` value, if any (``-`` means stdin).
        file_content: The content of *file*, already read by the caller.

    Returns:
        The routing decision. Bad input yields an ``ERROR`` decision
        rather than an exception.
    """
    if help:
        return RoutingDecision(action=Action.SHOW_HELP)

    if not params and file:
        return _decide_from_content(file_content or "")

    if not params:
        return RoutingDecision.error(NO_PARAMETERS)

    if len(params) == 1 and params[0] in ("task", "project"):
        return RoutingDecision.error(f"Missing {params[0]} title")

    if len(params) == 1 or (len(params) == 2 and params[0] == "task"):
        return RoutingDecision.create(
            Action.CREATE_TASK, ADD_TASK_PATH, params[-1], ContentType.TEXT
        )

    if len(params) == 2 and params[0] == "project":
        return RoutingDecision.create(
            Action.CREATE_PROJECT, ADD_PROJECT_PATH, params[1], ContentType.TEXT
        )

    return RoutingDecision.error(INVALID_FORMAT)


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def _decide_from_content(content: str) -> RoutingDecision:
    """Route file or stdin content, sniffing JSON objects."""
    if not content.strip():
        return RoutingDecision.error(FILE_EMPTY)

    if content[0] == "{":
        try:
            item = json.loads(content, parse_constant=_reject_constant)
        except ValueError:
            pass
        else:
            if isinstance(item, dict) and item.get("db") == PROJECT_DB:
                return RoutingDecision.create(
                    Action.CREATE_PROJECT, ADD_PROJECT_PATH, content, ContentType.JSON
                )
            return RoutingDecision.create(
                Action.CREATE_TASK, ADD_TASK_PATH, content, ContentType.JSON
            )

    return RoutingDecision.create(
        Action.CREATE_TASK, ADD_TASK_PATH, content, ContentType.TEXT
    )
