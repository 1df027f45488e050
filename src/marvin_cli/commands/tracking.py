"""Time tracking: ``tracking`` shows the running timer, ``track`` starts or
stops one.

The running timer lives in the desktop app, so ``tracking`` never falls
back to the public API.
"""

from __future__ import annotations

import enum

import typer

from marvin_cli.api import call_api, load_options
from marvin_cli.models import DESKTOP_ONLY
from marvin_cli.output import format_response, info, success


class TrackAction(str, enum.Enum):
    start = "start"
    stop = "stop"


def tracking_command(ctx: typer.Context) -> None:
    """Show the task currently being tracked."""
    options = load_options(ctx)
    data = call_api(options, "GET", "/api/tracking", DESKTOP_ONLY)
    if not data:
        info("Nothing is being tracked.")
        return
    format_response(data)


def track_command(
    ctx: typer.Context,
    action: TrackAction = typer.Argument(help="start or stop."),
    task_id: str = typer.Argument(help="ID of the task."),
) -> None:
    """Start or stop time tracking for a task."""
    options = load_options(ctx)
    data = call_api(
        options,
        "POST",
        "/api/track",
        json_body={"taskId": task_id, "action": action.value.upper()},
    )
    success(f"Tracking {'started' if action == TrackAction.start else 'stopped'}.")
    format_response(data)
