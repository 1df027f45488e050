"""Read and complete items: ``today``, ``due``, ``get``, ``list``,
``children``, ``done`` and ``profile``.
"""

from __future__ import annotations

import enum
from typing import Optional

import typer

from marvin_cli.api import call_api, load_options
from marvin_cli.models import FULL_ACCESS
from marvin_cli.output import format_response, success


class ListKind(str, enum.Enum):
    categories = "categories"
    labels = "labels"


def today_command(
    ctx: typer.Context,
    date: Optional[str] = typer.Option(
        None, "--date", "-d", help="Day to list (YYYY-MM-DD). Defaults to today."
    ),
) -> None:
    """List tasks and projects scheduled for today."""
    options = load_options(ctx)
    format_response(call_api(options, "GET", "/api/todayItems", params={"date": date}))


def due_command(
    ctx: typer.Context,
    by: Optional[str] = typer.Option(
        None, "--by", help="Include items due on or before this day (YYYY-MM-DD)."
    ),
) -> None:
    """List tasks and projects that are due."""
    options = load_options(ctx)
    format_response(call_api(options, "GET", "/api/dueItems", params={"by": by}))


def get_command(
    ctx: typer.Context,
    item_id: str = typer.Argument(help="ID of the task, project or other document."),
) -> None:
    """Fetch a single document by ID.

    Reading arbitrary documents needs the full-access token.
    """
    options = load_options(ctx)
    format_response(call_api(options, "GET", f"/api/doc/{item_id}", FULL_ACCESS))


def list_command(
    ctx: typer.Context,
    kind: ListKind = typer.Argument(ListKind.categories, help="What to list."),
) -> None:
    """List projects and categories, or labels."""
    options = load_options(ctx)
    format_response(call_api(options, "GET", f"/api/{kind.value}"))


def children_command(
    ctx: typer.Context,
    parent_id: str = typer.Argument(help="ID of the parent project or category."),
) -> None:
    """List the items inside a project or category."""
    options = load_options(ctx)
    format_response(
        call_api(options, "GET", "/api/children", params={"parentId": parent_id})
    )


def done_command(
    ctx: typer.Context,
    item_id: str = typer.Argument(help="ID of the task to mark done."),
) -> None:
    """Mark a task as done."""
    options = load_options(ctx)
    data = call_api(options, "POST", "/api/markDone", json_body={"itemId": item_id})
    success(f"Marked {item_id} done.")
    format_response(data)


def profile_command(ctx: typer.Context) -> None:
    """Show the account the token belongs to."""
    options = load_options(ctx)
    format_response(call_api(options, "GET", "/api/me"))
