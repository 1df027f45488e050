"""The ``marvin api`` command -- call any endpoint directly.

Useful for endpoints without a dedicated command. The request still goes
through endpoint resolution and fallback like every other call.
"""

from __future__ import annotations

import json
from typing import Optional

import typer

from marvin_cli.api import call_api, load_options
from marvin_cli.models import Capability
from marvin_cli.output import format_response


def _guess_content_type(body: str) -> str:
    try:
        json.loads(body)
    except ValueError:
        return "text/plain"
    return "application/json"


def api_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Endpoint path, e.g. /api/categories."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    body: Optional[str] = typer.Option(None, "--body", "-d", help="Raw request body."),
    content_type: Optional[str] = typer.Option(
        None, "--content-type", help="Body content type (guessed when omitted)."
    ),
    full_access: bool = typer.Option(
        False, "--full-access", help="Send the full-access token."
    ),
    desktop_only: bool = typer.Option(
        False, "--desktop-only", help="Never fall back to the public API."
    ),
) -> None:
    """Call an API endpoint and print the response.

    Example::

        marvin api /api/labels
        marvin api /api/markDone -X POST -d '{"itemId": "abc"}'
    """
    options = load_options(ctx)
    if not path.startswith("/"):
        path = "/" + path
    if body is not None and content_type is None:
        content_type = _guess_content_type(body)
    capability = Capability(desktop_only=desktop_only, requires_full_access=full_access)
    format_response(
        call_api(options, method, path, capability, body=body, content_type=content_type)
    )
