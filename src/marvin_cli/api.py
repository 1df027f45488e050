"""Glue between the Typer commands and the request-resolution core.

Commands never build URLs or headers themselves. They obtain the effective
options with :func:`load_options` and perform calls through
:func:`call_api`, which strings together endpoint resolution, credential
selection and the fallback dispatcher:

    options -> candidates() + credential_for() -> ApiDispatcher.call()
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import typer

from marvin_cli.auth import credential_for
from marvin_cli.config import load_persisted_config, resolve_options
from marvin_cli.dispatcher import ApiDispatcher
from marvin_cli.models import STANDARD, Capability, OptionConfig
from marvin_cli.output import OutputManager, set_output
from marvin_cli.resolver import candidates

_OPTIONS_KEY = "options"


def load_options(ctx: typer.Context) -> OptionConfig:
    """Return the effective options for this invocation.

    On first use, merges the compiled-in defaults, the persisted config and
    the flags stored in ``ctx.obj`` by the root callback, then installs an
    :class:`~marvin_cli.output.OutputManager` matching the result. The
    options are cached on the root context so every later call returns the
    same instance.

    Raises:
        ConfigError: If the persisted config or a flag holds an invalid value.
    """
    root = ctx.find_root()
    root.ensure_object(dict)
    options = root.obj.get(_OPTIONS_KEY)
    if options is None:
        flags = root.obj.get("flags", {})
        options = resolve_options(None, load_persisted_config(), flags)
        set_output(
            OutputManager(
                format=options.output_format,
                no_color=root.obj.get("no_color", False),
                quiet=options.quiet,
                verbose=options.verbose,
            )
        )
        root.obj[_OPTIONS_KEY] = options
    return options


def call_api(
    options: OptionConfig,
    method: str,
    path: str,
    capability: Capability = STANDARD,
    *,
    body: Optional[str] = None,
    content_type: Optional[str] = None,
    json_body: Any = None,
    params: Optional[dict[str, Any]] = None,
) -> Any:
    """Perform an API call and return the decoded response body.

    Args:
        options: Effective options for this invocation.
        method: HTTP method.
        path: Endpoint path, e.g. ``/api/todayItems``.
        capability: The operation's endpoint and credential requirements.
        body: Raw body sent verbatim with *content_type*.
        content_type: ``Content-Type`` for *body*.
        json_body: JSON-serialisable body; takes the place of *body*.
        params: Query parameters; ``None`` values are dropped.

    Returns:
        The decoded JSON body, the raw text, or ``None`` for an empty body.

    Raises:
        ConfigError: The required token is missing.
        ApiError: The reached server answered with an error status.
        TransportError: No endpoint could be reached.
    """
    if json_body is not None:
        body = json.dumps(json_body)
        content_type = "application/json"

    query = {k: v for k, v in (params or {}).items() if v is not None}
    dispatcher = ApiDispatcher(timeout=options.timeout)
    response = dispatcher.call(
        method,
        path,
        body,
        content_type,
        candidates(options, capability),
        credential_for(options, capability),
        params=query or None,
    )
    return extract_response_data(response)


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (the create
    endpoints may answer with plain text), returns the raw text. Returns
    ``None`` for responses with no content.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
