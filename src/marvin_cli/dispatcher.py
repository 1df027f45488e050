"""Execute one API call against an ordered list of endpoint candidates.

:class:`ApiDispatcher` wraps :class:`httpx.Client` and implements the
desktop-to-public fallback:

- **One attempt per candidate** -- each base URL is tried at most once,
  bounded by the configured timeout. There is no retry and no backoff.
- **Fallback on transport failure only** -- when a candidate cannot be
  reached (connection refused, timeout, network error) the next one is
  tried. Any HTTP response, including 4xx and 5xx, ends the walk, and so
  does any other :class:`httpx.TransportError` such as a dropped connection.
- **Error mapping** -- non-2xx responses raise
  :class:`~marvin_cli.exceptions.ApiError` with the status code; a
  transport failure on the last candidate raises
  :class:`~marvin_cli.exceptions.TransportError`.

See Also:
    :func:`~marvin_cli.resolver.candidates` -- produces the candidate list.
    :func:`~marvin_cli.auth.credential_for` -- produces the credential.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import httpx

from marvin_cli.auth import Credential
from marvin_cli.exceptions import ApiError, TransportError
from marvin_cli.output import get_output

_TRANSPORT_ERRORS = (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError)


class ApiDispatcher:
    """Send a request to the first reachable endpoint candidate.

    Args:
        timeout: Per-attempt timeout in seconds.
        transport: Optional httpx transport, used by tests to fake servers.

    Example::

        dispatcher = ApiDispatcher(timeout=5.0)
        response = dispatcher.call(
            "POST", "/api/addTask", "Buy milk", "text/plain",
            ("http://localhost:12082", "https://serv.amazingmarvin.com"),
            credential,
        )
    """

    def __init__(
        self,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    def call(
        self,
        method: str,
        endpoint_path: str,
        body: Optional[str | bytes],
        content_type: Optional[str],
        candidates: Sequence[str],
        credential: Credential,
        params: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Perform the request, falling back across *candidates*.

        Args:
            method: HTTP method (GET, POST, ...).
            endpoint_path: Path appended to each base URL, e.g. ``/api/addTask``.
            body: Raw request body, sent verbatim.
            content_type: ``Content-Type`` header for *body*.
            candidates: Base URLs in the order they should be tried.
            credential: Token header attached to every attempt.
            params: Optional query parameters.

        Returns:
            The first HTTP response with a status below 400.

        Raises:
            ApiError: A reached server answered with status >= 400.
            TransportError: No candidate could be reached.
        """
        if not candidates:
            raise TransportError("No endpoints to try")

        headers: dict[str, str] = {"Accept": "application/json"}
        headers.update(credential.headers)
        if body is not None and content_type:
            headers["Content-Type"] = content_type

        output = get_output()
        with httpx.Client(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            for index, base_url in enumerate(candidates):
                url = base_url.rstrip("/") + endpoint_path
                output.debug(f"{method.upper()} {url}")
                try:
                    response = client.request(
                        method.upper(),
                        url,
                        headers=headers,
                        params=params,
                        content=body,
                    )
                except _TRANSPORT_ERRORS as exc:
                    if index < len(candidates) - 1:
                        output.debug(
                            f"{base_url} unreachable ({exc}), trying {candidates[index + 1]}"
                        )
                        continue
                    raise TransportError(
                        f"Could not reach {base_url}: {exc}",
                        hint="Is the desktop app running? Otherwise check your network connection.",
                    ) from exc
                except httpx.TransportError as exc:
                    # Not a connect failure: no fallback.
                    raise TransportError(f"Request to {base_url} failed: {exc}") from exc

                _raise_for_status(response)
                return response

        raise TransportError("No endpoints to try")  # pragma: no cover


def _raise_for_status(response: httpx.Response) -> None:
    """Raise :class:`ApiError` for error HTTP status codes."""
    status = response.status_code
    if status < 400:
        return

    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("error") or ""
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    hint = None
    if status in (401, 403):
        hint = "Check your token with: marvin config show"
    raise ApiError(status, str(msg).strip(), hint=hint)
