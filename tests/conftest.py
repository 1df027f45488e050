"""Shared test fixtures for marvin_cli.

Provides isolated config directories, output state management, option
builders, and a fake HTTP layer built on :class:`httpx.MockTransport`.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from marvin_cli.dispatcher import ApiDispatcher
from marvin_cli.models import OptionConfig
from marvin_cli.output import OutputManager, reset_output, set_output


DESKTOP_URL = "http://desktop.test:12082"
PUBLIC_URL = "https://public.test"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset the global OutputManager after every test and disable colour.

    The OutputManager caches references to sys.stderr at creation time, so
    a manager left over from one test would write to another test's closed
    capture stream.
    """
    monkeypatch.setenv("NO_COLOR", "1")
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    and forces the XDG code path so that tests never touch real user
    config on any platform.

    Returns:
        The config file path (``<tmp>/config/marvin-cli/config.json``).
    """
    monkeypatch.setattr("marvin_cli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path / "config" / "marvin-cli" / "config.json"


@pytest.fixture
def write_config(isolated_config: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a helper that writes a persisted config file."""

    def _write(data: dict[str, Any]) -> Path:
        isolated_config.parent.mkdir(parents=True, exist_ok=True)
        isolated_config.write_text(json.dumps(data), encoding="utf-8")
        return isolated_config

    return _write


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


def _make_options(**overrides: Any) -> OptionConfig:
    """Build an OptionConfig pointing at the fake desktop and public hosts."""
    values: dict[str, Any] = {
        "api_token": "api-tok",
        "full_access_token": "full-tok",
        "desktop_url": DESKTOP_URL,
        "public_url": PUBLIC_URL,
    }
    values.update(overrides)
    return OptionConfig(**values)


@pytest.fixture
def make_options() -> Callable[..., OptionConfig]:
    return _make_options


@pytest.fixture
def options() -> OptionConfig:
    return _make_options()


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Fake HTTP layer
# ---------------------------------------------------------------------------


class FakeServers:
    """Records requests and answers them per host.

    ``down`` holds hosts that refuse connections; ``responses`` maps a host
    to the response it returns for every request.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.down: set[str] = set()
        self.responses: dict[str, httpx.Response] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host in self.down:
            raise httpx.ConnectError("Connection refused", request=request)
        response = self.responses.get(host)
        if response is None:
            return httpx.Response(200, json={"_id": "new-id"})
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]


@pytest.fixture
def servers() -> FakeServers:
    return FakeServers()


@pytest.fixture
def fake_api(servers: FakeServers, monkeypatch: pytest.MonkeyPatch) -> FakeServers:
    """Route every call made through :func:`marvin_cli.api.call_api` to *servers*."""

    def _dispatcher(timeout: float = 5.0) -> ApiDispatcher:
        return ApiDispatcher(timeout=timeout, transport=servers.transport)

    monkeypatch.setattr("marvin_cli.api.ApiDispatcher", _dispatcher)
    return servers


# ---------------------------------------------------------------------------
# End-to-end CLI fixtures
# ---------------------------------------------------------------------------


class CliResult:
    def __init__(self, exit_code: int, stdout: str, stderr: str) -> None:
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


@pytest.fixture
def run_cli(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    """Return a helper running :func:`marvin_cli.app.main` with *argv*.

    The helper captures the exit code and both output streams. SIGINT
    handling is left to pytest.
    """
    from marvin_cli.app import main

    monkeypatch.setattr("marvin_cli.app._setup_signal_handlers", lambda: None)

    def _run(*argv: str, stdin: str | None = None) -> CliResult:
        if stdin is not None:
            import io

            monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
        capsys.readouterr()
        with pytest.raises(SystemExit) as exc_info:
            main(list(argv))
        code = exc_info.value.code
        captured = capsys.readouterr()
        return CliResult(code if isinstance(code, int) else 0, captured.out, captured.err)

    return _run


@pytest.fixture
def configured(write_config, fake_api: FakeServers) -> FakeServers:
    """A persisted config with both tokens, pointing at the fake servers."""
    write_config(
        {
            "apiToken": "api-tok",
            "fullAccessToken": "full-tok",
            "desktopUrl": DESKTOP_URL,
            "publicUrl": PUBLIC_URL,
        }
    )
    return fake_api
