"""End-to-end tests for ``marvin add`` through the CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path

import httpx

from marvin_cli.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SUCCESS,
)


class TestUsage:
    def test_help_flag(self, run_cli, configured) -> None:
        result = run_cli("add", "--help")
        assert result.exit_code == EXIT_SUCCESS
        assert "marvin add" in result.stdout
        assert "EXAMPLE:" in result.stdout
        assert configured.requests == []

    def test_no_parameters(self, run_cli, configured) -> None:
        result = run_cli("add")
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "No parameters provided" in result.stderr
        assert "marvin add" in result.stderr
        assert configured.requests == []

    def test_task_without_title(self, run_cli, configured) -> None:
        result = run_cli("add", "task")
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Missing task title" in result.stderr
        assert configured.requests == []

    def test_project_without_title(self, run_cli, configured) -> None:
        result = run_cli("add", "project")
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Missing project title" in result.stderr

    def test_invalid_format(self, run_cli, configured) -> None:
        result = run_cli("add", "Buy", "milk")
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Invalid command format" in result.stderr

    def test_usage_errors_need_no_token(self, run_cli, isolated_config) -> None:
        result = run_cli("add", "task")
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Missing task title" in result.stderr


class TestPositional:
    def test_task_calls_add_task(self, run_cli, configured) -> None:
        result = run_cli("add", "Buy groceries")

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.url.path == "/api/addTask"
        assert request.content == b"Buy groceries"
        assert request.headers["content-type"] == "text/plain"
        assert request.headers["x-api-token"] == "api-tok"
        assert json.loads(result.stdout) == {"_id": "new-id"}
        assert "Added task" in result.stderr

    def test_project_calls_add_project(self, run_cli, configured) -> None:
        result = run_cli("add", "project", "Q1 Planning")

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.url.path == "/api/addProject"
        assert request.content == b"Q1 Planning"
        assert "Added project" in result.stderr

    def test_quiet_suppresses_status(self, run_cli, configured) -> None:
        result = run_cli("--quiet", "add", "task", "Buy milk")
        assert result.exit_code == EXIT_SUCCESS
        assert result.stderr == ""
        assert configured.requests[0].content == b"Buy milk"

    def test_api_error_exits_non_zero(self, run_cli, configured) -> None:
        configured.responses["desktop.test"] = httpx.Response(404, text="Task not found")

        result = run_cli("add", "Buy groceries")

        assert result.exit_code == EXIT_NOT_FOUND
        assert "404" in result.stderr
        assert configured.hosts == ["desktop.test"]

    def test_falls_back_to_public(self, run_cli, configured) -> None:
        configured.down.add("desktop.test")

        result = run_cli("add", "Buy groceries")

        assert result.exit_code == EXIT_SUCCESS
        assert configured.hosts == ["desktop.test", "public.test"]

    def test_public_flag_skips_desktop(self, run_cli, configured) -> None:
        result = run_cli("--public", "add", "Buy groceries")
        assert result.exit_code == EXIT_SUCCESS
        assert configured.hosts == ["public.test"]

    def test_desktop_flag_never_falls_back(self, run_cli, configured) -> None:
        configured.down.add("desktop.test")

        result = run_cli("--desktop", "add", "Buy groceries")

        assert result.exit_code == EXIT_CONNECTION_ERROR
        assert configured.hosts == ["desktop.test"]
        assert "Could not reach" in result.stderr

    def test_missing_token(self, run_cli, write_config, fake_api) -> None:
        write_config({"desktopUrl": "http://desktop.test:12082"})

        result = run_cli("add", "Buy groceries")

        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "No API token configured" in result.stderr
        assert "marvin config set apiToken" in result.stderr
        assert fake_api.requests == []


class TestStdin:
    def test_plain_text(self, run_cli, configured) -> None:
        result = run_cli("add", "--file", "-", stdin="Task from stdin +today")

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.url.path == "/api/addTask"
        assert request.content == b"Task from stdin +today"
        assert request.headers["content-type"] == "text/plain"

    def test_json(self, run_cli, configured) -> None:
        content = '{"db":"Tasks","title":"JSON task","done":false}'

        result = run_cli("add", "-f", "-", stdin=content)

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.url.path == "/api/addTask"
        assert request.content == content.encode()
        assert request.headers["content-type"] == "application/json"

    def test_empty_stdin(self, run_cli, configured) -> None:
        result = run_cli("add", "--file", "-", stdin="")

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Stdin was empty" in result.stderr
        assert configured.requests == []


class TestFile:
    def test_json_task(self, run_cli, configured, tmp_path: Path) -> None:
        content = '{"db":"Tasks","title":"Task from file","done":false}'
        path = tmp_path / "task.json"
        path.write_text(content, encoding="utf-8")

        result = run_cli("add", "--file", str(path))

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.url.path == "/api/addTask"
        assert request.content == content.encode()
        assert request.headers["content-type"] == "application/json"

    def test_plain_text(self, run_cli, configured, tmp_path: Path) -> None:
        path = tmp_path / "task.txt"
        path.write_text("Task from text file +tomorrow", encoding="utf-8")

        result = run_cli("add", "--file", str(path))

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.content == b"Task from text file +tomorrow"
        assert request.headers["content-type"] == "text/plain"

    def test_project_json(self, run_cli, configured, tmp_path: Path) -> None:
        content = '{"db":"Categories","title":"Project from file"}'
        path = tmp_path / "project.json"
        path.write_text(content, encoding="utf-8")

        result = run_cli("add", "--file", str(path))

        assert result.exit_code == EXIT_SUCCESS
        request = configured.requests[0]
        assert request.url.path == "/api/addProject"
        assert request.content == content.encode()
        assert request.headers["content-type"] == "application/json"

    def test_empty_file(self, run_cli, configured, tmp_path: Path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")

        result = run_cli("add", "--file", str(path))

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "File was empty" in result.stderr

    def test_missing_file(self, run_cli, configured, tmp_path: Path) -> None:
        result = run_cli("add", "--file", str(tmp_path / "nope.txt"))

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Cannot read" in result.stderr
        assert configured.requests == []
