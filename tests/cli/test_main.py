"""Tests for CLI main module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from kota.cli.main import app
from kota.core.history import HistoryStore, HistoryTurn

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace with a minimal user config."""
    (tmp_path / "config.user.yaml").write_text(
        yaml.dump({"llm": {"provider": "openai", "model": "gpt-4", "api_key": "k"}})
    )
    return tmp_path


def invoke(workspace: Path, *args: str):
    return runner.invoke(app, ["--workspace", str(workspace), *args])


def test_init_command_exists():
    """Test that init command is registered."""
    result = runner.invoke(app, ["init", "--help"])
    assert result.exit_code == 0
    assert "onboarding" in result.output.lower()


def test_auto_onboarding_when_config_missing(tmp_path):
    """Onboarding is offered when config is missing; declining exits."""
    workspace = tmp_path / "no-config"

    with patch("kota.cli.main.questionary.confirm") as mock_confirm:
        mock_confirm.return_value.ask.return_value = False
        result = runner.invoke(app, ["--workspace", str(workspace), "chat"])

    mock_confirm.assert_called_once()
    assert "No configuration found" in mock_confirm.call_args[0][0]
    assert result.exit_code == 1
    assert "kota init" in result.output


def test_invalid_config_exits(tmp_path):
    (tmp_path / "config.user.yaml").write_text("llm: {}\n")

    result = invoke(tmp_path, "skills", "list")

    assert result.exit_code == 1
    assert "Error loading config" in result.output


class TestSessionsCommands:
    def test_list_empty(self, workspace):
        result = invoke(workspace, "sessions", "list")

        assert result.exit_code == 0
        assert "No sessions stored." in result.output

    def test_list_and_show(self, workspace):
        store = HistoryStore(workspace / ".history")
        store.append("abc", HistoryTurn(role="user", content="hello there"))

        listed = invoke(workspace, "sessions", "list")
        shown = invoke(workspace, "sessions", "show", "abc")

        assert listed.exit_code == 0
        assert "abc" in listed.output
        assert shown.exit_code == 0
        assert "hello there" in shown.output

    def test_show_unknown(self, workspace):
        result = invoke(workspace, "sessions", "show", "ghost")

        assert result.exit_code == 1
        assert "Session not found" in result.output

    def test_delete(self, workspace):
        store = HistoryStore(workspace / ".history")
        store.append("abc", HistoryTurn(role="user", content="x"))

        result = invoke(workspace, "sessions", "delete", "abc")

        assert result.exit_code == 0
        assert not store.exists("abc")

    def test_delete_unknown(self, workspace):
        assert invoke(workspace, "sessions", "delete", "ghost").exit_code == 1


class TestSkillsCommands:
    def test_list(self, workspace):
        result = invoke(workspace, "skills", "list")

        assert result.exit_code == 0
        assert "code_review" in result.output

    def test_show(self, workspace):
        result = invoke(workspace, "skills", "show", "debug")

        assert result.exit_code == 0
        assert "Tools: execute_bash, read_file" in result.output

    def test_show_prompt(self, workspace):
        result = invoke(workspace, "skills", "show", "debug", "--prompt")

        assert result.exit_code == 0
        assert "[ACTIVE SKILL: debug]" in result.output
        assert "Available tools: execute_bash, read_file" in result.output

    def test_show_unknown(self, workspace):
        result = invoke(workspace, "skills", "show", "nope")

        assert result.exit_code == 1
        assert "Skill not found: nope" in result.output


class TestToolsCommands:
    def test_list(self, workspace):
        result = invoke(workspace, "tools", "list")

        assert result.exit_code == 0
        assert "read_file" in result.output
        assert "calculator" in result.output

    def test_run(self, workspace):
        target = workspace / "a.txt"
        target.write_text("file body")

        result = invoke(
            workspace, "tools", "run", "read_file", "--args", json.dumps({"path": str(target)})
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == {"result": "file body", "size_bytes": 9}

    def test_run_invalid_json(self, workspace):
        result = invoke(workspace, "tools", "run", "read_file", "--args", "{nope")

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_run_hidden_by_skill(self, workspace):
        result = invoke(
            workspace,
            "tools",
            "run",
            "execute_bash",
            "--args",
            '{"command": "echo hi"}',
            "--skill",
            "documentation",
        )

        assert result.exit_code == 1
        assert "not_found" in result.output

    def test_run_disabled_tool(self, workspace):
        result = invoke(
            workspace, "tools", "run", "calculator", "--args", '{"operation": "add", "a": 1, "b": 2}'
        )

        assert result.exit_code == 1
