"""Tests for the serve command wiring."""

from unittest.mock import patch

import yaml
from typer.testing import CliRunner

from kota.cli.main import app
from kota.cli.server import build_server


def test_defaults_from_config(test_config):
    server = build_server(test_config)

    assert server.config.host == test_config.api.host
    assert server.config.port == test_config.api.port
    assert server.config.log_level == "info"


def test_flags_override_config(test_config):
    server = build_server(test_config, host="0.0.0.0", port=9999)

    assert (server.config.host, server.config.port) == ("0.0.0.0", 9999)


def test_app_serves_workspace_context(test_config):
    server = build_server(test_config)

    assert server.config.app.state.context.config is test_config


def test_serve_runs_server(tmp_path):
    (tmp_path / "config.user.yaml").write_text(
        yaml.dump({"llm": {"provider": "openai", "model": "gpt-4", "api_key": "k"}})
    )

    with (
        patch("kota.cli.server.setup_logging"),
        patch("kota.cli.server.uvicorn.Server.run") as mock_run,
    ):
        result = CliRunner().invoke(
            app, ["--workspace", str(tmp_path), "serve", "--port", "8123"]
        )

    assert result.exit_code == 0, result.output
    assert "http://127.0.0.1:8123" in result.output
    mock_run.assert_called_once()


def test_warns_when_tool_dispatch_enabled(tmp_path, caplog):
    (tmp_path / "config.user.yaml").write_text(
        yaml.dump(
            {
                "llm": {"provider": "openai", "model": "gpt-4", "api_key": "k"},
                "api": {"allow_tool_dispatch": True},
            }
        )
    )

    with (
        patch("kota.cli.server.setup_logging"),
        patch("kota.cli.server.uvicorn.Server.run"),
        caplog.at_level("WARNING", logger="kota.cli.server"),
    ):
        result = CliRunner().invoke(app, ["--workspace", str(tmp_path), "serve"])

    assert result.exit_code == 0, result.output
    assert "any client can run tools" in caplog.text
