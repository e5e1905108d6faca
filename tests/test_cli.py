# tests/test_cli.py
"""Cobre: comando `gist-agents analyze` (saída JSON e códigos de saída)."""

import json

from typer.testing import CliRunner

from gist_agents.cli import EXIT_CLARIFICATION, EXIT_FAILURE, EXIT_SUCCESS, app

runner = CliRunner()
URL = "https://news.example.com/world/2026/trade-shift"


def _analyze(*args):
    return runner.invoke(app, ["analyze", *args, "--mock", "--log-level", "ERROR"])


def test_analyze_success_prints_json():
    result = _analyze(URL)
    assert result.exit_code == EXIT_SUCCESS
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["agents"][-1] == "LearningAgent"
    assert payload["final_analysis"]["key_points"]


def test_analyze_invalid_url_exits_with_failure():
    result = _analyze("not-a-url")
    assert result.exit_code == EXIT_FAILURE
    assert json.loads(result.stdout)["error"] == "Invalid URL format: not-a-url"


def test_analyze_with_config_file(tmp_path):
    config = tmp_path / "local.yaml"
    config.write_text("agents:\n  interpret:\n    min_query_length: 10000\n", encoding="utf-8")
    result = _analyze(URL, "--config", str(config), "--pretty")
    assert result.exit_code == EXIT_CLARIFICATION
    assert json.loads(result.stdout)["needs_clarification"] is True


def test_missing_config_file(tmp_path):
    result = _analyze(URL, "--config", str(tmp_path / "missing.yaml"))
    assert result.exit_code == EXIT_FAILURE


def test_invalid_config_type(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("pipeline: not-a-mapping\n", encoding="utf-8")
    result = _analyze(URL, "--config", str(config))
    assert result.exit_code == EXIT_FAILURE
    assert "PIPELINE_CONFIGURATION_ERROR" in result.output
