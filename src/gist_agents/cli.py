# src/gist_agents/cli.py
"""
CLI do Gist Agents (`gist-agents`).

Comandos:
    analyze URL   executa o pipeline padrão e imprime o PipelineResult em JSON

Códigos de saída:
    0 → sucesso
    1 → falha (agente falhou ou configuração inválida)
    2 → clarificação necessária
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from gist_agents.core.config import ConfigError, deep_merge, load_config
from gist_agents.core.errors import PIPELINE_CONFIGURATION_ERROR, ErrorEntry
from gist_agents.factory import build_default_pipeline
from gist_agents.utils.logging_config import log_error, setup_logging

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CLARIFICATION = 2

app = typer.Typer(
    name="gist-agents",
    help="News-article analysis agent pipeline.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Gist Agents: analyse news articles with a pipeline of AI agents."""


def _config_failure(logger: logging.Logger, message: str) -> None:
    log_error(logger, message)
    entry = ErrorEntry(message=message, agent="Pipeline", type=PIPELINE_CONFIGURATION_ERROR)
    typer.echo(json.dumps({"success": False, "error": message, "errors": [entry.to_dict()]}))
    raise typer.Exit(code=EXIT_FAILURE)


@app.command()
def analyze(
    url: str = typer.Argument(..., help="URL of the news article to analyse"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML/JSON file with config overrides"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help=".env file with API keys"),
    mock: Optional[bool] = typer.Option(None, "--mock/--no-mock", help="Force mock mode on or off"),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR"),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the JSON output"),
) -> None:
    """Run the default pipeline on URL and print the result as JSON."""
    setup_logging(log_level, quiet_mode=log_level.upper() != "DEBUG")
    logger = logging.getLogger("gist_agents.cli")

    if config is not None and not config.exists():
        _config_failure(logger, f"Config file not found: {config}")

    try:
        effective = load_config(local_path=config, env_file=env_file)
        if mock is not None:
            effective = deep_merge(effective, {"pipeline": {"mock_mode": mock}})
        pipeline = build_default_pipeline(effective, logger=logging.getLogger("gist_agents.pipeline"))
    except ConfigError as exc:
        _config_failure(logger, f"Invalid configuration: {exc}")

    if pipeline.is_mock_mode():
        logger.info("Running in mock mode (no external API calls)")

    result = pipeline.run(url)
    typer.echo(result.to_json(indent=2 if pretty else None))

    if result.needs_clarification:
        raise typer.Exit(code=EXIT_CLARIFICATION)
    if not result.success:
        raise typer.Exit(code=EXIT_FAILURE)


if __name__ == "__main__":
    app()
