# src/gist_agents/utils/logging_config.py
"""
Configuração de logging (Rich) do Gist Agents.

Agentes e sequenciador nunca configuram handlers: recebem um
`logging.Logger` por injeção no construtor. Apenas pontos de entrada
(CLI) chamam `setup_logging`.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Console compartilhado para saída consistente
console = Console(stderr=True)

NOISY_LIBRARIES = ("httpx", "httpcore", "urllib3", "asyncio")


def setup_logging(level: str = "INFO", quiet_mode: bool = False) -> None:
    """
    Configura o logger raiz com RichHandler.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR).
        quiet_mode: Se True, silencia bibliotecas de terceiros ruidosas.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        markup=True,
        log_time_format="[%H:%M:%S]",
    )
    rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    root_logger.addHandler(rich_handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if quiet_mode:
        for lib in NOISY_LIBRARIES:
            logging.getLogger(lib).setLevel(logging.ERROR)


def get_agent_logger(agent_name: str) -> logging.Logger:
    """Logger canônico de um agente: `gist_agents.agents.<nome>`."""
    return logging.getLogger(f"gist_agents.agents.{agent_name}")


def log_step(logger: logging.Logger, step: str, details: Optional[str] = None) -> None:
    """Registra uma etapa concluída com estilo Rich."""
    if details:
        logger.info(f"[green]✓[/green] [bold]{step}[/bold]: {details}")
    else:
        logger.info(f"[green]✓[/green] [bold]{step}[/bold]")


def log_warning(logger: logging.Logger, message: str) -> None:
    logger.warning(f"[yellow]⚠[/yellow] {message}")


def log_error(logger: logging.Logger, message: str) -> None:
    logger.error(f"[red]✗[/red] {message}")
