# src/gist_agents/utils/__init__.py
from .logging_config import get_agent_logger, setup_logging

__all__ = ["get_agent_logger", "setup_logging"]
