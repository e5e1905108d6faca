# src/gist_agents/agents/__init__.py
"""
Agentes concretos do Gist Agents.

Ordem canônica do pipeline:
    ValidationAgent → ThumbnailAgent → AnalysisAgent → InterpretAgent → LearningAgent
"""

from .analysis import AnalysisAgent
from .base import BaseAgent, extract_json
from .interpret import InterpretAgent
from .learning import LearningAgent
from .thumbnail import ThumbnailAgent
from .validation import ValidationAgent

__all__ = [
    "AnalysisAgent",
    "BaseAgent",
    "InterpretAgent",
    "LearningAgent",
    "ThumbnailAgent",
    "ValidationAgent",
    "extract_json",
]
