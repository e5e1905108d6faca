# src/gist_agents/models/__init__.py
"""Modelos de domínio imutáveis: ArticleData e AnalysisResult."""

from .analysis import AnalysisResult
from .article import ArticleData

__all__ = ["AnalysisResult", "ArticleData"]
