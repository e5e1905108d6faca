# src/gist_agents/services/__init__.py
"""
Colaboradores externos consumidos pelos agentes.

Cada serviço possui mock mode determinístico e sem rede; é a base dos
testes do pipeline e do modo `--mock` da CLI.
"""

from .openai_service import OpenAIService
from .protocols import (
    ChatService,
    EmbeddingService,
    ImageService,
    SearchHit,
    TextToSpeechService,
    VectorSearch,
    WebScraper,
)
from .rag import RAGService
from .scraper import WebScraperService, parse_html
from .tts import GoogleTTSService
from .vector_store import InMemoryVectorStore

__all__ = [
    "ChatService",
    "EmbeddingService",
    "GoogleTTSService",
    "ImageService",
    "InMemoryVectorStore",
    "OpenAIService",
    "RAGService",
    "SearchHit",
    "TextToSpeechService",
    "VectorSearch",
    "WebScraper",
    "WebScraperService",
    "parse_html",
]
