# src/gist_agents/services/protocols.py
"""
Interfaces estreitas dos colaboradores externos consumidos pelos agentes.

Os agentes dependem apenas destes protocolos; implementações concretas
(OpenAIService, GoogleTTSService, WebScraperService, InMemoryVectorStore)
são injetadas pela fábrica do pipeline ou pelos testes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from gist_agents.models.article import ArticleData


@runtime_checkable
class ChatService(Protocol):
    def chat(
        self,
        system_prompt: str,
        user_prompt: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        ...

    def is_configured(self) -> bool:
        ...

    def is_mock_mode(self) -> bool:
        ...


@runtime_checkable
class ImageService(Protocol):
    def create_image(self, prompt: str, options: Optional[Mapping[str, Any]] = None) -> str:
        ...


@runtime_checkable
class TextToSpeechService(Protocol):
    def text_to_speech(self, text: str, options: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        ...


@runtime_checkable
class EmbeddingService(Protocol):
    def create_embedding(self, text: str) -> List[float]:
        ...


@runtime_checkable
class WebScraper(Protocol):
    def fetch(self, url: str) -> ArticleData:
        ...

    def is_accessible(self, url: str) -> bool:
        ...


@dataclass(frozen=True)
class SearchHit:
    """Resultado de busca vetorial."""

    text: str
    score: float
    source_id: str
    kind: str = "analysis"

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "score": self.score, "source_id": self.source_id, "kind": self.kind}


@runtime_checkable
class VectorSearch(Protocol):
    def search(self, query_vector: Sequence[float], top_k: int) -> List[SearchHit]:
        ...
