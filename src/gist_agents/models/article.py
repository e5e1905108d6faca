# src/gist_agents/models/article.py
"""
ArticleData: artigo extraído de uma URL de notícia.

Valor imutável produzido pelo scraper (via ValidationAgent) e, opcionalmente,
re-enriquecido pelo ThumbnailAgent (troca de imagem).

Invariantes:
    - Campos derivados (content_length, word_count) são calculados, não armazenados
    - `with_image_url` reconstrói o objeto inteiro; a instância original não muda
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class ArticleData:
    url: str
    title: str
    content: str
    description: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[str] = None
    image_url: Optional[str] = None
    language: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @property
    def content_length(self) -> int:
        return len(self.content or "")

    @property
    def word_count(self) -> int:
        return len((self.content or "").split())

    def with_image_url(self, image_url: str) -> "ArticleData":
        return replace(self, image_url=image_url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "description": self.description,
            "author": self.author,
            "published_at": self.published_at,
            "image_url": self.image_url,
            "language": self.language,
            "content_length": self.content_length,
            "word_count": self.word_count,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArticleData":
        """Aceita chaves snake_case e as variantes camelCase (`publishedAt`, `imageUrl`)."""
        return cls(
            url=str(data.get("url") or ""),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            description=data.get("description"),
            author=data.get("author"),
            published_at=data.get("published_at", data.get("publishedAt")),
            image_url=data.get("image_url", data.get("imageUrl")),
            language=data.get("language"),
            metadata=dict(data.get("metadata") or {}),
        )
