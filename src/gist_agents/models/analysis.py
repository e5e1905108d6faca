# src/gist_agents/models/analysis.py
"""
AnalysisResult: resultado imutável da análise de um artigo.

Produzido pelo AnalysisAgent e anexado ao AgentContext pelo sequenciador
(`with_analysis_result`) para consumo pelos agentes seguintes
(Interpret, Learning).

Campos principais:
    - translation_summary: resumo traduzido (texto base para Interpret/Learning)
    - key_points: pontos-chave em ordem
    - critical_analysis: mapa com `why_important` e `future_prediction` (ambos opcionais)
    - narration: texto de narração (também usado como entrada de TTS)
    - audio_url: URL do áudio gerado (quando TTS está habilitado)

Invariantes:
    - `with_audio_url` e `with_metadata` retornam novas instâncias
    - `with_metadata` faz merge (chaves novas sobrescrevem as existentes)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class AnalysisResult:
    translation_summary: str = ""
    key_points: Tuple[str, ...] = ()
    critical_analysis: Mapping[str, Any] = field(default_factory=dict)
    audio_url: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    news_title: Optional[str] = None
    narration: Optional[str] = None
    content_summary: Optional[str] = None
    original_title: Optional[str] = None
    author: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_points", tuple(str(p) for p in (self.key_points or ())))
        object.__setattr__(
            self, "critical_analysis", MappingProxyType(dict(self.critical_analysis or {}))
        )
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @property
    def why_important(self) -> Optional[str]:
        return self.critical_analysis.get("why_important")

    @property
    def future_prediction(self) -> Optional[str]:
        return self.critical_analysis.get("future_prediction")

    def with_audio_url(self, audio_url: Optional[str]) -> "AnalysisResult":
        return replace(self, audio_url=audio_url)

    def with_metadata(self, metadata: Mapping[str, Any]) -> "AnalysisResult":
        return replace(self, metadata={**self.metadata, **dict(metadata)})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "news_title": self.news_title,
            "original_title": self.original_title,
            "author": self.author,
            "translation_summary": self.translation_summary,
            "key_points": list(self.key_points),
            "narration": self.narration,
            "content_summary": self.content_summary,
            "critical_analysis": dict(self.critical_analysis),
            "audio_url": self.audio_url,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisResult":
        key_points: Sequence[Any] = data.get("key_points") or ()
        if isinstance(key_points, str):
            key_points = [key_points]
        return cls(
            translation_summary=str(data.get("translation_summary") or ""),
            key_points=tuple(key_points),
            critical_analysis=dict(data.get("critical_analysis") or {}),
            audio_url=data.get("audio_url"),
            metadata=dict(data.get("metadata") or {}),
            news_title=data.get("news_title"),
            narration=data.get("narration"),
            content_summary=data.get("content_summary"),
            original_title=data.get("original_title"),
            author=data.get("author"),
        )

    @classmethod
    def empty(cls) -> "AnalysisResult":
        return cls()
