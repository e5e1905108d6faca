# src/gist_agents/core/pipeline/context.py
"""
Contexto imutável de execução do pipeline de agentes.

O `AgentContext` é o único estado que flui entre agentes. Ele carrega a URL
em processamento e é enriquecido progressivamente (artigo extraído,
resultado de análise, metadados, erros, trilha de auditoria).

Decisões arquiteturais:
    - O contexto é um valor imutável (frozen dataclass)
    - Toda "mutação" (`with_*`, `mark_processed_by`) retorna uma NOVA instância
      construída a partir do estado anterior + um único delta
    - Mapas são expostos como somente-leitura e listas como tuplas, então dois
      ramos que compartilham um snapshot nunca observam escritas um do outro
    - `is_valid` vira False no primeiro erro e nunca volta a True

Invariantes:
    - `metadata["created_at"]` existe desde a construção
    - `errors` e `processed_by` só crescem (nunca são removidos)
    - `processed_by` está em ordem de execução
    - `started_at` é capturado na construção e preservado nas derivações

Limites explícitos:
    - Não executa agentes
    - Não persiste estado
    - Não conhece a política de parada do sequenciador

Este módulo existe para que snapshots de contexto possam ser retomados
(ex.: após uma clarificação) sem efeitos colaterais entre execuções.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from gist_agents.core.errors import ErrorEntry, utc_now_iso
from gist_agents.models.analysis import AnalysisResult
from gist_agents.models.article import ArticleData


@dataclass(frozen=True)
class ProcessingRecord:
    """Entrada da trilha de auditoria: agente, momento e tempo acumulado."""

    agent: str
    timestamp: str
    elapsed_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {"agent": self.agent, "timestamp": self.timestamp, "elapsed_ms": self.elapsed_ms}


@dataclass(frozen=True)
class AgentContext:
    """
    Contexto imutável compartilhado entre agentes.

    Args:
        url: URL em processamento (definida uma única vez).
        article_data: Artigo extraído (pode ser substituído por estágios posteriores).
        analysis_result: Resultado da análise (após o AnalysisAgent).
        metadata: Anotações livres; `created_at` sempre presente.
        errors: Erros acumulados.
        is_valid: False após o primeiro erro registrado.
        processed_by: Trilha de auditoria (um registro por agente bem-sucedido).
        started_at: Relógio monotônico capturado na construção.
    """

    url: str
    article_data: Optional[ArticleData] = None
    analysis_result: Optional[AnalysisResult] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    errors: Tuple[ErrorEntry, ...] = ()
    is_valid: bool = True
    processed_by: Tuple[ProcessingRecord, ...] = ()
    started_at: float = field(default_factory=time.monotonic)

    def __post_init__(self) -> None:
        meta = dict(self.metadata or {})
        meta.setdefault("created_at", utc_now_iso())
        object.__setattr__(self, "metadata", MappingProxyType(meta))
        object.__setattr__(self, "errors", tuple(self.errors or ()))
        object.__setattr__(self, "processed_by", tuple(self.processed_by or ()))
        if self.errors and self.is_valid:
            object.__setattr__(self, "is_valid", False)

    # -----------------------------
    # Derivações (sempre nova instância)
    # -----------------------------
    def with_article_data(self, article: ArticleData) -> "AgentContext":
        return replace(self, article_data=article)

    def with_analysis_result(self, analysis: AnalysisResult) -> "AgentContext":
        return replace(self, analysis_result=analysis)

    def with_metadata(self, key: str, value: Any) -> "AgentContext":
        return replace(self, metadata={**self.metadata, key: value})

    def with_error(self, error: Any, agent: str = "") -> "AgentContext":
        """Registra um erro (str ou ErrorEntry) e invalida o contexto."""
        entry = error if isinstance(error, ErrorEntry) else ErrorEntry(message=str(error), agent=agent)
        return replace(self, errors=self.errors + (entry,), is_valid=False)

    def mark_processed_by(self, agent: str) -> "AgentContext":
        record = ProcessingRecord(
            agent=agent,
            timestamp=utc_now_iso(),
            elapsed_ms=self.elapsed_ms,
        )
        return replace(self, processed_by=self.processed_by + (record,))

    # -----------------------------
    # Leitura
    # -----------------------------
    @property
    def elapsed_ms(self) -> float:
        return round((time.monotonic() - self.started_at) * 1000, 2)

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    @property
    def processed_agents(self) -> Tuple[str, ...]:
        return tuple(r.agent for r in self.processed_by)

    def to_result(self) -> Dict[str, Any]:
        """Visão serializável do contexto (para resposta ao chamador e logs)."""
        return {
            "url": self.url,
            "article": self.article_data.to_dict() if self.article_data else None,
            "analysis": self.analysis_result.to_dict() if self.analysis_result else None,
            "metadata": dict(self.metadata),
            "errors": [e.to_dict() for e in self.errors],
            "processed_by": [r.to_dict() for r in self.processed_by],
            "is_valid": self.is_valid,
            "elapsed_ms": self.elapsed_ms,
        }
