# src/gist_agents/core/pipeline/types.py
"""
Tipos canônicos de resultado de agente.

Este módulo define o resultado de execução de um agente (`AgentResult`) e
o seu desfecho tri-state (`AgentOutcome`). O desfecho é explícito: o
sequenciador nunca precisa inferir "clarificação" a partir de um booleano
combinado com chaves auxiliares de metadata.

Desfechos:
    - SUCCESS: o agente concluiu; `data` é mesclado ao contexto
    - FAILURE: falha dura; `errors` contém ao menos uma entrada
    - NEEDS_CLARIFICATION: resultado parcial; `data` é o payload de
      clarificação entregue ao operador, e o pipeline sempre é interrompido

Invariantes:
    - AgentResult é imutável (frozen dataclass, mapas somente-leitura)
    - `success` é True apenas para SUCCESS
    - `is_partial` é True apenas para NEEDS_CLARIFICATION

Limites explícitos:
    - Não executa agentes
    - Não decide política de parada (responsabilidade do sequenciador)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from gist_agents.core.errors import ErrorEntry

# Nomes canônicos dos agentes consultados pelo sequenciador e pelo PipelineResult.
VALIDATION_AGENT = "ValidationAgent"
THUMBNAIL_AGENT = "ThumbnailAgent"
ANALYSIS_AGENT = "AnalysisAgent"
INTERPRET_AGENT = "InterpretAgent"
LEARNING_AGENT = "LearningAgent"

# Chave de metadata cujo conteúdo é copiado para o AgentContext em caso de sucesso.
ANNOTATIONS_KEY = "annotations"


class AgentOutcome(str, Enum):
    """Desfecho tri-state da execução de um agente."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEEDS_CLARIFICATION = "needs_clarification"


@dataclass(frozen=True)
class AgentResult:
    """
    Resultado imutável da execução de um agente.

    Campos:
        outcome: desfecho tri-state
        data: payload do agente (artigo, análise, clarificação, ...)
        errors: erros estruturados (ordem de registro)
        metadata: metadados livres; `metadata["annotations"]` é mesclado
            ao contexto pelo sequenciador quando o desfecho é SUCCESS
    """

    outcome: AgentOutcome
    data: Mapping[str, Any] = field(default_factory=dict)
    errors: Tuple[ErrorEntry, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcome", AgentOutcome(self.outcome))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data or {})))
        object.__setattr__(self, "errors", tuple(self.errors or ()))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    # -----------------------------
    # Fábricas
    # -----------------------------
    @classmethod
    def ok(
        cls,
        data: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "AgentResult":
        return cls(outcome=AgentOutcome.SUCCESS, data=data or {}, metadata=metadata or {})

    @classmethod
    def fail(
        cls,
        message: str,
        agent: str = "",
        metadata: Optional[Mapping[str, Any]] = None,
        *,
        error_type: Optional[str] = None,
    ) -> "AgentResult":
        entry = ErrorEntry(message=message, agent=agent, type=error_type)
        return cls(outcome=AgentOutcome.FAILURE, errors=(entry,), metadata=metadata or {})

    @classmethod
    def from_error(
        cls,
        entry: ErrorEntry,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "AgentResult":
        return cls(outcome=AgentOutcome.FAILURE, errors=(entry,), metadata=metadata or {})

    @classmethod
    def clarify(
        cls,
        data: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> "AgentResult":
        return cls(
            outcome=AgentOutcome.NEEDS_CLARIFICATION,
            data=data or {},
            metadata=metadata or {},
        )

    # aliases; `success` é o predicado (property) e não uma fábrica
    failure = fail
    partial = clarify

    # -----------------------------
    # Predicados
    # -----------------------------
    @property
    def success(self) -> bool:
        return self.outcome is AgentOutcome.SUCCESS

    @property
    def is_partial(self) -> bool:
        return self.outcome is AgentOutcome.NEEDS_CLARIFICATION

    @property
    def is_failure(self) -> bool:
        return self.outcome is AgentOutcome.FAILURE

    # -----------------------------
    # Acesso
    # -----------------------------
    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None

    @property
    def annotations(self) -> Mapping[str, Any]:
        raw = self.metadata.get(ANNOTATIONS_KEY) or {}
        return raw if isinstance(raw, Mapping) else {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "outcome": self.outcome.value,
            "data": to_plain(self.data),
            "errors": [e.to_dict() for e in self.errors],
            "metadata": to_plain(self.metadata),
        }

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent, default=str)


def to_plain(value: Any) -> Any:
    """Converte mapas somente-leitura e tuplas em estruturas JSON-compatíveis."""
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value
