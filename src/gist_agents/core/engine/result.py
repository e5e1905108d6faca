# src/gist_agents/core/engine/result.py
"""
PipelineResult: registro terminal de uma execução do pipeline.

Carrega:
    - success: True apenas quando todos os agentes concluíram sem falha
    - results: nome → AgentResult, na ordem de execução
    - error: mensagem da falha que encerrou (ou da última falha tolerada)
    - needs_clarification / clarification_data: desfecho de clarificação
    - duration: tempo de parede em segundos
    - context: AgentContext final (artigo/análise acumulados)

Resultados de agentes anteriores são preservados mesmo quando a execução
é interrompida por falha ou clarificação.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import (
    ANALYSIS_AGENT,
    LEARNING_AGENT,
    AgentResult,
    to_plain,
)


@dataclass(frozen=True)
class PipelineResult:
    success: bool
    results: Mapping[str, AgentResult]
    context: AgentContext
    duration: float = 0.0
    error: Optional[str] = None
    needs_clarification: bool = False
    clarification_data: Optional[Mapping[str, Any]] = None
    mock_mode: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "results", MappingProxyType(dict(self.results or {})))
        if self.clarification_data is not None:
            object.__setattr__(
                self, "clarification_data", MappingProxyType(dict(self.clarification_data))
            )

    @property
    def agents(self) -> List[str]:
        return list(self.results.keys())

    @property
    def duration_ms(self) -> float:
        return round(self.duration * 1000, 2)

    def get_agent_result(self, name: str) -> Optional[AgentResult]:
        return self.results.get(name)

    def get_final_analysis(self) -> Any:
        """
        Resolve a análise final entregue ao chamador.

        Ordem de resolução:
            1. dados do AnalysisAgent, quando bem-sucedido
            2. saída do LearningAgent bem-sucedido (`output` se `styled`, senão `original`)
            3. None
        """
        analysis = self.results.get(ANALYSIS_AGENT)
        if analysis is not None and analysis.success:
            return to_plain(analysis.data)

        learning = self.results.get(LEARNING_AGENT)
        if learning is not None and learning.success:
            key = "output" if learning.get("styled") else "original"
            value = learning.get(key)
            return to_plain(value) if value is not None else None

        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "needs_clarification": self.needs_clarification,
            "clarification_data": to_plain(self.clarification_data)
            if self.clarification_data is not None
            else None,
            "duration_ms": self.duration_ms,
            "agents": self.agents,
            "results": {name: r.to_dict() for name, r in self.results.items()},
            "final_analysis": self.get_final_analysis(),
        }

    def to_json(self, *, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent, default=str)
