"""
Gist Agents: Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros registrados durante a
execução do pipeline de agentes. Erros fazem parte do contrato operacional
do sistema e devem ser:

- explícitos
- serializáveis
- atribuídos a um agente
- datados (timestamp ISO-8601 UTC)

Erros aqui são *valores*, não exceções: eles são acumulados em
AgentContext e AgentResult. Exceções tipadas vivem em `core.exceptions`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_now_iso() -> str:
    """Timestamp ISO-8601 em UTC (com offset explícito)."""
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Entrada canônica
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorEntry:
    """
    Entrada canônica de erro.

    Campos:
    - message: mensagem curta e humana
    - agent: nome do agente responsável ("" quando desconhecido)
    - timestamp: momento do registro (ISO-8601 UTC)
    - type: código estável do erro (opcional, ver catálogo abaixo)
    """

    message: str
    agent: str = ""
    timestamp: str = field(default_factory=utc_now_iso)
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        out: Dict[str, Any] = {
            "message": self.message,
            "agent": self.agent,
            "timestamp": self.timestamp,
        }
        if self.type is not None:
            out["type"] = self.type
        return out


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Entrada / validação
VALIDATION_ERROR = "VALIDATION_ERROR"

# Serviços externos (rede, LLM, TTS, scraper)
EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

# Sequenciador / execução
AGENT_EXECUTION_ERROR = "AGENT_EXECUTION_ERROR"
AGENT_INITIALIZATION_ERROR = "AGENT_INITIALIZATION_ERROR"
AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
INVALID_RESULT_TYPE = "INVALID_RESULT_TYPE"
PIPELINE_CONFIGURATION_ERROR = "PIPELINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def validation_error(*, message: str, agent: str) -> ErrorEntry:
    return ErrorEntry(message=message, agent=agent, type=VALIDATION_ERROR)


def external_service_error(*, message: str, agent: str) -> ErrorEntry:
    return ErrorEntry(message=message, agent=agent, type=EXTERNAL_SERVICE_ERROR)


def agent_execution_error(*, agent: str, exc: BaseException) -> ErrorEntry:
    """Converte uma exceção inesperada em ErrorEntry prefixado com o agente."""
    detail = str(exc) or exc.__class__.__name__
    return ErrorEntry(
        message=f"[{agent}] {detail}",
        agent=agent,
        type=AGENT_EXECUTION_ERROR,
    )


def agent_not_found(*, name: str) -> ErrorEntry:
    return ErrorEntry(
        message=f"Agent not found: {name}",
        agent="Pipeline",
        type=AGENT_NOT_FOUND,
    )
