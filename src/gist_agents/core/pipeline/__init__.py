# src/gist_agents/core/pipeline/__init__.py
"""
# Pipeline Core: Gist Agents

Este pacote define os **contratos canônicos** e as **estruturas de dados**
que fluem pelo pipeline de agentes.

## Componentes

- **types**
  - `AgentOutcome`: desfecho tri-state (SUCCESS / FAILURE / NEEDS_CLARIFICATION)
  - `AgentResult`: resultado imutável da execução de um agente

- **context**
  - `AgentContext`: contexto imutável (URL, artigo, análise, metadata, erros, auditoria)
  - `ProcessingRecord`: entrada da trilha de auditoria

- **agent**
  - `Agent` (Protocol): contrato mínimo que todo agente deve satisfazer

- **registry**
  - `AgentRegistry`: ordem de registro e unicidade de nomes

## Princípios Fundamentais

- Agentes **não conhecem** o sequenciador nem outros agentes
- Comunicação entre agentes ocorre **apenas via AgentContext**
- Nenhuma estrutura deste pacote é mutável após a construção (exceto o registry)
"""

from .agent import Agent
from .context import AgentContext, ProcessingRecord
from .registry import AgentRegistry
from .types import AgentOutcome, AgentResult

__all__ = [
    "Agent",
    "AgentContext",
    "AgentOutcome",
    "AgentRegistry",
    "AgentResult",
    "ProcessingRecord",
]
