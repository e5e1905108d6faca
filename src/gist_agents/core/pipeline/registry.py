# src/gist_agents/core/pipeline/registry.py
"""
Registro ordenado de agentes do pipeline.

O `AgentRegistry` preserva a ordem de registro (que é a ordem de execução)
e garante unicidade de nomes antes de qualquer execução.

Decisões arquiteturais:
    - Nomes duplicados são erro do chamador, rejeitado no registro
    - A busca por nome é uma varredura linear (primeiro match)
    - O registry não executa nem inicializa agentes

Invariantes:
    - A lista de agentes reflete exatamente a ordem de registro
    - Cada nome aparece no máximo uma vez
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from gist_agents.core.exceptions import DuplicateAgentNameError

from .agent import Agent


def agent_name(agent: Agent) -> str:
    """Nome do agente via `get_name()` quando disponível, senão atributo `name`."""
    getter = getattr(agent, "get_name", None)
    name = getter() if callable(getter) else getattr(agent, "name", None)
    if not isinstance(name, str) or not name.strip():
        raise ValueError("agent name must be a non-empty string")
    return name


@dataclass
class AgentRegistry:
    _agents: List[Agent] = field(default_factory=list, init=False, repr=False)

    def add(self, agent: Agent) -> None:
        name = agent_name(agent)
        if self.get(name) is not None:
            raise DuplicateAgentNameError(
                f"Duplicate agent name: {name}",
                details={"name": name, "registered": self.names()},
            )
        self._agents.append(agent)

    def get(self, name: str) -> Optional[Agent]:
        for agent in self._agents:
            if agent_name(agent) == name:
                return agent
        return None

    def list(self) -> List[Agent]:
        return list(self._agents)

    def names(self) -> List[str]:
        return [agent_name(a) for a in self._agents]

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(list(self._agents))
