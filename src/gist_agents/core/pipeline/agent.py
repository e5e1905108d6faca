# src/gist_agents/core/pipeline/agent.py
"""
Contrato canônico de Agent do pipeline.

Este módulo define o protocolo estrutural que todo estágio do pipeline deve
satisfazer para ser executado pelo `AgentPipeline`. O contrato é definido
via `typing.Protocol`, permitindo duck typing explícito: agentes de teste
não precisam herdar de `BaseAgent`.

Um Agent no Gist Agents:
    - possui um nome único no pipeline (`name`)
    - é inicializado uma única vez (`initialize`, idempotente)
    - reporta prontidão (`is_ready`)
    - valida a própria entrada sem efeitos colaterais (`validate`)
    - transforma um AgentContext em um AgentResult (`process`)

Decisões arquiteturais:
    - O contrato é mínimo e independente de implementação
    - `process` pode lançar exceção; o sequenciador converte em falha
    - `validate` nunca lança exceção para entrada malformada (retorna False)
    - O protocolo é verificável em tempo de execução (`runtime_checkable`)

Limites explícitos:
    - Não define lógica de domínio
    - Não controla ordem de execução
    - Não acessa outros agentes diretamente
"""

from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable

from .context import AgentContext
from .types import AgentResult


@runtime_checkable
class Agent(Protocol):
    """
    Protocolo estrutural que define o contrato mínimo de um Agent.

    Invariantes:
        - `name` é uma string não vazia e estável
        - `process` retorna sempre um AgentResult (ou lança exceção)
        - chamadas repetidas a `initialize` são no-ops
    """

    name: str

    def initialize(self) -> None:
        ...

    def is_ready(self) -> bool:
        ...

    def validate(self, value: Any) -> bool:
        ...

    def process(self, ctx: AgentContext) -> AgentResult:
        ...

    def get_name(self) -> str:
        ...

    def get_config(self) -> Dict[str, Any]:
        ...
