# src/gist_agents/core/engine/__init__.py
"""
Engine do Gist Agents.

Componentes principais:
    - pipeline → AgentPipeline: sequenciador linear com política
      stop / continue / clarify
    - result   → PipelineResult: registro terminal de uma execução

Invariantes:
    - Agentes executam estritamente na ordem de registro
    - Cada agente é executado no máximo uma vez por run
    - `run()` sempre retorna um PipelineResult
"""

from .pipeline import AgentPipeline
from .result import PipelineResult

__all__ = ["AgentPipeline", "PipelineResult"]
