# src/gist_agents/__init__.py
"""
Gist Agents: pipeline de agentes para análise de artigos de notícia.

Este pacote raiz define o namespace público do Gist Agents: uma sequência
linear de agentes (Validation → Thumbnail → Analysis → Interpret → Learning)
que transforma a URL de uma notícia em uma análise estruturada gerada por IA.

Arquitetura em alto nível:
    - core.config    → carregamento e merge de configuração
    - core.pipeline  → contexto imutável, resultado tri-state, contrato de Agent
    - core.engine    → sequenciador do pipeline e PipelineResult
    - core.retry     → política de retry para chamadas externas
    - models         → ArticleData e AnalysisResult
    - services       → clientes externos (chat, TTS, embeddings, scraper, RAG)
    - agents         → os cinco agentes concretos

Limites explícitos:
    - Não persiste resultados (responsabilidade do chamador)
    - Não expõe camada HTTP
    - Não executa agentes em paralelo
"""

from .core.engine.pipeline import AgentPipeline
from .core.engine.result import PipelineResult
from .core.pipeline.context import AgentContext
from .core.pipeline.types import AgentOutcome, AgentResult
from .factory import build_default_pipeline

__all__ = [
    "AgentContext",
    "AgentOutcome",
    "AgentPipeline",
    "AgentResult",
    "PipelineResult",
    "build_default_pipeline",
]

__version__ = "0.1.0"
