# src/gist_agents/factory.py
"""Builder canônico: pipeline padrão do Gist Agents.

Monta o `AgentPipeline` na ordem canônica
(Validation → Thumbnail → Analysis → Interpret → Learning) a partir da
configuração efetiva (defaults empacotados + overrides) e injeta os
serviços compartilhados em cada agente.

Regras:
- `pipeline.mock_mode` é propagado ao OpenAIService, ao scraper e ao TTS
- `pipeline.enable_thumbnail|enable_interpret|enable_learning` controlam
  a presença dos agentes opcionais (Validation e Analysis são obrigatórios)
- Serviços informados explicitamente têm prioridade sobre os construídos aqui
- O Google TTS só é usado quando configurado; caso contrário o áudio vem
  do OpenAIService (que também responde em mock mode)

Config esperada (exemplo):

pipeline:
  mock_mode: true
  enable_learning: false
agents:
  analysis:
    enable_tts: false
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from gist_agents.agents import (
    AnalysisAgent,
    InterpretAgent,
    LearningAgent,
    ThumbnailAgent,
    ValidationAgent,
)
from gist_agents.core.config import deep_merge, load_defaults
from gist_agents.core.engine.pipeline import AgentPipeline
from gist_agents.services import (
    GoogleTTSService,
    InMemoryVectorStore,
    OpenAIService,
    RAGService,
    WebScraperService,
)


def _section(config: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = config.get(key)
    return dict(value) if isinstance(value, Mapping) else {}


def build_default_pipeline(
    config: Optional[Mapping[str, Any]] = None,
    *,
    llm: Any = None,
    scraper: Any = None,
    tts: Any = None,
    rag: Optional[RAGService] = None,
    logger: Optional[logging.Logger] = None,
) -> AgentPipeline:
    effective = deep_merge(load_defaults(), dict(config or {}))
    pipeline_cfg = _section(effective, "pipeline")
    agents_cfg = _section(effective, "agents")
    mock_mode = bool(pipeline_cfg.get("mock_mode", False))

    if llm is None:
        openai_cfg = _section(effective, "openai")
        openai_cfg["mock_mode"] = bool(openai_cfg.get("mock_mode")) or mock_mode
        llm = OpenAIService(openai_cfg)

    if scraper is None:
        scraper = WebScraperService(_section(effective, "scraper"), mock_mode=mock_mode)

    if tts is None:
        google = GoogleTTSService(_section(effective, "tts"), mock_mode=mock_mode)
        tts = google if google.is_configured() else None

    if rag is None:
        rag = RAGService(llm, InMemoryVectorStore(), logger=logger)

    pipeline = AgentPipeline(effective, llm=llm, logger=logger)
    pipeline.add_agent(ValidationAgent(llm, scraper, _section(agents_cfg, "validation")))
    if pipeline_cfg.get("enable_thumbnail", True):
        pipeline.add_agent(ThumbnailAgent(llm, _section(agents_cfg, "thumbnail")))
    pipeline.add_agent(AnalysisAgent(llm, _section(agents_cfg, "analysis"), tts=tts, rag=rag))
    if pipeline_cfg.get("enable_interpret", True):
        pipeline.add_agent(InterpretAgent(llm, _section(agents_cfg, "interpret"), rag=rag))
    if pipeline_cfg.get("enable_learning", True):
        pipeline.add_agent(LearningAgent(llm, _section(agents_cfg, "learning")))
    return pipeline
