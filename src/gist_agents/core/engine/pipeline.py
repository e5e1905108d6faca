# src/gist_agents/core/engine/pipeline.py
"""
Sequenciador do pipeline de agentes do Gist Agents.

O `AgentPipeline` possui a lista ordenada de agentes, conduz o
AgentContext através deles e produz o PipelineResult terminal.

Máquina de estados (por chamada a `run(url)`):
    - Start: contexto novo a partir da URL; cada agente registrado é
      inicializado uma única vez por instância de pipeline
    - Executing(agente i): `agent.process(ctx)`
        - exceção → AgentResult de falha com mensagem "[<agente>] <erro>";
          Failed se `stop_on_failure`, senão segue com o contexto inalterado
        - falha dura → Failed se `stop_on_failure`, senão segue
        - parcial (clarificação) → NeedsClarification, sempre
        - sucesso → merge de `article` (e, no AnalysisAgent, da análise)
          no contexto, anotações em metadata e registro na trilha de auditoria
    - Completed / Failed / NeedsClarification: terminais

Ajustes (Guardrails):
    - Exceções de agentes nunca escapam de `run()`; são convertidas em
      ErrorEntry (serializável, sem stack trace para o chamador)
    - Retorno de tipo inválido em `process()` é falha tipada (INVALID_RESULT_TYPE)
    - Payload de sucesso que não pode ser incorporado ao contexto (ex.:
      `critical_analysis` não-mapeável) vira falha do próprio agente
    - Falha de `initialize()` é falha tipada (AGENT_INITIALIZATION_ERROR)
      e sempre interrompe a execução
    - Falhas não alteram o contexto repassado aos agentes seguintes; o
      contexto final do PipelineResult é um snapshot derivado que registra
      todas as falhas via `with_error`

Limites explícitos:
    - Não executa agentes em paralelo nem reordena
    - Não chama serviços externos (apenas os agentes o fazem)
    - Não persiste resultados
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from gist_agents.core.errors import (
    AGENT_INITIALIZATION_ERROR,
    INVALID_RESULT_TYPE,
    ErrorEntry,
    agent_execution_error,
    agent_not_found,
)
from gist_agents.core.pipeline.agent import Agent
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.registry import AgentRegistry, agent_name
from gist_agents.core.pipeline.types import ANALYSIS_AGENT, AgentResult
from gist_agents.models.analysis import AnalysisResult
from gist_agents.models.article import ArticleData

from .result import PipelineResult


class AgentPipeline:
    """Sequenciador canônico do Gist Agents."""

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        llm: Any = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config: Dict[str, Any] = dict(config or {})
        self._llm = llm
        self._logger = logger or logging.getLogger("gist_agents.pipeline")
        self._registry = AgentRegistry()
        self._initialized: set = set()
        self._results: Dict[str, AgentResult] = {}
        self._last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Configuração
    # ------------------------------------------------------------------
    def _section(self) -> Mapping[str, Any]:
        section = self.config.get("pipeline")
        return section if isinstance(section, Mapping) else self.config

    def _stop_on_failure(self) -> bool:
        return bool(self._section().get("stop_on_failure", True))

    def is_mock_mode(self) -> bool:
        if self._llm is not None and hasattr(self._llm, "is_mock_mode"):
            return bool(self._llm.is_mock_mode())
        return bool(self._section().get("mock_mode", False))

    # ------------------------------------------------------------------
    # Registro
    # ------------------------------------------------------------------
    def add_agent(self, agent: Agent) -> "AgentPipeline":
        self._registry.add(agent)
        return self

    def get_agent(self, name: str) -> Optional[Agent]:
        return self._registry.get(name)

    def get_agent_names(self) -> List[str]:
        return self._registry.names()

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    def _ensure_initialized(self, agent: Agent) -> Optional[AgentResult]:
        name = agent_name(agent)
        if name in self._initialized:
            return None
        try:
            agent.initialize()
        except Exception as exc:
            self._logger.error("Agent %s failed to initialize: %s", name, exc, exc_info=True)
            return AgentResult.fail(
                f"[{name}] initialization failed: {exc}",
                agent=name,
                error_type=AGENT_INITIALIZATION_ERROR,
            )
        self._initialized.add(name)
        return None

    def _execute(self, agent: Agent, ctx: AgentContext) -> AgentResult:
        name = agent_name(agent)
        try:
            result = agent.process(ctx)
        except Exception as exc:
            self._logger.error("Agent %s raised: %s", name, exc, exc_info=True)
            return AgentResult.from_error(agent_execution_error(agent=name, exc=exc))

        if not isinstance(result, AgentResult):
            return AgentResult.fail(
                f"[{name}] process() must return AgentResult, got {type(result).__name__}",
                agent=name,
                error_type=INVALID_RESULT_TYPE,
            )
        return result

    def _merge_success(self, name: str, result: AgentResult, ctx: AgentContext) -> AgentContext:
        data = result.data

        article = data.get("article")
        if isinstance(article, ArticleData):
            ctx = ctx.with_article_data(article)
        elif isinstance(article, Mapping):
            ctx = ctx.with_article_data(ArticleData.from_dict(article))

        if name == ANALYSIS_AGENT and ("key_points" in data or "translation_summary" in data):
            ctx = ctx.with_analysis_result(AnalysisResult.from_dict(data))

        for key, value in result.annotations.items():
            ctx = ctx.with_metadata(key, value)

        return ctx.mark_processed_by(name)

    def _finish(
        self,
        ctx: AgentContext,
        *,
        started: float,
        failures: List[ErrorEntry],
        needs_clarification: bool = False,
        clarification_data: Optional[Mapping[str, Any]] = None,
    ) -> PipelineResult:
        final_ctx = ctx
        for entry in failures:
            final_ctx = final_ctx.with_error(entry)

        result = PipelineResult(
            success=not failures and not needs_clarification,
            results=self._results,
            context=final_ctx,
            duration=time.perf_counter() - started,
            error=self._last_error,
            needs_clarification=needs_clarification,
            clarification_data=clarification_data if needs_clarification else None,
            mock_mode=self.is_mock_mode(),
        )
        self._logger.info(
            "Pipeline finished: success=%s clarification=%s agents=%s duration_ms=%s",
            result.success,
            result.needs_clarification,
            result.agents,
            result.duration_ms,
        )
        return result

    def run(self, url: str) -> PipelineResult:
        """
        Executa todos os agentes registrados sobre a URL informada.

        Nunca lança exceção: falhas, exceções e clarificações são refletidas
        no PipelineResult retornado.
        """
        started = time.perf_counter()
        self._results = {}
        self._last_error = None
        failures: List[ErrorEntry] = []

        ctx = AgentContext(url=url)
        agents = self._registry.list()
        stop_on_failure = self._stop_on_failure()

        self._logger.info(
            "Pipeline started: url=%s agents=%s mock_mode=%s",
            url,
            self._registry.names(),
            self.is_mock_mode(),
        )

        for agent in agents:
            init_failure = self._ensure_initialized(agent)
            if init_failure is not None:
                name = agent_name(agent)
                self._results[name] = init_failure
                self._last_error = init_failure.first_error
                failures.extend(init_failure.errors)
                return self._finish(ctx, started=started, failures=failures)

        for agent in agents:
            name = agent_name(agent)
            self._logger.info("Running agent %s", name)
            result = self._execute(agent, ctx)

            merged: Optional[AgentContext] = None
            if result.success:
                try:
                    merged = self._merge_success(name, result, ctx)
                except Exception as exc:
                    self._logger.error("Agent %s returned an unusable payload: %s", name, exc, exc_info=True)
                    result = AgentResult.from_error(agent_execution_error(agent=name, exc=exc))

            self._results[name] = result

            if result.is_partial:
                self._logger.info("Agent %s needs clarification; halting", name)
                return self._finish(
                    ctx,
                    started=started,
                    failures=failures,
                    needs_clarification=True,
                    clarification_data=result.data,
                )

            if result.is_failure:
                message = result.first_error or f"[{name}] failed"
                self._last_error = message
                failures.extend(result.errors or (ErrorEntry(message=message, agent=name),))
                self._logger.warning("Agent %s failed: %s", name, message)
                if stop_on_failure:
                    return self._finish(ctx, started=started, failures=failures)
                continue

            if merged is not None:
                ctx = merged

        return self._finish(ctx, started=started, failures=failures)

    def run_agent(self, name: str, ctx: AgentContext) -> AgentResult:
        """Executa um único agente (inicializando-o se necessário) sem rodar os demais."""
        agent = self.get_agent(name)
        if agent is None:
            return AgentResult.from_error(agent_not_found(name=name))

        init_failure = self._ensure_initialized(agent)
        if init_failure is not None:
            return init_failure

        return self._execute(agent, ctx)

    # ------------------------------------------------------------------
    # Inspeção
    # ------------------------------------------------------------------
    def get_results(self) -> Dict[str, AgentResult]:
        return dict(self._results)

    def get_final_result(self) -> Optional[AgentResult]:
        if not self._results:
            return None
        return list(self._results.values())[-1]

    def get_last_error(self) -> Optional[str]:
        return self._last_error
