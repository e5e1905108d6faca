# src/gist_agents/agents/analysis.py
"""Agente canônico: AnalysisAgent.

Responsabilidades:
- gerar a análise completa do artigo (tarefa `full_analysis`): título em
  coreano, resumo, pontos-chave, análise crítica e narração
- enriquecer o system prompt com críticas/análises passadas (RAG), quando disponível
- normalizar a narração para a audiência "지스터"
- gerar o áudio da narração (TTS)

Operações adicionais:
- `revise`: reanálise incorporando feedback editorial
- `translate` / `summarize`: utilitários de texto livre

Saída (sucesso):
- data: AnalysisResult.to_dict() com metadata de origem

Limites explícitos:
- Falha de TTS ou de RAG nunca é falha do agente
- Resposta não-JSON do LLM vira narração bruta (fallback), nunca resultado vazio
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from gist_agents.core.errors import external_service_error, utc_now_iso, validation_error
from gist_agents.core.exceptions import ExternalServiceError
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import ANALYSIS_AGENT, AgentResult
from gist_agents.models.analysis import AnalysisResult
from gist_agents.models.article import ArticleData
from gist_agents.utils.logging_config import log_step, log_warning

from .base import BaseAgent, extract_json

FALLBACK_KEY_POINTS = ["Check the analysis output."]
MIN_KEY_POINTS = 4

# audiência canônica da narração
_AUDIENCE_REPLACEMENTS = (
    ("시청자 여러분", "지스터 여러분"),
    ("청취자가", "지스터가"),
    ("청취자에게", "지스터에게"),
)


def normalize_narration(narration: Optional[str]) -> Optional[str]:
    if narration is None or not narration.strip():
        return narration
    for old, new in _AUDIENCE_REPLACEMENTS:
        narration = narration.replace(old, new)
    return narration


def truncate_content(content: str, max_chars: int) -> str:
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + "..."


class AnalysisAgent(BaseAgent):
    name = ANALYSIS_AGENT
    prompt_name = "analysis"

    def __init__(self, llm: Any, config=None, *, tts: Any = None, rag: Any = None, **kwargs: Any):
        super().__init__(llm, config, **kwargs)
        self.tts = tts
        self.rag = rag

    def default_config(self) -> Dict[str, Any]:
        return {
            "key_points_count": MIN_KEY_POINTS,
            "enable_tts": True,
            "tts_voice": "alloy",
            "max_content_chars": 40000,
            "use_rag": True,
        }

    def default_prompts(self) -> Dict[str, Any]:
        return {
            "system": 'You are the chief editor of "The Gist", writing Korean news briefings.',
            "tasks": {
                "full_analysis": {
                    "prompt": (
                        "Article URL: {url}\nTitle: {title}\nDescription: {description}\n"
                        "Content:\n{content}\n\n"
                        "Respond only in JSON with keys news_title, author, original_title, "
                        "content_summary, translation_summary, key_points (at least {key_points_count}), "
                        "critical_analysis (why_important, future_prediction) and narration."
                    )
                },
                "revise": {
                    "prompt": (
                        "Previous analysis:\n{original}\n\nEditor feedback:\n{feedback}\n{score_line}\n"
                        "Improve the analysis and respond only in JSON with the same keys."
                    )
                },
                "translate": {"prompt": "Translate the following text into {target_language}:\n\n{text}"},
                "summarize": {"prompt": "Summarize the following text in at most {max_length} characters:\n\n{text}"},
            },
        }

    def validate(self, value: Any) -> bool:
        article = value.article_data if isinstance(value, AgentContext) else value
        return isinstance(article, ArticleData) and bool((article.content or "").strip())

    # -----------------------------
    # Pipeline
    # -----------------------------
    def process(self, ctx: AgentContext) -> AgentResult:
        article = ctx.article_data
        if article is None:
            return AgentResult.from_error(
                validation_error(message="No article data; run ValidationAgent first", agent=self.name)
            )
        if not self.validate(article):
            return AgentResult.from_error(validation_error(message="Article content is empty", agent=self.name))

        self.logger.info("Analyzing article: %s", article.title)
        try:
            analysis = self.perform_full_analysis(article)
        except ExternalServiceError as exc:
            return AgentResult.from_error(
                external_service_error(message=f"Analysis failed: {exc}", agent=self.name)
            )

        if self.config.get("enable_tts", True):
            analysis = analysis.with_audio_url(self.generate_audio(analysis))

        analysis = analysis.with_metadata(
            {
                "source_url": article.url,
                "processed_at": utc_now_iso(),
                "agent": self.name,
                "original_language": article.language,
                "content_length": article.content_length,
            }
        )
        log_step(self.logger, self.name, f"{len(analysis.key_points)} key points")
        return AgentResult.ok(analysis.to_dict())

    def perform_full_analysis(self, article: ArticleData) -> AnalysisResult:
        prompt = self.format_prompt(
            self.get_prompt("full_analysis"),
            {
                "url": article.url,
                "title": article.title,
                "description": article.description or "",
                "content": truncate_content(article.content, int(self.config.get("max_content_chars", 40000))),
                "key_points_count": max(MIN_KEY_POINTS, int(self.config.get("key_points_count", MIN_KEY_POINTS))),
            },
        )
        query = f"{article.title} {article.content[:500]}"
        response = self.call_llm(prompt, task="full_analysis", system_prompt=self._system_prompt(query))
        return self._to_analysis(self._parse(response))

    def _system_prompt(self, query: str) -> Optional[str]:
        if self.rag is None or not self.config.get("use_rag", True):
            return None
        base = str(self.prompts.get("system", ""))
        try:
            if not self.rag.is_configured():
                return None
            context = self.rag.retrieve_relevant_context(query, 3)
            return self.rag.build_system_prompt_with_rag(base, context)
        except Exception as exc:
            log_warning(self.logger, f"RAG context unavailable: {exc}")
            return None

    def _parse(self, response: str) -> Dict[str, Any]:
        data = extract_json(response)
        if data is not None:
            return data
        log_warning(self.logger, f"Analysis response is not JSON ({len(response or '')} chars), using fallback")
        return {
            "narration": (response or "").strip(),
            "key_points": list(FALLBACK_KEY_POINTS),
            "critical_analysis": {},
        }

    @staticmethod
    def _to_analysis(data: Mapping[str, Any]) -> AnalysisResult:
        narration = normalize_narration(data.get("narration"))
        summary = data.get("translation_summary") or ""
        if not summary and narration:
            summary = narration[:200]
        key_points = data.get("key_points")
        if isinstance(key_points, str):
            key_points = [key_points]
        if not isinstance(key_points, (list, tuple)) or not key_points:
            key_points = list(FALLBACK_KEY_POINTS)
        critical = data.get("critical_analysis")
        return AnalysisResult(
            translation_summary=summary,
            key_points=tuple(str(p) for p in key_points),
            critical_analysis=critical if isinstance(critical, Mapping) else {},
            news_title=data.get("news_title"),
            narration=narration,
            content_summary=data.get("content_summary"),
            original_title=data.get("original_title"),
            author=data.get("author"),
        )

    # -----------------------------
    # Áudio
    # -----------------------------
    @staticmethod
    def build_tts_text(analysis: AnalysisResult) -> str:
        if analysis.narration:
            return analysis.narration
        parts: List[str] = []
        if analysis.translation_summary:
            parts.append(analysis.translation_summary)
        for i, point in enumerate(analysis.key_points, start=1):
            parts.append(f"{i}. {point}")
        return " ".join(parts)

    def generate_audio(self, analysis: AnalysisResult) -> str:
        text = self.build_tts_text(analysis)
        if not text.strip():
            return ""
        service = self.tts if self.tts is not None else self.llm
        try:
            url = service.text_to_speech(text, {"voice": self.config.get("tts_voice")})
        except ExternalServiceError as exc:
            log_warning(self.logger, f"TTS generation failed: {exc}")
            return ""
        return url or ""

    # -----------------------------
    # Operações adicionais
    # -----------------------------
    def revise(self, original: Mapping[str, Any], feedback: str, score: Optional[int] = None) -> Dict[str, Any]:
        """
        Reanalisa incorporando o feedback do editor.

        Retorna o dicionário de análise revisado (mesmo schema de
        `full_analysis`), com a narração normalizada.
        """
        self.initialize()
        prompt = self.format_prompt(
            self.get_prompt("revise"),
            {
                "original": json.dumps(dict(original), ensure_ascii=False, indent=2, default=str),
                "feedback": feedback,
                "score_line": f"Current quality score: {score}/10" if score is not None else "",
            },
        )
        query = f"{original.get('news_title') or ''} {feedback[:300]}"
        data = self._parse(self.call_llm(prompt, task="revise", system_prompt=self._system_prompt(query)))
        if data.get("narration") is not None:
            data["narration"] = normalize_narration(data["narration"])
        return data

    def translate(self, text: str, target_language: str = "Korean") -> str:
        self.initialize()
        prompt = self.format_prompt(self.get_prompt("translate"), {"text": text, "target_language": target_language})
        return self.call_llm(prompt, task="translate")

    def summarize(self, text: str, max_length: int = 500) -> str:
        self.initialize()
        prompt = self.format_prompt(self.get_prompt("summarize"), {"text": text, "max_length": max_length})
        return self.call_llm(prompt, task="summarize")
