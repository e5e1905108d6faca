# src/gist_agents/agents/learning.py
"""Agente canônico: LearningAgent.

Responsabilidades:
- aprender padrões de escrita de textos de exemplo (tarefa `analyze_patterns`)
- persistir/carregar os padrões em `<storage_path>/patterns.json` (opcional)
- checar se a direção da análise é clara antes de reescrever (resultado parcial)
- reescrever a análise no estilo aprendido (tarefa `apply_style`)

Saída (sucesso):
- sem padrões: {styled: False, reason, original}
- com padrões: {styled: True, patterns_applied, output, original}

Limites explícitos:
- NÃO altera o AnalysisResult do contexto (a saída estilizada é um payload à parte)
- Resposta não-JSON do LLM nunca é falha (fallbacks permissivos)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from gist_agents.core.errors import external_service_error, utc_now_iso, validation_error
from gist_agents.core.exceptions import ExternalServiceError
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import LEARNING_AGENT, AgentResult
from gist_agents.models.analysis import AnalysisResult
from gist_agents.utils.logging_config import log_step

from .base import BaseAgent, extract_json, parse_confidence

PATTERNS_FILE = "patterns.json"


class LearningAgent(BaseAgent):
    name = LEARNING_AGENT
    prompt_name = "learning"

    def __init__(self, llm: Any, config=None, **kwargs: Any):
        super().__init__(llm, config, **kwargs)
        self._samples: List[Dict[str, Any]] = []
        self._patterns: Dict[str, Any] = {}

    def default_config(self) -> Dict[str, Any]:
        return {
            "storage_path": "",
            "min_summary_length": 50,
            "clarification_threshold": 0.6,
            "style_options": ["economic impact", "political implications", "technical aspects"],
        }

    def default_prompts(self) -> Dict[str, Any]:
        return {
            "system": "You learn an author's writing style and rewrite analyses in that style. Respond in JSON.",
            "tasks": {
                "analyze_patterns": {
                    "prompt": (
                        "Extract the writing patterns of the author of these texts:\n\n{text}\n\n"
                        "Respond in JSON with keys style, common_patterns, emphasis, unique_expressions."
                    )
                },
                "check_clarity": {
                    "prompt": (
                        "Is the direction of this analysis clear?\nAnalysis: {summary}\n\n"
                        "Respond in JSON with keys is_clear, confidence, question, reason."
                    )
                },
                "apply_style": {
                    "prompt": (
                        "Rewrite the analysis below using the learned style patterns.\n"
                        "Patterns: {patterns}\n\nSummary: {summary}\nKey points:\n{key_points}\n\n"
                        "Respond in JSON with keys styled_text and patterns_applied."
                    )
                },
            },
        }

    def on_initialize(self) -> None:
        if not self._patterns:
            self._load_stored_patterns()

    def validate(self, value: Any) -> bool:
        return isinstance(value, AgentContext) and value.analysis_result is not None

    # -----------------------------
    # Padrões
    # -----------------------------
    def _storage_file(self) -> Optional[Path]:
        path = str(self.config.get("storage_path") or "")
        return Path(path) / PATTERNS_FILE if path else None

    def _load_stored_patterns(self) -> None:
        file = self._storage_file()
        if file is None or not file.is_file():
            return
        with file.open("r", encoding="utf-8") as f:
            stored = json.load(f)
        self._patterns = dict(stored.get("patterns") or {})
        self._samples = list(stored.get("samples") or [])
        self.logger.info("Loaded stored patterns from %s", file)

    def _save_patterns(self) -> None:
        file = self._storage_file()
        if file is None:
            return
        file.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "patterns": self._patterns,
            "samples": self._samples,
            "updated_at": utc_now_iso(),
            "sample_count": len(self._samples),
        }
        with file.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def add_sample_text(self, text: str, metadata: Optional[Mapping[str, Any]] = None) -> None:
        self._samples.append({"text": text, "metadata": dict(metadata or {}), "added_at": utc_now_iso()})

    def learn(self) -> Dict[str, Any]:
        """Extrai padrões dos textos de exemplo; retorna os padrões aprendidos."""
        if not self._samples:
            return {"error": "No sample texts to learn from"}

        self.initialize()
        combined = "\n\n---\n\n".join(s["text"] for s in self._samples)
        prompt = self.format_prompt(self.get_prompt("analyze_patterns"), {"text": combined})
        response = self.call_llm(prompt, task="analyze_patterns")

        patterns = extract_json(response)
        if patterns is None:
            patterns = {
                "style": {"formality": "formal", "tone": "analytical", "detail_level": "detailed"},
                "common_patterns": [],
                "raw_analysis": response,
            }
        self._patterns = patterns
        self._save_patterns()
        self.logger.info("Learned patterns from %d samples", len(self._samples))
        return dict(patterns)

    def load_patterns(self, patterns: Mapping[str, Any]) -> None:
        self._patterns = dict(patterns)

    def get_learned_patterns(self) -> Dict[str, Any]:
        return dict(self._patterns)

    def has_learned_patterns(self) -> bool:
        return bool(self._patterns)

    def reset_patterns(self) -> None:
        self._patterns = {}
        self._samples = []
        file = self._storage_file()
        if file is not None and file.exists():
            file.unlink()

    # -----------------------------
    # Pipeline
    # -----------------------------
    def process(self, ctx: AgentContext) -> AgentResult:
        if not self.validate(ctx):
            return AgentResult.from_error(
                validation_error(message="No analysis result to apply a style to", agent=self.name)
            )

        analysis = ctx.analysis_result
        original = analysis.to_dict()
        if not self._patterns:
            self.logger.info("No learned patterns, returning original")
            return AgentResult.ok(
                {"styled": False, "reason": "No learned patterns; run learn() first", "original": original}
            )

        try:
            clarification = self.check_clarification(analysis)
            if clarification is not None:
                return AgentResult.clarify(clarification)
            output = self.apply_style(analysis)
        except ExternalServiceError as exc:
            return AgentResult.from_error(
                external_service_error(message=f"Style application failed: {exc}", agent=self.name)
            )

        log_step(self.logger, self.name, "style applied")
        return AgentResult.ok(
            {
                "styled": True,
                "patterns_applied": list(self._patterns.keys()),
                "output": output,
                "original": original,
            }
        )

    def check_clarification(self, analysis: AnalysisResult) -> Optional[Dict[str, Any]]:
        """Payload de clarificação quando a direção da análise é vaga; None quando clara."""
        summary = analysis.translation_summary or ""
        options = list(self.config.get("style_options") or [])
        if len(summary) < int(self.config.get("min_summary_length", 50)):
            return {
                "needs_clarification": True,
                "clarification_question": f"From which perspective should the analysis go deeper? ({', '.join(options)})",
                "reason": "Analysis summary is too short",
                "style_options": options,
            }

        prompt = self.format_prompt(self.get_prompt("check_clarity"), {"summary": summary})
        verdict = extract_json(self.call_llm(prompt, task="check_clarity"))
        if verdict is None or "is_clear" not in verdict:
            return None

        confidence = parse_confidence(verdict.get("confidence"), 1.0)
        if verdict.get("is_clear") and confidence >= float(self.config.get("clarification_threshold", 0.6)):
            return None
        return {
            "needs_clarification": True,
            "clarification_question": verdict.get("question") or "Please describe the analysis direction more specifically.",
            "reason": verdict.get("reason") or "Analysis direction is unclear",
            "style_options": options,
        }

    def apply_style(self, analysis: AnalysisResult) -> Dict[str, Any]:
        prompt = self.format_prompt(
            self.get_prompt("apply_style"),
            {
                "patterns": json.dumps(self._patterns, ensure_ascii=False),
                "summary": analysis.translation_summary,
                "key_points": "\n".join(f"- {p}" for p in analysis.key_points),
            },
        )
        styled = extract_json(self.call_llm(prompt, task="apply_style"))
        return styled if styled is not None else analysis.to_dict()
