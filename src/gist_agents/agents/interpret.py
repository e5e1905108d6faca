# src/gist_agents/agents/interpret.py
"""Agente canônico: InterpretAgent.

Responsabilidades:
- validar a consulta alvo (`metadata["query"]` ou o resumo da análise)
- pedir clarificação quando a consulta é curta ou vaga (resultado parcial)
- recuperar padrões relevantes do knowledge base (RAG, limiar de similaridade)
- produzir a interpretação estruturada (tópico, subtópicos, direção, perguntas)

Saída (sucesso):
- data: {interpretation, matched_patterns, query_valid, confidence, pass_to_next}
- anotação `interpretation`

Limites explícitos:
- NÃO reescreve a análise
- Resposta não-JSON do LLM nunca é falha (fallbacks permissivos)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from gist_agents.core.errors import external_service_error, validation_error
from gist_agents.core.exceptions import ExternalServiceError
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import INTERPRET_AGENT, AgentResult
from gist_agents.services.rag import KIND_ANALYSIS, RAGService
from gist_agents.utils.logging_config import log_step

from .base import BaseAgent, extract_json, parse_confidence

DEFAULT_CLARIFICATION = "Could you describe more specifically which aspect of the news you want analysed?"


class InterpretAgent(BaseAgent):
    name = INTERPRET_AGENT
    prompt_name = "interpret"

    def __init__(self, llm: Any, config=None, *, rag: Optional[RAGService] = None, **kwargs: Any):
        super().__init__(llm, config, **kwargs)
        self.rag = rag

    def default_config(self) -> Dict[str, Any]:
        return {"relevance_threshold": 0.7, "top_k": 5, "min_query_length": 5}

    def default_prompts(self) -> Dict[str, Any]:
        return {
            "system": "You interpret news queries and propose an analysis direction. Respond in JSON.",
            "tasks": {
                "validate_query": {
                    "prompt": (
                        "Decide whether this query is valid and useful for news analysis.\n"
                        "Query: {query}\n\n"
                        "Respond in JSON with keys is_valid, reason, clarification_question, confidence."
                    )
                },
                "clarify": {
                    "prompt": (
                        "The query below is unclear.\nQuery: {query}\nProblem: {reason}\n"
                        "Write one or two friendly clarification questions."
                    )
                },
                "interpret": {
                    "prompt": (
                        "Interpret the following query or article content and propose an analysis direction.\n"
                        "Content: {query}\n{patterns}\n"
                        "Respond in JSON with keys main_topic, sub_topics, analysis_direction, "
                        "key_questions, confidence."
                    )
                },
            },
        }

    def validate(self, value: Any) -> bool:
        if not isinstance(value, AgentContext):
            return False
        return value.analysis_result is not None or bool(value.get_metadata("query"))

    # -----------------------------
    # Knowledge base
    # -----------------------------
    def load_knowledge_base(self, documents: Iterable[Mapping[str, Any]]) -> int:
        """Indexa documentos `{id?, text, type?}`; retorna o número de chunks indexados."""
        if self.rag is None:
            self.rag = RAGService(self.llm, logger=self.logger)
        stored = 0
        for position, doc in enumerate(documents):
            text = str(doc.get("text") or doc.get("content") or "")
            if not text.strip():
                continue
            source_id = str(doc.get("id", f"doc-{position}"))
            stored += self.rag.index(source_id, text, kind=str(doc.get("type") or KIND_ANALYSIS))
        self.logger.info("Loaded %d chunks into the knowledge base", stored)
        return stored

    def find_relevant_patterns(self, query: str) -> List[Dict[str, Any]]:
        if self.rag is None or not self.rag.is_configured():
            return []
        hits = self.rag.search(
            query,
            top_k=int(self.config.get("top_k", 5)),
            min_score=float(self.config.get("relevance_threshold", 0.7)),
        )
        return [{"id": h.source_id, "text": h.text, "kind": h.kind, "similarity": round(h.score, 4)} for h in hits]

    # -----------------------------
    # Pipeline
    # -----------------------------
    def process(self, ctx: AgentContext) -> AgentResult:
        if not self.validate(ctx):
            return AgentResult.from_error(
                validation_error(message="No query or analysis result to interpret", agent=self.name)
            )

        query = ctx.get_metadata("query")
        target = str(query) if query else ctx.analysis_result.translation_summary

        try:
            verdict = self.validate_query(target)
            if not verdict.get("is_valid", True):
                reason = str(verdict.get("reason") or "query is too vague")
                question = verdict.get("clarification_question") or self.generate_clarification(target, reason)
                return AgentResult.clarify(
                    {
                        "needs_clarification": True,
                        "clarification_question": question,
                        "reason": reason,
                        "original_query": target,
                    }
                )

            patterns = self.find_relevant_patterns(target)
            interpretation = self.generate_interpretation(target, patterns)
        except ExternalServiceError as exc:
            return AgentResult.from_error(
                external_service_error(message=f"Interpretation failed: {exc}", agent=self.name)
            )

        confidence = interpretation.get("confidence", 0.8)
        log_step(self.logger, self.name, f"{len(patterns)} matched patterns, confidence {confidence}")
        return AgentResult.ok(
            {
                "interpretation": interpretation,
                "matched_patterns": patterns,
                "query_valid": True,
                "confidence": confidence,
                "pass_to_next": True,
            },
            metadata={"annotations": {"interpretation": interpretation}},
        )

    def validate_query(self, query: str) -> Dict[str, Any]:
        minimum = int(self.config.get("min_query_length", 5))
        if len(query.strip()) < minimum:
            return {
                "is_valid": False,
                "reason": f"Query is too short (minimum {minimum} characters); please be more specific.",
            }

        prompt = self.format_prompt(self.get_prompt("validate_query"), {"query": query})
        parsed = extract_json(self.call_llm(prompt, task="validate_query"))
        if parsed is None or "is_valid" not in parsed:
            return {"is_valid": True, "reason": "default validation passed", "confidence": 0.7}
        return parsed

    def is_helpful_query(self, query: str) -> bool:
        verdict = self.validate_query(query)
        return bool(verdict.get("is_valid")) and parse_confidence(verdict.get("confidence"), 0.0) >= 0.6

    def generate_clarification(self, query: str, reason: str) -> str:
        prompt = self.format_prompt(self.get_prompt("clarify"), {"query": query, "reason": reason})
        try:
            question = self.call_llm(prompt, task="clarify")
        except ExternalServiceError as exc:
            self.logger.warning("Clarification question generation failed: %s", exc)
            return DEFAULT_CLARIFICATION
        return question.strip() or DEFAULT_CLARIFICATION

    def generate_interpretation(self, query: str, patterns: List[Dict[str, Any]]) -> Dict[str, Any]:
        lines = [f"- ({p['similarity']}) {p['text']}" for p in patterns]
        context = ("Related patterns:\n" + "\n".join(lines)) if lines else ""
        prompt = self.format_prompt(self.get_prompt("interpret"), {"query": query, "patterns": context})
        response = self.call_llm(prompt, task="interpret")

        parsed = extract_json(response)
        if parsed is not None:
            return parsed
        return {
            "main_topic": "general analysis",
            "sub_topics": [],
            "analysis_direction": (response or "").strip(),
            "key_questions": [],
            "confidence": 0.5,
        }
