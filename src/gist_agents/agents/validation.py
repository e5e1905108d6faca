# src/gist_agents/agents/validation.py
"""Agente canônico: ValidationAgent.

Responsabilidades:
- validar o formato da URL (scheme http/https, host, domínios bloqueados/permitidos)
- verificar acessibilidade e extrair o artigo via WebScraper (com retry)
- validar o conteúdo mínimo (título + tamanho)
- validação opcional por IA (tarefa `validate_url`)

Saída (sucesso):
- data: {article, validation: {is_valid, language, content_length, word_count, ai_validation}}
- anotação `validation`

Limites explícitos:
- NÃO traduz nem resume o conteúdo
- Falha de IA nunca reprova o artigo (fallback permissivo)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional
from urllib.parse import urlparse

from gist_agents.core.errors import external_service_error, validation_error
from gist_agents.core.exceptions import ExternalServiceError
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import VALIDATION_AGENT, AgentResult
from gist_agents.models.article import ArticleData
from gist_agents.utils.logging_config import log_step, log_warning

from .base import BaseAgent, extract_json

AI_VALIDATION_FALLBACK: Dict[str, Any] = {"is_valid": True, "is_news": True, "fallback": True}


def _host_matches(host: str, domains: Iterable[str]) -> bool:
    for domain in domains:
        domain = str(domain).lower().strip()
        if domain and (host == domain or host.endswith("." + domain)):
            return True
    return False


class ValidationAgent(BaseAgent):
    name = VALIDATION_AGENT
    prompt_name = "validation"

    def __init__(self, llm: Any, scraper: Any, config=None, **kwargs: Any):
        super().__init__(llm, config, **kwargs)
        self.scraper = scraper

    def default_config(self) -> Dict[str, Any]:
        return {
            "blocked_domains": ["localhost", "127.0.0.1"],
            "allowed_domains": [],
            "min_content_length": 100,
            "ai_validation": True,
        }

    def default_prompts(self) -> Dict[str, Any]:
        return {
            "system": "You validate news article URLs and their extracted content. Respond in JSON.",
            "tasks": {
                "validate_url": {
                    "prompt": (
                        "Check whether the following page is a valid news article.\n"
                        "URL: {url}\nTitle: {title}\nContent (excerpt): {content}\n\n"
                        "Respond in JSON with keys: is_valid, is_news, reason, "
                        "detected_language, article_type, confidence."
                    )
                }
            },
        }

    def validate(self, value: Any) -> bool:
        if not isinstance(value, str) or not value.strip():
            return False
        try:
            parsed = urlparse(value.strip())
        except ValueError:
            return False
        if parsed.scheme not in ("http", "https"):
            return False
        host = (parsed.hostname or "").lower()
        if not host:
            return False
        if _host_matches(host, self.config.get("blocked_domains") or []):
            return False
        allowed = self.config.get("allowed_domains") or []
        if allowed and not _host_matches(host, allowed):
            return False
        return True

    def process(self, ctx: AgentContext) -> AgentResult:
        url = ctx.url
        if not self.validate(url):
            return AgentResult.from_error(validation_error(message=f"Invalid URL format: {url}", agent=self.name))

        if not self.scraper.is_accessible(url):
            return AgentResult.from_error(validation_error(message=f"URL is not accessible: {url}", agent=self.name))

        try:
            article: ArticleData = self.with_retry(lambda: self.scraper.fetch(url), label=f"{self.name}.fetch")
        except ExternalServiceError as exc:
            return AgentResult.from_error(
                external_service_error(message=f"Failed to extract article: {exc}", agent=self.name)
            )

        content_error = self._check_content(article)
        if content_error:
            return AgentResult.from_error(validation_error(message=content_error, agent=self.name))

        ai_result: Optional[Dict[str, Any]] = None
        if self.config.get("ai_validation", True):
            ai_result = self._validate_with_ai(article)
            if ai_result.get("is_valid") is False:
                reason = ai_result.get("reason") or "content is not a valid news article"
                return AgentResult.from_error(
                    validation_error(message=f"AI validation failed: {reason}", agent=self.name)
                )

        language = article.language or (ai_result or {}).get("detected_language")
        validation = {
            "is_valid": True,
            "language": language,
            "content_length": article.content_length,
            "word_count": article.word_count,
            "ai_validation": ai_result,
        }
        log_step(self.logger, self.name, f"{article.content_length} chars from {url}")
        return AgentResult.ok(
            {"article": article.to_dict(), "validation": validation},
            metadata={"annotations": {"validation": validation}},
        )

    def _check_content(self, article: ArticleData) -> Optional[str]:
        if not (article.title or "").strip():
            return "Article has no title"
        minimum = int(self.config.get("min_content_length", 100))
        if article.content_length < minimum:
            return f"Content too short: {article.content_length} characters (minimum {minimum})"
        return None

    def _validate_with_ai(self, article: ArticleData) -> Dict[str, Any]:
        prompt = self.format_prompt(
            self.get_prompt("validate_url"),
            {"url": article.url, "title": article.title, "content": article.content[:2000]},
        )
        try:
            response = self.call_llm(prompt, task="validate_url")
        except ExternalServiceError as exc:
            log_warning(self.logger, f"AI validation unavailable, accepting article: {exc}")
            return dict(AI_VALIDATION_FALLBACK)

        parsed = extract_json(response)
        if parsed is None:
            log_warning(self.logger, "AI validation returned non-JSON output, accepting article")
            return dict(AI_VALIDATION_FALLBACK)
        return parsed
