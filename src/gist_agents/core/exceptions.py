"""
Gist Agents: Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do Gist Agents.

Objetivo:
- Permitir que agentes e serviços levantem exceções semânticas tipadas
- Diferenciar falhas transitórias (retry) de erros de configuração (fail-fast)
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- A conversão para ErrorEntry é responsabilidade de agentes e do sequenciador.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GistException(Exception):
    """Base class para exceções internas do Gist Agents.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Serviços externos (transitórios, elegíveis para retry)
# ---------------------------------------------------------------------------

class ExternalServiceError(GistException):
    """Falha de rede, timeout, rate-limit ou resposta inválida de um serviço externo."""

    def __init__(
        self,
        message: str,
        *,
        service: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        merged = {"service": service, **dict(details or {})}
        if status_code is not None:
            merged["status_code"] = status_code
        super().__init__(message, details=merged, hint=hint)
        self.service = service
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        """False para respostas HTTP 4xx definitivas (exceto 408 e 429)."""
        if self.status_code is None:
            return True
        return not (400 <= self.status_code < 500) or self.status_code in (408, 429)


class ScrapeError(ExternalServiceError):
    """Falha tipada do scraper (página inacessível, HTML sem conteúdo, etc.)."""

    def __init__(self, message: str, *, url: str, status_code: Optional[int] = None):
        super().__init__(
            message,
            service="scraper",
            status_code=status_code,
            details={"url": url},
        )
        self.url = url


# ---------------------------------------------------------------------------
# Configuração / estrutura (fail-fast)
# ---------------------------------------------------------------------------

class RetryConfigurationError(GistException, ValueError):
    """Política de retry inválida (ex.: max_attempts <= 0)."""


class DuplicateAgentNameError(GistException, ValueError):
    """Dois agentes com o mesmo nome registrados no mesmo pipeline."""
