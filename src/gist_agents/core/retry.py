# src/gist_agents/core/retry.py
"""
Política de retry para operações falíveis (LLM, scraper, TTS, embeddings).

Uma `RetryPolicy` re-executa uma operação sem argumentos até `max_attempts`
vezes, aguardando entre tentativas. Após a última tentativa, a última
exceção é relançada ao chamador (o agente), que a converte em um
AgentResult de falha.

Backoff:
    - "linear" (default): `base_delay * attempt`
    - "exponential": `base_delay * 2 ** (attempt - 1)`

Invariantes:
    - `max_attempts >= 1` (caso contrário RetryConfigurationError no construtor)
    - Uma operação que sempre falha é executada exatamente `max_attempts` vezes
    - Não há espera após a última tentativa
    - Exceções fora de `retry_on` propagam imediatamente, sem nova tentativa
    - Erros permanentes (`is_transient` False, ex.: HTTP 4xx) também propagam
      na primeira ocorrência

Limites explícitos:
    - Não implementa timeout (cada serviço aplica o seu)
    - Não implementa jitter nem circuit breaker
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Tuple, Type, TypeVar

from .exceptions import RetryConfigurationError

T = TypeVar("T")

BACKOFF_LINEAR = "linear"
BACKOFF_EXPONENTIAL = "exponential"
_BACKOFFS = (BACKOFF_LINEAR, BACKOFF_EXPONENTIAL)

_default_logger = logging.getLogger("gist_agents.retry")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Política imutável de retry com backoff.

    Args:
        max_attempts: Número máximo de tentativas (>= 1).
        base_delay: Atraso base em segundos.
        backoff: "linear" ou "exponential".
        retry_on: Tipos de exceção elegíveis para nova tentativa.
        sleep: Função de espera (injetável para testes).
        logger: Logger usado para os avisos de tentativa.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff: str = BACKOFF_LINEAR
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)
    logger: Optional[logging.Logger] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.max_attempts, int) or self.max_attempts <= 0:
            raise RetryConfigurationError(
                f"max_attempts deve ser >= 1, recebido: {self.max_attempts!r}",
                details={"max_attempts": self.max_attempts},
            )
        if self.backoff not in _BACKOFFS:
            raise RetryConfigurationError(
                f"backoff desconhecido: {self.backoff!r}",
                details={"backoff": self.backoff, "allowed": list(_BACKOFFS)},
            )
        if self.base_delay < 0:
            raise RetryConfigurationError(
                f"base_delay não pode ser negativo: {self.base_delay!r}",
                details={"base_delay": self.base_delay},
            )

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        *,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "RetryPolicy":
        """Constrói a política a partir das chaves `max_retries`, `retry_delay` e `retry_backoff`."""
        return cls(
            max_attempts=int(config.get("max_retries", 3)),
            base_delay=float(config.get("retry_delay", 1.0)),
            backoff=str(config.get("retry_backoff", BACKOFF_LINEAR)),
            sleep=sleep,
            logger=logger,
        )

    def delay_for(self, attempt: int) -> float:
        if self.backoff == BACKOFF_EXPONENTIAL:
            return self.base_delay * (2 ** (attempt - 1))
        return self.base_delay * attempt

    def call(
        self,
        operation: Callable[[], T],
        *,
        max_attempts: Optional[int] = None,
        label: str = "operation",
    ) -> T:
        """
        Executa `operation` com retry.

        Args:
            operation: Callable sem argumentos que pode lançar exceção.
            max_attempts: Override pontual do limite de tentativas.
            label: Nome curto da operação, usado no log.

        Raises:
            RetryConfigurationError: Se `max_attempts` (override) for <= 0.
            Exception: A última exceção da operação após esgotar as tentativas.
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts <= 0:
            raise RetryConfigurationError(
                f"max_attempts deve ser >= 1, recebido: {attempts!r}",
                details={"max_attempts": attempts},
            )

        log = self.logger or _default_logger

        for attempt in range(1, attempts + 1):
            try:
                return operation()
            except self.retry_on as exc:
                if not getattr(exc, "is_transient", True):
                    log.warning("%s failed with a permanent error: %s", label, exc)
                    raise
                log.warning(
                    "Attempt %d/%d of %s failed: %s",
                    attempt,
                    attempts,
                    label,
                    exc,
                    extra={"attempt": attempt, "max_attempts": attempts, "operation": label},
                )
                if attempt == attempts:
                    raise
                self.sleep(self.delay_for(attempt))
