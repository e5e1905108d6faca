# src/gist_agents/agents/base.py
"""
Base compartilhada dos agentes do Gist Agents.

O `BaseAgent` implementa o contrato `Agent` (core.pipeline.agent) e
concentra a maquinaria comum a todos os agentes concretos:

    - resolução de configuração (BASE_DEFAULTS → default_config() → overrides)
    - carregamento idempotente de templates de prompt (YAML)
    - chamada ao LLM com RetryPolicy
    - helpers de prompt e extração de JSON de respostas do LLM

Decisões arquiteturais:
    - Agentes recebem os serviços por injeção (construtor); nunca os criam
    - `is_ready()` considera mock mode como estado utilizável
    - Prompts ausentes em disco não são erro: os defaults da classe são usados
    - `extract_json` nunca lança; resposta não-JSON vira `None` e cada agente
      decide o seu fallback

Limites explícitos:
    - Não decide fluxo entre agentes (responsabilidade do AgentPipeline)
    - Não mescla resultados no AgentContext
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from gist_agents.core.config import load_prompt_file, merge_all
from gist_agents.core.pipeline.context import AgentContext
from gist_agents.core.pipeline.types import AgentResult
from gist_agents.core.retry import RetryPolicy
from gist_agents.utils.logging_config import get_agent_logger

T = TypeVar("T")

PROMPTS_DIR = Path(__file__).with_name("prompts")

BASE_DEFAULTS: Dict[str, Any] = {
    "timeout": 60,
    "max_retries": 3,
    "retry_delay": 1.0,
    "retry_backoff": "linear",
    "model": "gpt-4o-mini",
    "temperature": 0.7,
    "max_tokens": 4000,
}

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def extract_json(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Extrai o primeiro objeto JSON de uma resposta de LLM.

    Ordem de tentativa:
        1. bloco cercado ```json ... ```
        2. trecho entre a primeira `{` e a última `}`

    Returns:
        O objeto decodificado, ou None quando não há JSON válido.
    """
    if not text:
        return None

    candidates = []
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(value, dict):
            return value
    return None


def parse_confidence(value: Any, default: float) -> float:
    """Converte a confiança informada pelo LLM; valores não numéricos viram `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class BaseAgent(ABC):
    """
    Agente base com configuração, prompts, retry e acesso ao LLM.

    Subclasses definem `name`, `prompt_name` e implementam `process`;
    opcionalmente sobrescrevem `default_config`, `default_prompts`,
    `on_initialize` e `validate`.

    Args:
        llm: Serviço de chat (ChatService), real ou em mock mode.
        config: Overrides de configuração do agente.
        logger: Logger opcional (default: `gist_agents.agents.<name>`).
        retry_policy: Política de retry (default: derivada da config).
        prompts_dir: Diretório dos templates YAML (default: `agents/prompts`).
    """

    name: str = "BaseAgent"
    prompt_name: str = ""

    def __init__(
        self,
        llm: Any,
        config: Optional[Mapping[str, Any]] = None,
        *,
        logger: Optional[logging.Logger] = None,
        retry_policy: Optional[RetryPolicy] = None,
        prompts_dir: Optional[Path] = None,
    ):
        self.llm = llm
        self.config: Dict[str, Any] = merge_all(BASE_DEFAULTS, self.default_config(), dict(config or {}))
        self.logger = logger or get_agent_logger(self.name)
        self.retry_policy = retry_policy or RetryPolicy.from_config(self.config, logger=self.logger)
        self.prompts_dir = Path(prompts_dir) if prompts_dir is not None else PROMPTS_DIR
        self.prompts: Dict[str, Any] = {}
        self._initialized = False

    # -----------------------------
    # Hooks
    # -----------------------------
    def default_config(self) -> Dict[str, Any]:
        return {}

    def default_prompts(self) -> Dict[str, Any]:
        return {}

    def on_initialize(self) -> None:
        return None

    # -----------------------------
    # Contrato Agent
    # -----------------------------
    def initialize(self) -> None:
        if self._initialized:
            return

        loaded = load_prompt_file(self.prompts_dir / f"{self.prompt_name}.yaml") if self.prompt_name else None
        if loaded is None:
            self.logger.debug("Prompt file not found for %s; using built-in prompts", self.name)
            self.prompts = self.default_prompts()
        else:
            self.prompts = merge_all(self.default_prompts(), loaded)

        self.on_initialize()
        self._initialized = True
        self.logger.debug("%s initialized", self.name)

    def is_ready(self) -> bool:
        if not self._initialized or self.llm is None:
            return False
        return bool(self.llm.is_configured() or self.llm.is_mock_mode())

    def validate(self, value: Any) -> bool:
        return value is not None

    @abstractmethod
    def process(self, ctx: AgentContext) -> AgentResult:
        ...

    def get_name(self) -> str:
        return self.name

    def get_config(self) -> Dict[str, Any]:
        return dict(self.config)

    # -----------------------------
    # LLM / prompts
    # -----------------------------
    def call_llm(self, prompt: str, **options: Any) -> str:
        """
        Chama o LLM com retry.

        `system_prompt` e `task` (dica de tarefa, usada pelo mock mode) podem
        ser informados em `options`; model/temperature/max_tokens vêm da
        config quando não informados.
        """
        system_prompt = options.pop("system_prompt", None) or str(self.prompts.get("system", ""))
        llm_options = {
            "model": self.config["model"],
            "temperature": self.config["temperature"],
            "max_tokens": self.config["max_tokens"],
            "timeout": self.config["timeout"],
        }
        llm_options.update(options)
        label = f"{self.name}.{llm_options.get('task') or 'chat'}"
        return self.with_retry(lambda: self.llm.chat(system_prompt, prompt, llm_options), label=label)

    def get_prompt(self, task: str) -> str:
        tasks = self.prompts.get("tasks") or {}
        entry = tasks.get(task) if isinstance(tasks, Mapping) else None
        if isinstance(entry, Mapping):
            return str(entry.get("prompt", ""))
        return str(entry or "")

    @staticmethod
    def format_prompt(template: str, variables: Mapping[str, Any]) -> str:
        # substituição literal de {chave}; chaves JSON no template permanecem intactas
        def _replace(match: "re.Match[str]") -> str:
            key = match.group(1)
            return str(variables[key]) if key in variables else match.group(0)

        return _PLACEHOLDER.sub(_replace, template)

    def with_retry(self, operation: Callable[[], T], max_attempts: Optional[int] = None, *, label: Optional[str] = None) -> T:
        return self.retry_policy.call(operation, max_attempts=max_attempts, label=label or self.name)
