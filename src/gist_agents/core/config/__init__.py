# src/gist_agents/core/config/__init__.py
"""
Camada de configuração do Gist Agents.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Carregamento de templates de prompt (YAML) dos agentes

Limites explícitos:
    - Não valida semântica de domínio
    - Não executa pipeline
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .loader import load_config, load_defaults, load_prompt_file
from .merge import deep_merge, merge_all

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "deep_merge",
    "load_config",
    "load_defaults",
    "load_prompt_file",
    "merge_all",
]
