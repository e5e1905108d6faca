# src/gist_agents/core/config/errors.py
"""
Exceções da camada de configuração do Gist Agents.

As exceções aqui definidas representam falhas estruturais de configuração
(arquivo ausente, formato desconhecido, raiz inválida, conflito de tipos),
e não erros de execução de agentes.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa falha de serviço externo

Limites explícitos:
    - Não executa pipeline
    - Não realiza fallback ou recovery
"""


class ConfigError(Exception):
    """
    Exceção base para erros de configuração.

    Permite captura genérica de falhas de load/merge sem confundi-las
    com falhas de agentes ou de serviços externos.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de configuração base (defaults) não encontrado.

    Sem defaults não existe configuração efetiva válida; o loader não
    tenta inferir ou criar defaults automaticamente.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"pipeline": {"stop_on_failure": true}}
        - override: {"pipeline": "strict"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """
