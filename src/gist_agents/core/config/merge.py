# src/gist_agents/core/config/merge.py
"""
Deep-merge de configuração (defaults de agente/pipeline + overrides).

Este módulo resolve a configuração efetiva de cada agente e do pipeline a
partir de uma base (defaults da classe ou do arquivo packaged) e de
overrides explícitos do chamador.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - None (em qualquer lado) → compatível com qualquer tipo
    - int/float → compatíveis entre si (bool não é número aqui)
    - demais conflitos de tipo → erro estrutural explícito

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Chaves não sobrescritas são preservadas
    - Nenhum input é mutado

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não valida semântica de domínio (ex.: temperature fora de faixa)
"""

from copy import deepcopy
from typing import Any, Dict, Mapping

from .errors import ConfigTypeConflictError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compatible(base_value: Any, override_value: Any) -> bool:
    if base_value is None or override_value is None:
        return True
    if _is_number(base_value) and _is_number(override_value):
        return True
    return type(base_value) is type(override_value)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois mapas de configuração.

    Decisões arquiteturais:
        - O merge é puramente funcional (inputs não são mutados)
        - Listas (ex.: `blocked_domains`) são substituídas por inteiro
        - `None` funciona como "sem valor" e nunca gera conflito
        - Conflitos estruturais são tratados como falha fatal

    Args:
        base (Mapping[str, Any]): Configuração base (ex.: defaults do agente).
        override (Mapping[str, Any]): Overrides explícitos do chamador.

    Returns:
        Dict[str, Any]: Nova configuração resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """

    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        raise ConfigTypeConflictError(
            f"Deep-merge requer mapas no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = {k: deepcopy(v) for k, v in base.items()}

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
            continue

        if not _compatible(base_value, override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        # list / escalar -> sobrescrita total
        result[key] = deepcopy(override_value)

    return result


def merge_all(*layers: Mapping[str, Any]) -> Dict[str, Any]:
    """Aplica `deep_merge` em cadeia (a última camada tem precedência)."""
    result: Dict[str, Any] = {}
    for layer in layers:
        if layer:
            result = deep_merge(result, layer)
    return result
