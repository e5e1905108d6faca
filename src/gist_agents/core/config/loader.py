# src/gist_agents/core/config/loader.py
"""
Loader de configuração do Gist Agents.

A configuração efetiva do pipeline é resolvida a partir de:
    - um arquivo de defaults (obrigatório; por padrão o `pipeline.defaults.yaml`
      distribuído com o pacote)
    - um arquivo local de overrides (opcional)
    - um arquivo `.env` (opcional), carregado via python-dotenv para que
      segredos (OPENAI_API_KEY, GOOGLE_TTS_API_KEY) cheguem aos serviços
      pelo ambiente, e nunca pelo YAML versionado

Responsabilidades do módulo:
    - Carregar arquivos de configuração em YAML ou JSON
    - Validar requisitos estruturais mínimos (tipo raiz)
    - Resolver a configuração final via deep-merge determinístico
    - Carregar templates de prompt (YAML) dos agentes

Invariantes:
    - O resultado de `load_config` é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não valida semântica de domínio
    - Não interage com agentes ou com o sequenciador
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import json

import yaml  # PyYAML
from dotenv import load_dotenv

from .merge import deep_merge
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)

PathLike = Union[str, Path]

DEFAULTS_FILE = Path(__file__).with_name("pipeline.defaults.yaml")


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - Arquivos vazios são interpretados como dicionários vazios
        - Formatos não suportados geram erro explícito

    Args:
        path (Path): Caminho para o arquivo de configuração.

    Returns:
        Dict[str, Any]: Conteúdo do arquivo carregado como dicionário.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_defaults() -> Dict[str, Any]:
    """Defaults distribuídos com o pacote (`pipeline.defaults.yaml`)."""
    return _load_file(DEFAULTS_FILE)


def load_config(
    *,
    defaults_path: Optional[PathLike] = None,
    local_path: Optional[PathLike] = None,
    env_file: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva do pipeline.

    Política de resolução:
        - Defaults são obrigatórios (packaged quando `defaults_path` é None)
        - O arquivo local é opcional e ignorado quando não existe
        - Quando presente, o local sempre tem prioridade sobre defaults
        - `env_file`, quando existe, é carregado sem sobrescrever variáveis
          já definidas no ambiente

    Args:
        defaults_path: Caminho para o arquivo de configuração base.
        local_path: Caminho opcional para overrides locais.
        env_file: Caminho opcional para um arquivo `.env`.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """
    if env_file is not None and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    defaults_file = Path(defaults_path) if defaults_path is not None else DEFAULTS_FILE
    effective = _load_file(defaults_file)

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective


def load_prompt_file(path: PathLike) -> Optional[Dict[str, Any]]:
    """
    Carrega um arquivo YAML de prompts de agente.

    Retorna None quando o arquivo não existe ou quando a raiz não é um
    mapa; o agente então usa seus prompts default. Erros de sintaxe YAML
    são propagados (template corrompido é erro de empacotamento).
    """
    prompt_path = Path(path)
    if not prompt_path.is_file():
        return None

    with prompt_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        return None
    return data
