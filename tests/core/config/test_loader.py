# tests/core/config/test_loader.py
"""
Testes do loader de configuração do Gist Agents.

Os testes asseguram que:
- os defaults empacotados existem e contêm as seções esperadas
- o arquivo local é opcional e, quando presente, tem precedência
- formatos e tipos raiz inválidos geram erros explícitos
- o `.env` informado é carregado sem sobrescrever o ambiente
- templates de prompt ausentes ou inválidos retornam None
"""

import os
from pathlib import Path

import pytest

try:
    from gist_agents.core.config import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
        load_config,
        load_defaults,
        load_prompt_file,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if load_config is None:
        pytest.fail(f"Missing config loader. Import error: {_IMPORT_ERR}")


def test_packaged_defaults_have_all_sections():
    """
    Verifica que o `pipeline.defaults.yaml` empacotado é carregável e completo.

    Invariantes:
        - Seções pipeline, openai, tts, scraper e agents presentes
        - Defaults de cada agente presentes
        - stop_on_failure é True por default
    """
    _require_imports()
    cfg = load_defaults()
    for section in ("pipeline", "openai", "tts", "scraper", "agents"):
        assert section in cfg
    assert set(cfg["agents"]) >= {"validation", "thumbnail", "analysis", "interpret", "learning"}
    assert cfg["pipeline"]["stop_on_failure"] is True
    assert cfg["agents"]["validation"]["min_content_length"] == 100


def test_missing_defaults_raises(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=tmp_path / "defaults.yaml")


def test_missing_local_is_ok(tmp_path: Path):
    """Cobre: arquivo local inexistente é ignorado silenciosamente."""
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("pipeline:\n  mock_mode: false\n", encoding="utf-8")
    cfg = load_config(defaults_path=defaults, local_path=tmp_path / "local.yaml")
    assert cfg == {"pipeline": {"mock_mode": False}}


def test_local_overrides_packaged_defaults(tmp_path: Path):
    """
    Verifica que o arquivo local (YAML) tem precedência sobre os defaults
    empacotados, preservando as chaves não sobrescritas.
    """
    _require_imports()
    local = tmp_path / "local.yaml"
    local.write_text(
        "pipeline:\n  mock_mode: true\nagents:\n  interpret:\n    top_k: 3\n",
        encoding="utf-8",
    )
    cfg = load_config(local_path=local)
    assert cfg["pipeline"]["mock_mode"] is True
    assert cfg["pipeline"]["stop_on_failure"] is True
    assert cfg["agents"]["interpret"]["top_k"] == 3
    assert cfg["agents"]["interpret"]["relevance_threshold"] == 0.7


def test_json_local_is_supported(tmp_path: Path):
    _require_imports()
    local = tmp_path / "local.json"
    local.write_text('{"pipeline": {"stop_on_failure": false}}', encoding="utf-8")
    cfg = load_config(local_path=local)
    assert cfg["pipeline"]["stop_on_failure"] is False


def test_invalid_root_type_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=defaults)


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("a = 1\n", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=defaults)


def test_env_file_is_loaded_without_override(tmp_path: Path, monkeypatch):
    """
    Verifica o carregamento do `.env` via python-dotenv.

    Invariantes:
        - Variáveis ausentes no ambiente são definidas a partir do arquivo
        - Variáveis já presentes no ambiente não são sobrescritas
    """
    _require_imports()
    monkeypatch.delenv("GIST_TEST_ONLY_KEY", raising=False)
    monkeypatch.setenv("GIST_TEST_KEEP_KEY", "from-env")
    env_file = tmp_path / ".env"
    env_file.write_text("GIST_TEST_ONLY_KEY=from-file\nGIST_TEST_KEEP_KEY=from-file\n", encoding="utf-8")

    load_config(env_file=env_file)

    assert os.environ["GIST_TEST_ONLY_KEY"] == "from-file"
    assert os.environ["GIST_TEST_KEEP_KEY"] == "from-env"
    monkeypatch.delenv("GIST_TEST_ONLY_KEY", raising=False)


def test_load_prompt_file(tmp_path: Path):
    """Cobre: arquivo ausente → None; raiz não-mapa → None; YAML válido → dict."""
    _require_imports()
    assert load_prompt_file(tmp_path / "missing.yaml") is None

    bad = tmp_path / "bad.yaml"
    bad.write_text("just a string\n", encoding="utf-8")
    assert load_prompt_file(bad) is None

    good = tmp_path / "good.yaml"
    good.write_text("system: hi\ntasks:\n  t:\n    prompt: 'x {a}'\n", encoding="utf-8")
    assert load_prompt_file(good) == {"system": "hi", "tasks": {"t": {"prompt": "x {a}"}}}
