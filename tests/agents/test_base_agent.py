# tests/agents/test_base_agent.py
"""Cobre: extract_json, format_prompt, carregamento de prompts e prontidão do BaseAgent."""

from gist_agents.agents.base import BaseAgent, extract_json, parse_confidence
from gist_agents.core.pipeline.types import AgentResult


class _EchoAgent(BaseAgent):
    name = "EchoAgent"
    prompt_name = "echo"

    def default_config(self):
        return {"temperature": 0.1}

    def default_prompts(self):
        return {"system": "echo system", "tasks": {"echo": {"prompt": "Say {word} {{literal}}"}}}

    def process(self, ctx):
        return AgentResult.ok({"echo": self.call_llm(self.format_prompt(self.get_prompt("echo"), {"word": "hi"}), task="echo")})


def test_extract_json_variants():
    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert extract_json('Sure! {"a": {"b": 2}} hope it helps') == {"a": {"b": 2}}
    assert extract_json("no json here") is None
    assert extract_json("") is None
    assert extract_json("[1, 2]") is None


def test_format_prompt_replaces_only_known_keys():
    out = BaseAgent.format_prompt('Title: {title} / {missing} / {"k": 1}', {"title": "T"})
    assert out == 'Title: T / {missing} / {"k": 1}'


def test_config_layers_and_copy(mock_llm):
    agent = _EchoAgent(mock_llm, {"max_retries": 5})
    assert agent.config["temperature"] == 0.1
    assert agent.config["max_retries"] == 5
    assert agent.config["model"] == "gpt-4o-mini"
    assert agent.retry_policy.max_attempts == 5

    snapshot = agent.get_config()
    snapshot["model"] = "changed"
    assert agent.config["model"] == "gpt-4o-mini"


def test_missing_prompt_file_falls_back_to_defaults(tmp_path, ScriptedLLM):
    llm = ScriptedLLM({"echo": "ok"})
    agent = _EchoAgent(llm, prompts_dir=tmp_path)
    assert agent.is_ready() is False

    agent.initialize()
    agent.initialize()
    assert agent.is_ready() is True
    assert agent.prompts["system"] == "echo system"

    result = agent.process(None)
    assert result.get("echo") == "ok"
    assert llm.calls[0]["system"] == "echo system"
    assert llm.calls[0]["prompt"] == "Say hi {{literal}}"


def test_prompt_file_overrides_defaults(tmp_path, ScriptedLLM):
    (tmp_path / "echo.yaml").write_text("system: from file\n", encoding="utf-8")
    agent = _EchoAgent(ScriptedLLM(), prompts_dir=tmp_path)
    agent.initialize()
    assert agent.prompts["system"] == "from file"
    assert agent.get_prompt("echo") == "Say {word} {{literal}}"
    assert agent.get_prompt("unknown") == ""


def test_not_ready_without_configured_or_mock_llm(ScriptedLLM):
    class _Offline(ScriptedLLM):
        def is_mock_mode(self):
            return False

    agent = _EchoAgent(_Offline(configured=False))
    agent.initialize()
    assert agent.is_ready() is False


def test_parse_confidence():
    assert parse_confidence("0.75", 0.0) == 0.75
    assert parse_confidence(0.3, 1.0) == 0.3
    assert parse_confidence("high", 1.0) == 1.0
    assert parse_confidence(None, 0.5) == 0.5
    assert parse_confidence([0.9], 0.2) == 0.2
