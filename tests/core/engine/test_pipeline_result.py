# tests/core/engine/test_pipeline_result.py
"""
Testes do PipelineResult.

Os testes asseguram que:
- a análise final vem do AnalysisAgent quando bem-sucedido
- na ausência dele, vem do LearningAgent (`output` ou `original`)
- a serialização expõe as chaves públicas e é JSON válido
"""

import json

import pytest

try:
    from gist_agents.core.engine.result import PipelineResult
    from gist_agents.core.pipeline.context import AgentContext
    from gist_agents.core.pipeline.types import AgentResult
except Exception as e:  # noqa: BLE001
    PipelineResult = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if PipelineResult is None:
        pytest.fail(f"Missing PipelineResult. Import error: {_IMPORT_ERR}")


def _result(results, **kwargs):
    return PipelineResult(
        success=kwargs.pop("success", True),
        results=results,
        context=AgentContext(url="https://news.example.com/x"),
        **kwargs,
    )


def test_final_analysis_prefers_analysis_agent():
    _require_imports()
    res = _result(
        {
            "AnalysisAgent": AgentResult.ok({"translation_summary": "from analysis"}),
            "LearningAgent": AgentResult.ok({"styled": True, "output": {"styled_text": "styled"}}),
        }
    )
    assert res.get_final_analysis() == {"translation_summary": "from analysis"}


def test_final_analysis_falls_back_to_learning_output():
    _require_imports()
    styled = _result(
        {
            "AnalysisAgent": AgentResult.fail("boom", "AnalysisAgent"),
            "LearningAgent": AgentResult.ok({"styled": True, "output": {"styled_text": "styled"}}),
        },
        success=False,
    )
    assert styled.get_final_analysis() == {"styled_text": "styled"}

    unstyled = _result({"LearningAgent": AgentResult.ok({"styled": False, "original": {"key_points": ["a"]}})})
    assert unstyled.get_final_analysis() == {"key_points": ["a"]}

    assert _result({}).get_final_analysis() is None


def test_to_dict_and_json():
    _require_imports()
    res = _result(
        {"AnalysisAgent": AgentResult.ok({"key_points": ("a", "b")})},
        duration=0.1234,
        mock_mode=True,
    )
    payload = json.loads(res.to_json())
    assert payload["success"] is True
    assert payload["agents"] == ["AnalysisAgent"]
    assert payload["duration_ms"] == 123.4
    assert payload["final_analysis"] == {"key_points": ["a", "b"]}
    assert payload["needs_clarification"] is False
    assert payload["clarification_data"] is None
    assert payload["results"]["AnalysisAgent"]["outcome"] == "success"
