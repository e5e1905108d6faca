# tests/core/engine/test_pipeline_clarification.py
"""
Testes do desfecho NEEDS_CLARIFICATION no AgentPipeline.

Os testes asseguram que:
- um resultado parcial sempre interrompe a execução, mesmo com
  `stop_on_failure` desabilitado
- o PipelineResult expõe `needs_clarification` e `clarification_data`
- clarificação não é falha (`error` permanece None)
"""

import pytest

try:
    from gist_agents.core.engine.pipeline import AgentPipeline
except Exception as e:  # noqa: BLE001
    AgentPipeline = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


@pytest.mark.parametrize("stop_on_failure", [True, False])
def test_partial_result_always_halts(StubAgent, stop_on_failure):
    if AgentPipeline is None:
        pytest.fail(f"Missing AgentPipeline. Import error: {_IMPORT_ERR}")

    asker = StubAgent("Interpret", behavior="clarify", data={"clarification_question": "Which aspect?"})
    after = StubAgent("Learning")
    pipeline = AgentPipeline({"pipeline": {"stop_on_failure": stop_on_failure}})
    pipeline.add_agent(StubAgent("A")).add_agent(asker).add_agent(after)

    result = pipeline.run("https://news.example.com/x")

    assert result.needs_clarification is True
    assert result.success is False
    assert result.error is None
    assert result.clarification_data["clarification_question"] == "Which aspect?"
    assert result.clarification_data["needs_clarification"] is True
    assert after.seen == []
    assert result.agents == ["A", "Interpret"]
