# tests/core/pipeline/test_agent_result.py
"""
Testes do AgentResult tri-state.

Os testes asseguram que:
- cada fábrica produz o desfecho correto
- os predicados `success`, `is_partial` e `is_failure` são mutuamente exclusivos
- erros carregam agente e tipo
- anotações são lidas de `metadata["annotations"]`
- a serialização é JSON-compatível
"""

import json

import pytest

try:
    from gist_agents.core.errors import VALIDATION_ERROR, ErrorEntry
    from gist_agents.core.pipeline.types import AgentOutcome, AgentResult
except Exception as e:  # noqa: BLE001
    AgentResult = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if AgentResult is None:
        pytest.fail(f"Missing AgentResult. Import error: {_IMPORT_ERR}")


def test_ok_result():
    _require_imports()
    result = AgentResult.ok({"article": {"title": "t"}})
    assert result.outcome is AgentOutcome.SUCCESS
    assert result.success and not result.is_partial and not result.is_failure
    assert result.get("article") == {"title": "t"}
    assert result.errors == ()
    assert result.first_error is None


def test_fail_result_carries_error_entry():
    _require_imports()
    result = AgentResult.fail("Invalid URL format: x", agent="ValidationAgent", error_type=VALIDATION_ERROR)
    assert result.is_failure and not result.success
    assert result.first_error == "Invalid URL format: x"
    assert result.errors[0].agent == "ValidationAgent"
    assert result.errors[0].type == VALIDATION_ERROR


def test_from_error_and_aliases():
    """Cobre: `from_error` preserva a entrada; `failure`/`partial` são aliases."""
    _require_imports()
    entry = ErrorEntry(message="boom", agent="X", type="T")
    assert AgentResult.from_error(entry).errors == (entry,)
    assert AgentResult.failure("m", "X").is_failure
    assert AgentResult.partial({"q": 1}).is_partial


def test_clarify_result_is_partial_only():
    _require_imports()
    result = AgentResult.clarify({"needs_clarification": True, "clarification_question": "Which aspect?"})
    assert result.outcome is AgentOutcome.NEEDS_CLARIFICATION
    assert result.is_partial
    assert not result.success and not result.is_failure
    assert result.data["clarification_question"] == "Which aspect?"


def test_result_payload_is_read_only():
    _require_imports()
    result = AgentResult.ok({"a": 1})
    with pytest.raises(TypeError):
        result.data["a"] = 2


def test_annotations_are_read_from_metadata():
    _require_imports()
    result = AgentResult.ok({}, metadata={"annotations": {"validation": {"is_valid": True}}})
    assert dict(result.annotations) == {"validation": {"is_valid": True}}
    assert dict(AgentResult.ok({}).annotations) == {}
    assert dict(AgentResult.ok({}, metadata={"annotations": "bad"}).annotations) == {}


def test_to_json_round_trips_through_json():
    _require_imports()
    result = AgentResult.fail("boom", agent="X")
    payload = json.loads(result.to_json())
    assert payload["success"] is False
    assert payload["outcome"] == "failure"
    assert payload["errors"][0]["message"] == "boom"
