from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from agent_runtime.schemas.instructions import FinishInstruction, Instruction, ToolCallRequest
from agent_runtime.schemas.manifest import InterventionPolicy, InterventionRule, ToolManifest
from agent_runtime.schemas.state import AgentStatus, create_initial_state
from agent_runtime.usage.accumulator import accumulate_llm, accumulate_tool


def test_create_initial_state_zeroes_counters() -> None:
    state = create_initial_state("s-1", messages=[{"role": "user", "content": "hi"}], max_steps=5)

    assert state.session_id == "s-1"
    assert state.status == AgentStatus.idle
    assert state.step_count == 0
    assert state.max_steps == 5
    assert state.usage.llm.tokens.total == 0
    assert state.usage.llm.api_calls == 0
    assert state.usage.tools.by_tool == []
    assert state.cost.total == 0
    assert state.cost.currency == "USD"
    assert state.cost.calculated_at is None
    assert state.created_at == state.last_modified


def test_manifest_config_is_decoded_once_into_a_variant() -> None:
    literal = ToolManifest.model_validate({"identifier": "a", "humanInterventionConfig": "always"})
    rules = ToolManifest.model_validate(
        {"identifier": "b", "humanInterventionConfig": [{"match": {"cmd": "ls:*"}, "policy": "never"}, {"policy": "always"}]}
    )
    absent = ToolManifest.model_validate({"identifier": "c", "api": [{"name": "x", "parameters": {}}]})

    assert literal.human_intervention_config is InterventionPolicy.always
    assert rules.human_intervention_config == [
        InterventionRule(match={"cmd": "ls:*"}, policy="never"),
        InterventionRule(policy="always"),
    ]
    assert absent.human_intervention_config is None
    assert absent.api[0].name == "x"


def test_manifest_rejects_unknown_literal_config() -> None:
    with pytest.raises(ValidationError):
        ToolManifest.model_validate({"identifier": "a", "humanInterventionConfig": "sometimes"})


def test_initial_state_validates_raw_manifests() -> None:
    state = create_initial_state("s-1", tool_manifest_map={"a": {"identifier": "a", "humanInterventionConfig": "never"}})
    assert isinstance(state.tool_manifest_map["a"], ToolManifest)


def test_instruction_union_discriminates_on_type() -> None:
    adapter = TypeAdapter(Instruction)

    finish = adapter.validate_python({"type": "finish", "reason": "completed", "reasonDetail": "ok"})
    tool = adapter.validate_python(
        {"type": "call_tool", "payload": {"id": "c", "identifier": "t", "apiName": "op", "arguments": "{}"}}
    )

    assert isinstance(finish, FinishInstruction)
    assert tool.payload == ToolCallRequest(id="c", identifier="t", api_name="op")


def test_tool_call_request_wire_shape() -> None:
    call = ToolCallRequest(id="c", identifier="t", api_name="op")
    assert call.to_wire() == {"id": "c", "identifier": "t", "apiName": "op", "arguments": "{}", "type": "default"}


def test_initial_state_currency_follows_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENT_RUNTIME_COST_CURRENCY", "EUR")

    state = create_initial_state("s-1")

    assert state.cost.currency == "EUR"
    assert state.cost.llm.currency == "EUR"
    assert state.cost.tools.currency == "EUR"
    assert accumulate_tool(state, "search", 1, True, 0.5).cost.tools.by_tool[0].currency == "EUR"


def test_explicit_currency_overrides_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENT_RUNTIME_COST_CURRENCY", "EUR")
    assert create_initial_state("s-1", currency="JPY").cost.currency == "JPY"


def test_wire_timestamps_are_iso_strings() -> None:
    state = accumulate_llm(create_initial_state("s-1"), "openai", "gpt-4", {"totalTokens": 1, "cost": 0.1})

    wire = state.to_wire()

    assert isinstance(wire["createdAt"], str)
    assert datetime.fromisoformat(wire["lastModified"]) == state.last_modified
    assert datetime.fromisoformat(wire["cost"]["calculatedAt"]) == state.cost.calculated_at
    assert wire["status"] == "idle"
