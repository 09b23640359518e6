from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest

from agent_runtime.core.config import get_settings
from agent_runtime.runtime.agent import GeneralAgent
from agent_runtime.schemas.state import AgentState, create_initial_state


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def agent() -> GeneralAgent:
    return GeneralAgent(
        {
            "modelRuntimeConfig": {"model": "gpt-4", "provider": "openai"},
            "sessionId": "test-session",
            "userId": "test-user",
        }
    )


@pytest.fixture
def base_messages() -> List[Dict[str, Any]]:
    return [
        {"content": "Hello", "id": "msg-1", "role": "user"},
        {"content": "Hi there", "id": "msg-2", "role": "assistant"},
    ]


@pytest.fixture
def base_tools() -> List[Dict[str, Any]]:
    return [{"type": "function", "function": {"name": "testTool", "parameters": {}}}]


@pytest.fixture
def make_state(base_messages, base_tools) -> Callable[..., AgentState]:
    def _make(tool_manifest_map: Optional[Dict[str, Any]] = None, **kwargs: Any) -> AgentState:
        return create_initial_state(
            "test-session",
            messages=base_messages,
            tools=base_tools,
            tool_manifest_map=tool_manifest_map,
            **kwargs,
        )

    return _make


@pytest.fixture
def state(make_state) -> AgentState:
    return make_state()


@pytest.fixture
def session() -> Dict[str, Any]:
    return {"messageCount": 1, "sessionId": "test-session", "status": "running", "stepCount": 1}


@pytest.fixture
def tool_call() -> Callable[..., Dict[str, Any]]:
    def _make(
        identifier: str,
        api_name: str,
        *,
        call_id: str = "call_1",
        arguments: str = "{}",
    ) -> Dict[str, Any]:
        return {
            "apiName": api_name,
            "arguments": arguments,
            "id": call_id,
            "identifier": identifier,
            "type": "default",
        }

    return _make
