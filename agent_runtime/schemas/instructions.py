"""Instruction variants emitted by the phase dispatcher.

Each dispatch step yields exactly one ``Instruction``; the ``type`` field is
the discriminator consumed by the external executor.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import BaseSchema


class ToolCallRequest(BaseSchema):
    """A single tool invocation requested by the model.

    ``identifier`` keys into the state's tool manifest map and ``api_name``
    selects the operation within that manifest. ``arguments`` is the raw JSON
    text produced by the model.
    """

    id: str
    identifier: str
    api_name: str
    arguments: str = "{}"
    type: str = "default"


class CallLLMPayload(BaseSchema):
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    model: Optional[str] = None
    provider: Optional[str] = None
    tools: List[Dict[str, Any]] = Field(default_factory=list)


class CallLLMInstruction(BaseSchema):
    type: Literal["call_llm"] = "call_llm"
    payload: CallLLMPayload


class CallToolInstruction(BaseSchema):
    type: Literal["call_tool"] = "call_tool"
    payload: ToolCallRequest


class CallToolsBatchInstruction(BaseSchema):
    """Independent tool calls the executor may run concurrently."""

    type: Literal["call_tools_batch"] = "call_tools_batch"
    payload: List[ToolCallRequest]


class RequestHumanApproveInstruction(BaseSchema):
    type: Literal["request_human_approve"] = "request_human_approve"
    pending_tools_calling: List[ToolCallRequest]
    reason: str


class FinishInstruction(BaseSchema):
    type: Literal["finish"] = "finish"
    reason: str
    reason_detail: str


Instruction = Annotated[
    Union[
        CallLLMInstruction,
        CallToolInstruction,
        CallToolsBatchInstruction,
        RequestHumanApproveInstruction,
        FinishInstruction,
    ],
    Field(discriminator="type"),
]
