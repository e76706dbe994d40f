"""Agent-to-agent (A2A) protocol models.

Covers the subset used here: agent card discovery and the JSON-RPC 2.0
``message/send`` call with text parts. Field names are camelCase on the wire.
"""

import uuid
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

JSONRPC_VERSION = "2.0"
SEND_MESSAGE_METHOD = "message/send"

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class A2AModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Part(A2AModel):
    """Message part; only text parts carry content for this agent."""

    kind: str = "text"
    text: Optional[str] = None


class A2AMessage(A2AModel):
    kind: Literal["message"] = "message"
    role: Literal["user", "agent"]
    parts: List[Part]
    message_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    context_id: Optional[str] = None
    task_id: Optional[str] = None


class TaskStatus(A2AModel):
    state: str


class Artifact(A2AModel):
    artifact_id: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)


class A2ATask(A2AModel):
    kind: Literal["task"] = "task"
    id: str
    context_id: Optional[str] = None
    status: TaskStatus
    artifacts: List[Artifact] = Field(default_factory=list)


class MessageSendParams(A2AModel):
    message: A2AMessage


class AgentSkill(A2AModel):
    id: str
    name: str
    description: str
    tags: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)


class AgentCapabilities(A2AModel):
    streaming: bool = False
    push_notifications: bool = False


class AgentCard(A2AModel):
    """Public description of an agent, served at ``/.well-known/agent.json``."""

    name: str
    description: str
    url: str
    version: str
    protocol_version: str = "0.2.5"
    capabilities: AgentCapabilities = Field(default_factory=AgentCapabilities)
    default_input_modes: List[str] = Field(default_factory=lambda: ["text"])
    default_output_modes: List[str] = Field(default_factory=lambda: ["text"])
    skills: List[AgentSkill] = Field(default_factory=list)


class JSONRPCRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    id: Optional[Union[str, int]] = None
    method: str
    params: Dict[str, Any] = Field(default_factory=dict)


def text_of(parts: List[Part]) -> str:
    """Join the text parts of a message or artifact."""
    return " ".join(part.text for part in parts if part.kind == "text" and part.text)
