"""Request and response models for the HTTP API."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Result of a document upload."""

    file_name: str
    chunk_count: int
    message: str


class DocumentInfo(BaseModel):
    """Catalog entry for an ingested document."""

    file_name: str
    file_path: str
    chunk_count: int
    uploaded_at: datetime


class QuestionRequest(BaseModel):
    """Question about the uploaded documents."""

    question: str


class AnswerResponse(BaseModel):
    """Grounded answer with its source documents."""

    question: str
    answer: str
    sources: List[str]


class GroupChatRequest(BaseModel):
    """Request for the group chat team."""

    message: str = Field(min_length=1)
    max_turns: Optional[int] = Field(default=None, ge=1, le=30)


class AgentMessage(BaseModel):
    """One message of the group chat conversation."""

    agent: str
    message: str


class GroupChatResponse(BaseModel):
    """Group chat outcome."""

    question: str
    final_response: str
    conversation: List[AgentMessage]


class ChatRequest(BaseModel):
    """Simple chat message."""

    message: str = Field(min_length=1)


class HistoryMessage(BaseModel):
    """Message in the conversation history."""

    role: str
    content: str


class ChatWithHistoryRequest(BaseModel):
    """Chat message with previous conversation."""

    message: str = Field(min_length=1)
    system_prompt: Optional[str] = None
    history: Optional[List[HistoryMessage]] = None


class ChatResponse(BaseModel):
    """Assistant reply."""

    response: str


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Body returned for domain errors: {"error": {"code": ..., "message": ...}}."""

    error: ErrorDetail


class A2AAskRequest(BaseModel):
    """Message forwarded to the remote group chat agent."""

    message: str = Field(min_length=1)


class A2AAskResponse(BaseModel):
    """Reply of the remote agent, or the communication error."""

    question: str
    response: Optional[str] = None
    success: bool
    error: Optional[str] = None


class A2ADiscoverResponse(BaseModel):
    """Outcome of fetching the remote agent card."""

    success: bool
    agent_card: Optional[Dict[str, Any]] = None
    message: str
