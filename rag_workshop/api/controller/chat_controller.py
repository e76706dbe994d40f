"""Chat and group chat endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from rag_workshop.api.dependencies import WorkshopServices, get_services
from rag_workshop.api.schemas import (
    AgentMessage,
    ChatRequest,
    ChatResponse,
    ChatWithHistoryRequest,
    GroupChatRequest,
    GroupChatResponse,
)
from rag_workshop.models import ChatTurn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    services: WorkshopServices = Depends(get_services),
) -> ChatResponse:
    """Send a message to the assistant and return its reply."""
    response = services.assistant.chat(request.message)
    return ChatResponse(response=response or "No answer available.")


@router.post("/chat-with-history", response_model=ChatResponse)
def chat_with_history(
    request: ChatWithHistoryRequest,
    services: WorkshopServices = Depends(get_services),
) -> ChatResponse:
    """Send a message together with the previous conversation."""
    history = [ChatTurn(role=m.role, message=m.content) for m in request.history or []]
    response = services.assistant.chat_with_history(
        request.message,
        history=history,
        system_prompt=request.system_prompt,
    )
    return ChatResponse(response=response or "No answer available.")


@router.post("/groupchat", response_model=GroupChatResponse)
async def group_chat(
    request: GroupChatRequest,
    services: WorkshopServices = Depends(get_services),
) -> GroupChatResponse:
    """
    Send a request to the group chat team.

    Participants answer in fixed round-robin order until the turn budget
    (request ``max_turns`` or the configured default) is spent.
    """
    max_turns = request.max_turns or services.max_turns
    logger.info(f"Group chat request with {max_turns} turns: {request.message[:50]}...")

    try:
        result = await services.group_chat.run_async(request.message, max_turns=max_turns)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return GroupChatResponse(
        question=result.question,
        final_response=result.final_response or "No answer available.",
        conversation=[
            AgentMessage(agent=turn.role, message=turn.message)
            for turn in result.conversation
        ],
    )
