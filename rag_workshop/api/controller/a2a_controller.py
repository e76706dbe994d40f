"""Agent-to-agent (A2A) endpoints.

The server side publishes the group chat as an A2A agent: an agent card
for discovery and a JSON-RPC ``message/send`` route. The client side
forwards questions to a remote group chat agent.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from rag_workshop import __version__
from rag_workshop.api.dependencies import WorkshopServices, get_services
from rag_workshop.api.schemas import A2AAskRequest, A2AAskResponse, A2ADiscoverResponse
from rag_workshop.errors import A2AError, TurnFailed
from rag_workshop.models.a2a import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SEND_MESSAGE_METHOD,
    A2AMessage,
    AgentCard,
    AgentSkill,
    JSONRPCRequest,
    MessageSendParams,
    Part,
    text_of,
)

logger = logging.getLogger(__name__)

A2A_PATH = "/a2a"

router = APIRouter(tags=["a2a"])
client_router = APIRouter(prefix="/api", tags=["a2a"])

RequestId = Optional[Union[str, int]]


def _rpc_result(request_id: RequestId, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def _rpc_error(request_id: RequestId, code: int, message: str) -> Dict[str, Any]:
    logger.warning(f"A2A request {request_id} rejected ({code}): {message}")
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": code, "message": message}}


def build_agent_card(services: WorkshopServices, base_url: str) -> AgentCard:
    """Describe the group chat team as an A2A agent reachable under ``base_url``."""
    names = [participant.name for participant in services.group_chat.participants]
    return AgentCard(
        name="RAG Workshop Group Chat",
        description=f"Round-robin team of {', '.join(names)} answering software design requests",
        url=base_url.rstrip("/") + A2A_PATH,
        version=__version__,
        skills=[
            AgentSkill(
                id="groupchat",
                name="Group chat",
                description=f"Runs {services.max_turns} turns among {', '.join(names)} and returns the final message",
                tags=["groupchat", "software-design"],
                examples=["Design a REST API for a todo list"],
            )
        ],
    )


@router.get("/.well-known/agent.json")
async def agent_card(
    request: Request,
    services: WorkshopServices = Depends(get_services),
) -> Dict[str, Any]:
    """Serve the agent card used for discovery."""
    return build_agent_card(services, str(request.base_url)).to_wire()


@router.post(A2A_PATH)
async def handle_message(
    request: Request,
    services: WorkshopServices = Depends(get_services),
) -> Dict[str, Any]:
    """
    Handle a JSON-RPC 2.0 ``message/send`` call.

    The text parts of the message seed a group chat run; the final
    participant message is returned as the agent's reply. Errors are
    reported in the JSON-RPC envelope, never as HTTP errors.
    """
    try:
        body = await request.json()
    except ValueError:
        return _rpc_error(None, PARSE_ERROR, "Parse error")

    try:
        rpc = JSONRPCRequest.model_validate(body)
    except ValidationError:
        request_id = body.get("id") if isinstance(body, dict) else None
        return _rpc_error(request_id, INVALID_REQUEST, "Invalid request")

    if rpc.method != SEND_MESSAGE_METHOD:
        return _rpc_error(rpc.id, METHOD_NOT_FOUND, f"Method not found: {rpc.method}")

    try:
        params = MessageSendParams.model_validate(rpc.params)
    except ValidationError as e:
        return _rpc_error(rpc.id, INVALID_PARAMS, f"Invalid params: {e.error_count()} errors")

    text = text_of(params.message.parts).strip()
    if not text:
        return _rpc_error(rpc.id, INVALID_PARAMS, "Message has no text parts")

    logger.info(f"A2A message {rpc.id}: {text[:50]}...")
    try:
        result = await services.group_chat.run_async(text, max_turns=services.max_turns)
    except TurnFailed as e:
        return _rpc_error(rpc.id, INTERNAL_ERROR, e.message)

    reply = A2AMessage(
        role="agent",
        parts=[Part(text=result.final_response)],
        context_id=params.message.context_id or str(uuid.uuid4()),
    )
    return _rpc_result(rpc.id, reply.to_wire())


@client_router.post("/ask", response_model=A2AAskResponse)
async def ask_remote_agent(
    request: A2AAskRequest,
    services: WorkshopServices = Depends(get_services),
) -> A2AAskResponse:
    """Forward a question to the remote group chat agent."""
    logger.info(f"Forwarding question to {services.a2a_client.base_url}: {request.message[:50]}...")
    try:
        response = await services.a2a_client.send_message(request.message)
    except A2AError as e:
        logger.error(f"A2A ask failed: {e.message}")
        return A2AAskResponse(question=request.message, success=False, error=e.message)

    return A2AAskResponse(question=request.message, response=response, success=True)


@client_router.get("/discover", response_model=A2ADiscoverResponse)
async def discover_remote_agent(
    services: WorkshopServices = Depends(get_services),
) -> A2ADiscoverResponse:
    """Fetch the remote agent card."""
    try:
        card = await services.a2a_client.get_agent_card()
    except A2AError as e:
        return A2ADiscoverResponse(success=False, message=e.message)

    return A2ADiscoverResponse(
        success=True,
        agent_card=card.to_wire(),
        message=f"Agent '{card.name}' discovered",
    )
