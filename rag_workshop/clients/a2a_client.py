"""A2A client for a remote group chat agent.

Discovers the agent through its card and sends it JSON-RPC
``message/send`` requests over HTTP.
"""

import logging
import uuid
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from rag_workshop.config.configuration import A2AConfig, get_config
from rag_workshop.errors import A2AError
from rag_workshop.models.a2a import (
    JSONRPC_VERSION,
    SEND_MESSAGE_METHOD,
    A2AMessage,
    A2ATask,
    AgentCard,
    Part,
    text_of,
)

logger = logging.getLogger(__name__)

AGENT_CARD_PATH = "/.well-known/agent.json"
DEFAULT_TIMEOUT_SEC = 120.0


def extract_result_text(result: Dict[str, Any]) -> str:
    """
    Extract the reply text from a ``message/send`` result.

    The result is either a message or a task; a task without text
    artifacts is described by its id and state.
    """
    if result.get("kind") == "task":
        task = A2ATask.model_validate(result)
        text = " ".join(text_of(artifact.parts) for artifact in task.artifacts).strip()
        return text or f"Task {task.id} is {task.status.state}"

    return text_of(A2AMessage.model_validate(result).parts)


class A2AClient:
    """Talks to a remote agent that speaks the A2A protocol."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Root URL of the remote agent server.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, e.g. to reach an in-process app.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: Optional[A2AConfig] = None) -> "A2AClient":
        config = config or get_config().a2a
        return cls(base_url=config.server_url, timeout=config.timeout)

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def get_agent_card(self) -> AgentCard:
        """
        Fetch the remote agent card.

        Raises:
            A2AError: If the card cannot be fetched or is malformed.
        """
        try:
            async with self._http_client() as client:
                response = await client.get(AGENT_CARD_PATH)
                response.raise_for_status()
                card = AgentCard.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise A2AError(f"Agent discovery at {self.base_url} failed: {e}") from e

        logger.info(f"Remote agent found: {card.name}")
        return card

    async def send_message(self, text: str) -> str:
        """
        Send a text message to the remote agent and return its reply text.

        Raises:
            A2AError: If discovery fails, the call fails, or the agent
                returns a JSON-RPC error.
        """
        card = await self.get_agent_card()
        message = A2AMessage(role="user", parts=[Part(text=text)])
        payload = {
            "jsonrpc": JSONRPC_VERSION,
            "id": str(uuid.uuid4()),
            "method": SEND_MESSAGE_METHOD,
            "params": {"message": message.to_wire()},
        }

        try:
            async with self._http_client() as client:
                response = await client.post(card.url, json=payload)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise A2AError(f"A2A request to {card.url} failed: {e}") from e

        error = body.get("error")
        if error:
            raise A2AError(f"Remote agent error {error.get('code')}: {error.get('message')}")

        result = body.get("result")
        if not isinstance(result, dict):
            raise A2AError("Remote agent returned no result")

        try:
            return extract_result_text(result)
        except ValidationError as e:
            raise A2AError(f"Remote agent returned a malformed result: {e}") from e
