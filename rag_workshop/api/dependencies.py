"""Service container shared by the API controllers."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

from autogen_core.models import ChatCompletionClient
from fastapi import Request

from rag_workshop.chat import AnswerSynthesizer, ChatAssistant, Participant, TurnCoordinator, default_team
from rag_workshop.clients import (
    A2AClient,
    CompleterChatClient,
    OpenAICompleter,
    OpenAIEmbedder,
    TextCompleter,
    TextEmbedder,
    create_chat_completion_client,
)
from rag_workshop.config import AppConfig, get_config
from rag_workshop.ingestion import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE
from rag_workshop.services import DocumentRepository

logger = logging.getLogger(__name__)

DEFAULT_A2A_SERVER_URL = "http://localhost:8000"


@dataclass
class WorkshopServices:
    """Owns the long-lived state behind the HTTP endpoints."""

    repository: DocumentRepository
    synthesizer: AnswerSynthesizer
    group_chat: TurnCoordinator
    assistant: ChatAssistant
    a2a_client: A2AClient
    upload_dir: Path
    allowed_extensions: Tuple[str, ...] = (".txt", ".md")
    max_results: int = 5
    max_turns: int = 6

    @classmethod
    def from_components(
        cls,
        embedder: TextEmbedder,
        completer: TextCompleter,
        upload_dir: str = "uploads",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        allowed_extensions: Sequence[str] = (".txt", ".md"),
        max_results: int = 5,
        max_turns: int = 6,
        participants: Optional[Sequence[Participant]] = None,
        chat_client: Optional[ChatCompletionClient] = None,
        a2a_client: Optional[A2AClient] = None,
    ) -> "WorkshopServices":
        """
        Wire the services around an embedder and a completer.

        The group chat agents use ``chat_client`` when given, otherwise the
        completer wrapped as an AutoGen model client.
        """
        upload_path = Path(upload_dir)
        upload_path.mkdir(parents=True, exist_ok=True)

        return cls(
            repository=DocumentRepository(embedder, chunk_size=chunk_size, chunk_overlap=chunk_overlap),
            synthesizer=AnswerSynthesizer(completer),
            group_chat=TurnCoordinator(
                chat_client or CompleterChatClient(completer),
                participants or default_team(),
            ),
            assistant=ChatAssistant(completer),
            a2a_client=a2a_client or A2AClient(DEFAULT_A2A_SERVER_URL),
            upload_dir=upload_path,
            allowed_extensions=tuple(allowed_extensions),
            max_results=max_results,
            max_turns=max_turns,
        )

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None) -> "WorkshopServices":
        """Wire the services with OpenAI clients built from configuration."""
        config = config or get_config()
        logger.info(f"Creating workshop services with provider '{config.openai.provider}'")

        return cls.from_components(
            embedder=OpenAIEmbedder.from_config(config.openai),
            completer=OpenAICompleter.from_config(config.openai),
            upload_dir=config.ingestion.upload_dir,
            chunk_size=config.ingestion.chunk_size,
            chunk_overlap=config.ingestion.chunk_overlap,
            allowed_extensions=config.ingestion.allowed_extensions,
            max_results=config.retrieval.max_results,
            max_turns=config.group_chat.max_turns,
            chat_client=create_chat_completion_client(config.openai),
            a2a_client=A2AClient.from_config(config.a2a),
        )


def get_services(request: Request) -> WorkshopServices:
    """FastAPI dependency returning the app's services, created on first use."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        services = WorkshopServices.from_config()
        request.app.state.services = services
    return services
