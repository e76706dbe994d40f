"""Client modules for external services."""

from rag_workshop.clients.a2a_client import A2AClient
from rag_workshop.clients.base import TextCompleter, TextEmbedder
from rag_workshop.clients.chat_client import CompleterChatClient, create_chat_completion_client
from rag_workshop.clients.openai_client import (
    OpenAICompleter,
    OpenAIEmbedder,
    create_openai_client,
)

__all__ = [
    "A2AClient",
    "CompleterChatClient",
    "OpenAICompleter",
    "OpenAIEmbedder",
    "TextCompleter",
    "TextEmbedder",
    "create_chat_completion_client",
    "create_openai_client",
]
