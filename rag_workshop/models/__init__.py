"""Data models module."""

from rag_workshop.models.chat import Answer, ChatTurn, GroupChatResult
from rag_workshop.models.document import ChunkRecord, Document, RetrievalResult

__all__ = [
    "Answer",
    "ChatTurn",
    "ChunkRecord",
    "Document",
    "GroupChatResult",
    "RetrievalResult",
]
