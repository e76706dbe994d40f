"""Retrieval services."""

from rag_workshop.services.document_repository import DocumentRepository, generate_chunk_id
from rag_workshop.services.vector_index import InMemoryVectorIndex

__all__ = [
    "DocumentRepository",
    "InMemoryVectorIndex",
    "generate_chunk_id",
]
