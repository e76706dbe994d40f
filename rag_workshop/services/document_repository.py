"""Document repository: ingestion into and retrieval from the vector index.

Ingestion pipeline per document:
- Split the text into overlapping word chunks
- Embed each chunk and upsert it into the vector index
- Record the document in the catalog

Chunks stored before a failure are not rolled back; the document is only
catalogued once every chunk has been stored.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from rag_workshop.clients.base import TextEmbedder
from rag_workshop.errors import EmbeddingError, IngestionFailed
from rag_workshop.ingestion.chunking import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    chunk_text,
    validate_chunking_parameters,
)
from rag_workshop.models import ChunkRecord, Document, RetrievalResult
from rag_workshop.services.vector_index import InMemoryVectorIndex

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 5


def generate_chunk_id() -> str:
    """Generate a unique chunk ID."""
    return str(uuid.uuid4())


class DocumentRepository:
    """Owns the vector index and the catalog of ingested documents."""

    def __init__(
        self,
        embedder: TextEmbedder,
        index: Optional[InMemoryVectorIndex] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ):
        """
        Args:
            embedder: Capability used for chunk and query embeddings.
            index: Vector index to write to; a fresh in-memory index by default.
            chunk_size: Maximum words per chunk.
            chunk_overlap: Words shared by consecutive chunks.

        Raises:
            InvalidChunkingParameters: If the chunk settings are invalid.
        """
        validate_chunking_parameters(chunk_size, chunk_overlap)
        self._embedder = embedder
        self._index = index if index is not None else InMemoryVectorIndex()
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._documents: List[Document] = []
        self._catalog_lock = threading.Lock()

    @property
    def index(self) -> InMemoryVectorIndex:
        return self._index

    def _embed_chunk(self, text: str, document_name: str) -> ChunkRecord:
        vector = self._embedder.embed(text)
        return ChunkRecord(
            id=generate_chunk_id(),
            text=text,
            source=document_name,
            vector=tuple(vector),
        )

    def ingest(self, raw_text: str, document_name: str, storage_path: str = "") -> int:
        """
        Chunk, embed and store a document, then add it to the catalog.

        Args:
            raw_text: Extracted plain text of the document.
            document_name: Display name, used as the source of every chunk.
            storage_path: Where the raw bytes were stored, if anywhere.

        Returns:
            Number of chunks stored.

        Raises:
            IngestionFailed: If embedding or storage fails partway. Chunks
                already stored remain in the index.
        """
        logger.info(f"Starting ingestion for: {document_name}")

        chunks = chunk_text(raw_text, self._chunk_size, self._chunk_overlap)
        if not chunks:
            logger.warning(f"No content extracted from {document_name}")

        self._index.ensure_ready()
        chunk_count = 0

        try:
            for text in chunks:
                record = self._embed_chunk(text, document_name)
                self._index.upsert(record)
                chunk_count += 1
                logger.debug(f"Stored chunk {chunk_count}/{len(chunks)} of {document_name}")
        except Exception as e:
            logger.error(
                f"Ingestion of {document_name} stopped after {chunk_count}/{len(chunks)} chunks: {e}"
            )
            raise IngestionFailed(
                f"Failed to ingest {document_name} after {chunk_count} of {len(chunks)} chunks: {e}"
            ) from e

        document = Document(
            name=document_name,
            storage_path=storage_path,
            chunk_count=chunk_count,
            ingested_at=datetime.now(timezone.utc),
        )
        with self._catalog_lock:
            self._documents.append(document)

        logger.info(f"Ingestion complete: {document_name} -> {chunk_count} chunks")
        return chunk_count

    def ingest_file(self, file_path: str, document_name: str) -> int:
        """
        Read a stored upload as UTF-8 text and ingest it.

        Raises:
            UnicodeDecodeError: If the file is not valid UTF-8.
            IngestionFailed: If embedding or storage fails partway.
        """
        content = Path(file_path).read_text(encoding="utf-8")
        return self.ingest(content, document_name, storage_path=str(file_path))

    def search(self, question: str, max_results: int = DEFAULT_MAX_RESULTS) -> List[RetrievalResult]:
        """
        Find the chunks most relevant to a question.

        Args:
            question: Natural language query.
            max_results: Maximum number of chunks to return.

        Returns:
            Retrieval results, most similar first. Empty for a blank question
            or when nothing has been ingested yet.

        Raises:
            EmbeddingError: If the query embedding fails.
        """
        if not question or not question.strip():
            return []
        if self._index.count() == 0:
            return []

        try:
            query_vector = self._embedder.embed(question)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Failed to embed question: {e}") from e

        matches = self._index.search(query_vector, top_k=max_results)

        return [
            RetrievalResult(text=record.text, source=record.source, score=score)
            for record, score in matches
        ]

    def list_documents(self) -> List[Document]:
        """Return the catalog in ingestion order."""
        with self._catalog_lock:
            return list(self._documents)
