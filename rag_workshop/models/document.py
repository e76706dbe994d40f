"""Document and chunk models for ingestion and retrieval."""

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class Document:
    """Catalog entry for one successful ingestion."""

    name: str  # Display name supplied by the uploader (e.g. filename)
    storage_path: str  # Opaque location of the raw bytes
    chunk_count: int  # Number of chunks stored for this document
    ingested_at: datetime


@dataclass(frozen=True)
class ChunkRecord:
    """One chunk stored in the vector index."""

    id: str
    text: str
    source: str  # Name of the owning Document
    vector: Tuple[float, ...]


@dataclass(frozen=True)
class RetrievalResult:
    """A chunk returned for a query, most similar first."""

    text: str
    source: str
    score: float
