"""In-memory vector index for document chunks.

Records live only for the lifetime of the process. Similarity is cosine
similarity; ties keep insertion order so results are deterministic.
"""

import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from rag_workshop.errors import DimensionMismatch
from rag_workshop.models import ChunkRecord

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "documents"


def _normalize(vector: np.ndarray) -> np.ndarray:
    return vector / np.maximum(np.linalg.norm(vector), 1e-9)


class InMemoryVectorIndex:
    """Stores chunk records and answers top-K cosine similarity queries."""

    def __init__(self, name: str = DEFAULT_COLLECTION_NAME):
        self.name = name
        self._lock = threading.Lock()
        self._dimension: Optional[int] = None
        self._ready = False
        self._records: List[ChunkRecord] = []
        self._vectors: List[np.ndarray] = []
        self._positions: Dict[str, int] = {}

    @property
    def dimension(self) -> Optional[int]:
        """Vector length fixed by the first upsert, or None while empty."""
        return self._dimension

    def ensure_ready(self) -> None:
        """Initialize storage once; later calls are no-ops."""
        if self._ready:
            return
        with self._lock:
            if self._ready:
                return
            self._records = []
            self._vectors = []
            self._positions = {}
            self._ready = True
            logger.debug(f"Vector index '{self.name}' initialized")

    def upsert(self, record: ChunkRecord) -> None:
        """
        Insert a record, or replace the record with the same id in place.

        Raises:
            DimensionMismatch: If the vector length differs from the index dimension.
                The index is left unchanged.
            ValueError: If the record text is empty.
        """
        if not record.text:
            raise ValueError(f"Chunk record {record.id} has no text")

        self.ensure_ready()
        vector = _normalize(np.asarray(record.vector, dtype=np.float64))

        with self._lock:
            if vector.size == 0:
                raise DimensionMismatch(f"Chunk record {record.id} has an empty vector")
            if self._dimension is None:
                self._dimension = vector.size
                logger.info(f"Vector index '{self.name}' dimension set to {self._dimension}")
            elif vector.size != self._dimension:
                raise DimensionMismatch(
                    f"Vector for chunk {record.id} has {vector.size} dimensions, "
                    f"index '{self.name}' expects {self._dimension}"
                )

            position = self._positions.get(record.id)
            if position is None:
                self._positions[record.id] = len(self._records)
                self._records.append(record)
                self._vectors.append(vector)
            else:
                self._records[position] = record
                self._vectors[position] = vector

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
    ) -> List[Tuple[ChunkRecord, float]]:
        """
        Find the records most similar to a query vector.

        Args:
            query_vector: Embedding of the query.
            top_k: Maximum number of records to return.

        Returns:
            (record, cosine similarity) pairs, most similar first. Empty when
            the index holds no records.

        Raises:
            ValueError: If top_k is not positive.
            DimensionMismatch: If the query length differs from the index dimension.
        """
        if top_k < 1:
            raise ValueError(f"top_k must be positive, got {top_k}")

        self.ensure_ready()
        with self._lock:
            records = list(self._records)
            vectors = list(self._vectors)
            dimension = self._dimension

        if not records:
            return []

        query = np.asarray(query_vector, dtype=np.float64)
        if query.size != dimension:
            raise DimensionMismatch(
                f"Query vector has {query.size} dimensions, "
                f"index '{self.name}' expects {dimension}"
            )

        scores = np.vstack(vectors) @ _normalize(query)
        # Stable sort keeps insertion order for equal scores
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [(records[i], float(scores[i])) for i in order]

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            return len(self._records)

    def __len__(self) -> int:
        return self.count()
