"""Word-window chunking for document ingestion."""

from typing import List

from rag_workshop.errors import InvalidChunkingParameters

DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 50


def validate_chunking_parameters(max_size: int, overlap: int) -> None:
    """
    Reject chunk settings that would stall or reverse the window.

    Raises:
        InvalidChunkingParameters: If max_size < 1 or overlap is outside [0, max_size).
    """
    if max_size < 1:
        raise InvalidChunkingParameters(f"Chunk size must be positive, got {max_size}")
    if overlap < 0 or overlap >= max_size:
        raise InvalidChunkingParameters(
            f"Chunk overlap must be in [0, {max_size}), got {overlap}"
        )


def chunk_text(
    text: str,
    max_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[str]:
    """
    Split text into overlapping chunks of at most ``max_size`` words.

    Words are whitespace separated. Each window starts ``max_size - overlap``
    words after the previous one, so consecutive chunks share ``overlap``
    words. Chunks may end mid-sentence.

    Args:
        text: Plain text to split.
        max_size: Maximum number of words per chunk.
        overlap: Number of words repeated at the start of the next chunk.

    Returns:
        List of chunk texts, words joined by single spaces. Empty for blank text.

    Raises:
        InvalidChunkingParameters: If overlap >= max_size or the values are negative.
    """
    validate_chunking_parameters(max_size, overlap)

    words = text.split()
    step = max_size - overlap

    chunks = []
    for start in range(0, len(words), step):
        window = words[start:start + max_size]
        if window:
            chunks.append(" ".join(window))

    return chunks
