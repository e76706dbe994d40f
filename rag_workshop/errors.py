"""Error types shared by the workshop services.

Every failure raised by the core carries a machine readable ``code`` next to
its message so the HTTP layer can return it as a structured error.
"""


class WorkshopError(Exception):
    """Base class for all domain errors raised by the workshop core."""

    code = "WORKSHOP_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Serialize as ``{"code": ..., "message": ...}``."""
        return {"code": self.code, "message": self.message}


class InvalidChunkingParameters(WorkshopError):
    """Raised when chunk size and overlap cannot produce progress."""

    code = "INVALID_CHUNKING_PARAMETERS"


class DimensionMismatch(WorkshopError):
    """Raised when a vector length differs from the index dimension."""

    code = "DIMENSION_MISMATCH"


class EmbeddingError(WorkshopError):
    """Raised when the embedding provider fails."""

    code = "EMBEDDING_FAILED"


class CompletionError(WorkshopError):
    """Raised when the text-completion provider fails."""

    code = "COMPLETION_FAILED"


class IngestionFailed(WorkshopError):
    """Raised when embedding or storage fails partway through an ingestion.

    Chunks stored before the failure stay in the index.
    """

    code = "INGESTION_FAILED"


class SynthesisFailed(WorkshopError):
    """Raised when the completion call behind an answer fails."""

    code = "SYNTHESIS_FAILED"


class TurnFailed(WorkshopError):
    """Raised when a group chat participant cannot produce its message."""

    code = "TURN_FAILED"


class A2AError(WorkshopError):
    """Raised when a remote agent cannot be discovered or does not answer."""

    code = "A2A_FAILED"
