"""RAG workshop: document Q&A, group chat and assistant services."""

__version__ = "1.0.0"
