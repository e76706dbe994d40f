"""Capability interfaces the core depends on.

The document repository, answer synthesizer and group chat only talk to
these protocols, so any provider (or a deterministic fake) can be injected.
"""

from typing import List, Optional, Protocol


class TextEmbedder(Protocol):
    """Turns text into a fixed-length vector."""

    def embed(self, text: str) -> List[float]:
        """
        Args:
            text: The text to embed.

        Returns:
            Embedding vector; its length is the same for every call.

        Raises:
            EmbeddingError: If the provider call fails.
        """
        ...


class TextCompleter(Protocol):
    """Single-shot text completion."""

    def complete(self, prompt: str, instructions: Optional[str] = None) -> str:
        """
        Args:
            prompt: User message sent to the model.
            instructions: Optional system/persona instruction.

        Returns:
            The model response text.

        Raises:
            CompletionError: If the provider call fails.
        """
        ...
