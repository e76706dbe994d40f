"""Single-persona chat assistant with optional conversation history."""

from typing import Optional, Sequence

from rag_workshop.clients.base import TextCompleter
from rag_workshop.errors import CompletionError
from rag_workshop.models import ChatTurn

ASSISTANT_SYSTEM_MESSAGE = """You are a technical assistant specialized in LLM agents and retrieval-augmented generation.
Answer clearly and concisely.
Provide code examples when possible."""

HISTORY_ASSISTANT_SYSTEM_MESSAGE = "You are an expert technical assistant."


class ChatAssistant:
    """Sends a user message to the completer under a fixed persona."""

    def __init__(self, completer: TextCompleter, instructions: str = ASSISTANT_SYSTEM_MESSAGE):
        self._completer = completer
        self._instructions = instructions

    def _complete(self, prompt: str, instructions: str) -> str:
        try:
            return self._completer.complete(prompt, instructions=instructions)
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(f"Assistant completion failed: {e}") from e

    def chat(self, message: str) -> str:
        return self._complete(message, self._instructions)

    def chat_with_history(
        self,
        message: str,
        history: Sequence[ChatTurn] = (),
        system_prompt: Optional[str] = None,
    ) -> str:
        """
        Answer a message with the previous conversation prepended to it.

        Args:
            message: The new user message.
            history: Earlier turns, oldest first.
            system_prompt: Persona override for this call.

        Returns:
            The assistant reply.
        """
        history_context = ""
        if history:
            history_context = (
                "Previous conversation:\n"
                + "\n".join(f"[{turn.role}]: {turn.message}" for turn in history)
                + "\n\n"
            )

        return self._complete(
            history_context + message,
            system_prompt or HISTORY_ASSISTANT_SYSTEM_MESSAGE,
        )
