"""Tests for the single-persona chat assistant."""

import pytest

from rag_workshop.chat import ChatAssistant
from rag_workshop.chat.assistant import ASSISTANT_SYSTEM_MESSAGE, HISTORY_ASSISTANT_SYSTEM_MESSAGE
from rag_workshop.errors import CompletionError
from rag_workshop.models import ChatTurn

from fakes import FailingCompleter


class TestChatAssistant:

    def test_chat_sends_message_with_persona(self, completer):
        assistant = ChatAssistant(completer)

        reply = assistant.chat("What is RAG?")

        assert reply == "reply 1"
        assert completer.calls == [("What is RAG?", ASSISTANT_SYSTEM_MESSAGE)]

    def test_chat_with_history_prepends_previous_turns(self, completer):
        assistant = ChatAssistant(completer)
        history = [
            ChatTurn(role="user", message="What is an embedding?"),
            ChatTurn(role="assistant", message="A vector."),
        ]

        assistant.chat_with_history("And cosine similarity?", history)

        prompt, instructions = completer.calls[0]
        assert prompt == (
            "Previous conversation:\n"
            "[user]: What is an embedding?\n"
            "[assistant]: A vector.\n\n"
            "And cosine similarity?"
        )
        assert instructions == HISTORY_ASSISTANT_SYSTEM_MESSAGE

    def test_chat_with_history_without_history(self, completer):
        assistant = ChatAssistant(completer)

        assistant.chat_with_history("Hello")

        assert completer.calls[0][0] == "Hello"

    def test_system_prompt_override(self, completer):
        assistant = ChatAssistant(completer)

        assistant.chat_with_history("Hello", system_prompt="You are terse.")

        assert completer.calls[0][1] == "You are terse."

    def test_completion_error_propagates(self):
        assistant = ChatAssistant(FailingCompleter())

        with pytest.raises(CompletionError, match="model unavailable"):
            assistant.chat("Hello")

    def test_transport_failure_becomes_completion_error(self):
        assistant = ChatAssistant(FailingCompleter(error=ConnectionError("connection refused")))

        with pytest.raises(CompletionError) as exc_info:
            assistant.chat_with_history("Hello")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
