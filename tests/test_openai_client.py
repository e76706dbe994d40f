"""Tests for the OpenAI adapters, with the SDK client mocked out."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import openai
import pytest

from rag_workshop.clients import OpenAICompleter, OpenAIEmbedder, create_openai_client
from rag_workshop.config.configuration import OpenAIConfig
from rag_workshop.errors import CompletionError, EmbeddingError


def make_config(provider="openai", **overrides):
    values = dict(
        provider=provider,
        api_key="test-key",
        model="gpt-4o-mini",
        embedding_model="text-embedding-3-small",
        embedding_dimensions=256,
        azure_endpoint="https://test.openai.azure.com/" if provider == "azure" else None,
        api_version="2024-10-21" if provider == "azure" else None,
        timeout=10.0,
    )
    values.update(overrides)
    return OpenAIConfig(**values)


def embedding_response(vector):
    return SimpleNamespace(data=[SimpleNamespace(embedding=vector)])


def completion_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestCreateClient:

    def test_openai_provider(self):
        client = create_openai_client(make_config("openai"))

        assert isinstance(client, openai.OpenAI)
        assert not isinstance(client, openai.AzureOpenAI)

    def test_azure_provider(self):
        client = create_openai_client(make_config("azure"))

        assert isinstance(client, openai.AzureOpenAI)

    def test_from_config_uses_configured_models(self):
        embedder = OpenAIEmbedder.from_config(make_config(embedding_model="custom-embed"))
        completer = OpenAICompleter.from_config(make_config(model="custom-chat"))

        assert embedder._model == "custom-embed"
        assert embedder._dimensions == 256
        assert completer._model == "custom-chat"


class TestOpenAIEmbedder:

    def test_embed_returns_vector(self):
        client = MagicMock()
        client.embeddings.create.return_value = embedding_response([0.1, 0.2, 0.3])
        embedder = OpenAIEmbedder(client, "text-embedding-3-small", dimensions=3)

        assert embedder.embed("hello") == [0.1, 0.2, 0.3]
        client.embeddings.create.assert_called_once_with(
            input="hello", model="text-embedding-3-small", dimensions=3
        )

    def test_ada_model_omits_dimensions(self):
        client = MagicMock()
        client.embeddings.create.return_value = embedding_response([0.5])
        embedder = OpenAIEmbedder(client, "text-embedding-ada-002", dimensions=1536)

        embedder.embed("hello")

        client.embeddings.create.assert_called_once_with(input="hello", model="text-embedding-ada-002")

    def test_provider_error_becomes_embedding_error(self):
        client = MagicMock()
        client.embeddings.create.side_effect = openai.OpenAIError("boom")
        embedder = OpenAIEmbedder(client, "text-embedding-3-small")

        with pytest.raises(EmbeddingError) as exc_info:
            embedder.embed("hello")

        assert "boom" in str(exc_info.value)

    def test_empty_data_becomes_embedding_error(self):
        client = MagicMock()
        client.embeddings.create.return_value = SimpleNamespace(data=[])
        embedder = OpenAIEmbedder(client, "text-embedding-3-small")

        with pytest.raises(EmbeddingError):
            embedder.embed("hello")


class TestOpenAICompleter:

    def test_complete_sends_system_and_user_messages(self):
        client = MagicMock()
        client.chat.completions.create.return_value = completion_response("Hi there.")
        completer = OpenAICompleter(client, "gpt-4o-mini")

        reply = completer.complete("Hello", instructions="Be nice.")

        assert reply == "Hi there."
        client.chat.completions.create.assert_called_once_with(
            model="gpt-4o-mini",
            messages=[
                {"role": "system", "content": "Be nice."},
                {"role": "user", "content": "Hello"},
            ],
            temperature=0,
        )

    def test_complete_without_instructions(self):
        client = MagicMock()
        client.chat.completions.create.return_value = completion_response("ok")
        completer = OpenAICompleter(client, "gpt-4o-mini")

        completer.complete("Hello")

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [{"role": "user", "content": "Hello"}]

    def test_reply_is_returned_verbatim(self):
        client = MagicMock()
        client.chat.completions.create.return_value = completion_response("  Hi there.\n")

        assert OpenAICompleter(client, "gpt-4o-mini").complete("Hello") == "  Hi there.\n"

    def test_none_content_becomes_empty_string(self):
        client = MagicMock()
        client.chat.completions.create.return_value = completion_response(None)

        assert OpenAICompleter(client, "gpt-4o-mini").complete("Hello") == ""

    def test_provider_error_becomes_completion_error(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = openai.OpenAIError("boom")

        with pytest.raises(CompletionError):
            OpenAICompleter(client, "gpt-4o-mini").complete("Hello")

    def test_empty_choices_becomes_completion_error(self):
        client = MagicMock()
        client.chat.completions.create.return_value = SimpleNamespace(choices=[])

        with pytest.raises(CompletionError):
            OpenAICompleter(client, "gpt-4o-mini").complete("Hello")
