"""OpenAI and Azure OpenAI implementations of the capability interfaces."""

import logging
from typing import List, Optional, Union

from openai import AzureOpenAI, OpenAI, OpenAIError

from rag_workshop.config.configuration import OpenAIConfig, get_config
from rag_workshop.errors import CompletionError, EmbeddingError

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0

OpenAIClient = Union[OpenAI, AzureOpenAI]


def create_openai_client(config: Optional[OpenAIConfig] = None) -> OpenAIClient:
    """Create an OpenAI or Azure OpenAI client from configuration."""
    config = config or get_config().openai

    if config.provider == "azure":
        return AzureOpenAI(
            api_key=config.api_key,
            azure_endpoint=config.azure_endpoint,
            api_version=config.api_version,
            timeout=config.timeout,
        )
    return OpenAI(api_key=config.api_key, timeout=config.timeout)


class OpenAIEmbedder:
    """TextEmbedder backed by the embeddings endpoint."""

    def __init__(
        self,
        client: OpenAIClient,
        model: str,
        dimensions: Optional[int] = None,
    ):
        self._client = client
        self._model = model
        self._dimensions = dimensions

    @classmethod
    def from_config(cls, config: Optional[OpenAIConfig] = None) -> "OpenAIEmbedder":
        config = config or get_config().openai
        return cls(
            client=create_openai_client(config),
            model=config.embedding_model,
            dimensions=config.embedding_dimensions,
        )

    def embed(self, text: str) -> List[float]:
        """
        Generate embedding vector for a text.

        Raises:
            EmbeddingError: If embedding generation fails.
        """
        kwargs = {"input": text, "model": self._model}
        # text-embedding-ada-002 rejects the dimensions argument
        if self._dimensions and not self._model.endswith("ada-002"):
            kwargs["dimensions"] = self._dimensions

        try:
            response = self._client.embeddings.create(**kwargs)
        except OpenAIError as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e

        if not response.data:
            raise EmbeddingError("Embedding response contained no data")
        return response.data[0].embedding


class OpenAICompleter:
    """TextCompleter backed by chat completions."""

    def __init__(self, client: OpenAIClient, model: str):
        self._client = client
        self._model = model

    @classmethod
    def from_config(cls, config: Optional[OpenAIConfig] = None) -> "OpenAICompleter":
        config = config or get_config().openai
        return cls(client=create_openai_client(config), model=config.model)

    def complete(self, prompt: str, instructions: Optional[str] = None) -> str:
        """
        Send one system + user exchange and return the reply text.

        Raises:
            CompletionError: If the completion call fails.
        """
        messages = []
        if instructions:
            messages.append({"role": "system", "content": instructions})
        messages.append({"role": "user", "content": prompt})

        try:
            completion = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=CHAT_TEMPERATURE,
            )
        except OpenAIError as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        if not completion.choices:
            raise CompletionError("Completion response contained no choices")

        content = completion.choices[0].message.content or ""
        logger.debug(f"Completion returned {len(content)} characters")
        return content
