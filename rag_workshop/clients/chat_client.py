"""Chat completion clients for the AutoGen group chat agents."""

import asyncio
import logging
from typing import Any, AsyncGenerator, Optional, Sequence, Tuple, Union

from autogen_core import CancellationToken
from autogen_core.models import (
    AssistantMessage,
    ChatCompletionClient,
    CreateResult,
    LLMMessage,
    ModelFamily,
    ModelInfo,
    RequestUsage,
    SystemMessage,
    UserMessage,
)
from autogen_ext.models.openai import AzureOpenAIChatCompletionClient, OpenAIChatCompletionClient

from rag_workshop.clients.base import TextCompleter
from rag_workshop.config.configuration import OpenAIConfig, get_config

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0
MAX_CONTEXT_TOKENS = 128000

# Group chat agents only exchange plain text
TEXT_MODEL_INFO = ModelInfo(
    vision=False,
    function_calling=False,
    json_output=False,
    family=ModelFamily.UNKNOWN,
    structured_output=False,
)


def create_chat_completion_client(config: Optional[OpenAIConfig] = None) -> ChatCompletionClient:
    """Create the AutoGen model client for OpenAI or Azure OpenAI."""
    config = config or get_config().openai

    if config.provider == "azure":
        return AzureOpenAIChatCompletionClient(
            model=config.model,
            azure_deployment=config.model,
            azure_endpoint=config.azure_endpoint,
            api_version=config.api_version,
            api_key=config.api_key,
            temperature=CHAT_TEMPERATURE,
            timeout=config.timeout,
            model_info=TEXT_MODEL_INFO,
        )
    return OpenAIChatCompletionClient(
        model=config.model,
        api_key=config.api_key,
        temperature=CHAT_TEMPERATURE,
        timeout=config.timeout,
    )


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    return " ".join(str(part) for part in content)


def render_messages(messages: Sequence[LLMMessage]) -> Tuple[Optional[str], str]:
    """
    Split agent messages into (instructions, prompt).

    System messages become the instructions; every other message is rendered
    as a ``[source]: text`` line of the prompt.
    """
    instructions = []
    lines = []
    for message in messages:
        if isinstance(message, SystemMessage):
            instructions.append(message.content)
        elif isinstance(message, (UserMessage, AssistantMessage)):
            lines.append(f"[{message.source}]: {_message_text(message.content)}")

    return ("\n\n".join(instructions) or None), "\n".join(lines)


class CompleterChatClient(ChatCompletionClient):
    """Lets any TextCompleter drive AutoGen agents.

    The completer is blocking, so each call runs in a worker thread.
    """

    def __init__(self, completer: TextCompleter):
        self._completer = completer
        self._total_usage = RequestUsage(prompt_tokens=0, completion_tokens=0)
        self._last_usage = RequestUsage(prompt_tokens=0, completion_tokens=0)

    async def create(
        self,
        messages: Sequence[LLMMessage],
        *,
        tools: Sequence[Any] = (),
        json_output: Optional[Any] = None,
        extra_create_args: Any = None,
        cancellation_token: Optional[CancellationToken] = None,
        **kwargs: Any,
    ) -> CreateResult:
        instructions, prompt = render_messages(messages)
        logger.debug(f"Completer call with {len(messages)} agent messages")
        content = await asyncio.to_thread(self._completer.complete, prompt, instructions)

        self._last_usage = RequestUsage(
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(content.split()),
        )
        self._total_usage = RequestUsage(
            prompt_tokens=self._total_usage.prompt_tokens + self._last_usage.prompt_tokens,
            completion_tokens=self._total_usage.completion_tokens + self._last_usage.completion_tokens,
        )
        return CreateResult(finish_reason="stop", content=content, usage=self._last_usage, cached=False)

    async def create_stream(
        self,
        messages: Sequence[LLMMessage],
        *,
        tools: Sequence[Any] = (),
        json_output: Optional[Any] = None,
        extra_create_args: Any = None,
        cancellation_token: Optional[CancellationToken] = None,
        **kwargs: Any,
    ) -> AsyncGenerator[Union[str, CreateResult], None]:
        result = await self.create(messages, cancellation_token=cancellation_token)
        yield result.content
        yield result

    async def close(self) -> None:
        pass

    def actual_usage(self) -> RequestUsage:
        return self._last_usage

    def total_usage(self) -> RequestUsage:
        return self._total_usage

    def count_tokens(self, messages: Sequence[LLMMessage], *, tools: Sequence[Any] = ()) -> int:
        _, prompt = render_messages(messages)
        return len(prompt.split())

    def remaining_tokens(self, messages: Sequence[LLMMessage], *, tools: Sequence[Any] = ()) -> int:
        return max(0, MAX_CONTEXT_TOKENS - self.count_tokens(messages, tools=tools))

    @property
    def capabilities(self) -> Any:
        return TEXT_MODEL_INFO

    @property
    def model_info(self) -> ModelInfo:
        return TEXT_MODEL_INFO
