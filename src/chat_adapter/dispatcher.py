"""Completion dispatch: adapt, budget-check, then call the provider."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from chat_adapter.catalog import MODELS, list_model_names
from chat_adapter.errors import ConfigurationError
from chat_adapter.messages import normalize_messages
from chat_adapter.providers.base import ProviderRequest
from chat_adapter.streaming import StreamHandle, StreamTranscoder
from chat_adapter.tokens import check_token_budget, to_json
from chat_adapter.tools import map_tool_choice, normalize_tools, to_claude_tools

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from chat_adapter.config import Config
    from chat_adapter.providers.base import Provider
    from chat_adapter.types import CompletionResult, ModelDescriptor

logger = logging.getLogger(__name__)


def get_provider(config: Config) -> Provider:
    """Get the appropriate provider based on configuration."""
    if config.use_mock:
        from chat_adapter.providers.mock import MockProvider

        return MockProvider()

    from chat_adapter.providers.anthropic import AnthropicProvider

    if not config.api_key:
        raise ConfigurationError(
            "api_key required for real API",
            hint="Set ANTHROPIC_API_KEY or pass Config(api_key=...).",
        )
    return AnthropicProvider(config.api_key)


class CompletionDispatcher:
    """Chat-completion entry point backed by one provider client.

    The provider client is the only state shared between requests. Streaming
    requests run in background tasks that the dispatcher keeps referenced
    until they finish; there is no cancellation of in-flight streams.
    """

    def __init__(self, config: Config, provider: Provider | None = None) -> None:
        self.config = config
        self.provider = provider if provider is not None else get_provider(config)
        self._stream_tasks: set[asyncio.Task[Any]] = set()

    def build_request(
        self,
        messages: Iterable[Mapping[str, Any]],
        *,
        model: str | None = None,
        tools: Iterable[Mapping[str, Any]] | None = None,
        tool_choice: str | Mapping[str, Any] | None = None,
    ) -> ProviderRequest:
        """Adapt messages and tools into a request, enforcing the input budget."""
        adapted, system_prompts = normalize_messages(messages)
        estimate = check_token_budget(
            adapted,
            system_prompts,
            self.config.max_input_tokens,
            chars_per_token=self.config.chars_per_token,
        )
        logger.debug(
            "Adapted %d messages (%d system parts), ~%d input tokens",
            len(adapted),
            len(system_prompts),
            estimate,
        )

        claude_tools = to_claude_tools(normalize_tools(tools)) if tools else None
        return ProviderRequest(
            model=model or self.config.default_model or "",
            max_tokens=self.config.max_output_tokens,
            temperature=self.config.temperature,
            system=self.config.preamble + to_json(system_prompts),
            messages=list(adapted),
            tools=list(claude_tools) if claude_tools else None,
            tool_choice=map_tool_choice(tool_choice) if claude_tools else None,
        )

    async def complete(
        self,
        messages: Iterable[Mapping[str, Any]],
        *,
        stream: bool = False,
        model: str | None = None,
        tools: Iterable[Mapping[str, Any]] | None = None,
        tool_choice: str | Mapping[str, Any] | None = None,
    ) -> CompletionResult | StreamHandle:
        """Run one chat completion.

        Args:
            messages: Caller messages; string or list content, optional roles.
            stream: Return a StreamHandle immediately instead of waiting.
            model: Model id; defaults to ``Config.default_model``.
            tools: Tool definitions in any supported convention.
            tool_choice: OpenAI-style tool choice, mapped for Anthropic.

        Returns:
            ``{"message", "usage", "finish_reason"}`` for non-streaming calls,
            otherwise a StreamHandle whose usage resolves at end of stream.

        Raises:
            TokenBudgetExceeded: The estimated input is over the limit. No
                provider call has been made.
        """
        request = self.build_request(
            messages, model=model, tools=tools, tool_choice=tool_choice
        )
        logger.debug("Dispatching to %s (stream=%s)", request.model, stream)

        if stream:
            return self._start_stream(request)

        response = await self.provider.create(request)
        usage = (
            response.get("usage")
            if isinstance(response, dict)
            else getattr(response, "usage", None)
        )
        return {"message": response, "usage": usage, "finish_reason": "stop"}

    def _start_stream(self, request: ProviderRequest) -> StreamHandle:
        transcoder = StreamTranscoder(max_buffered=self.config.stream_buffer)
        task = asyncio.create_task(
            transcoder.run(self.provider.stream(request)),
            name="chat_adapter.stream",
        )
        self._stream_tasks.add(task)
        task.add_done_callback(self._stream_tasks.discard)
        return transcoder.handle

    def models(self) -> tuple[ModelDescriptor, ...]:
        """Return the static model catalog."""
        return MODELS

    def list_models(self) -> list[str]:
        """Return every model id and alias."""
        return list_model_names(self.models())

    async def aclose(self) -> None:
        """Close the provider client."""
        aclose = getattr(self.provider, "aclose", None)
        if callable(aclose):
            await aclose()

    def list(self) -> list[str]:  # noqa: A003
        """Alias of list_models() for the generic chat-completion interface."""
        return self.list_models()
