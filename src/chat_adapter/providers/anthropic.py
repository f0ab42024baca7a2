"""Anthropic Messages API provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chat_adapter.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from chat_adapter.providers.base import ProviderRequest


class AnthropicProvider:
    """Thin wrapper over ``anthropic.AsyncAnthropic``.

    Errors from the SDK are not intercepted; they reach the caller as raised.
    """

    def __init__(self, api_key: str, *, client: Any = None) -> None:
        """Initialize with an API key, or a pre-built async client."""
        self.api_key = api_key
        self._client: Any = client

    def _get_client(self) -> Any:
        """Lazily initialize and return the async Anthropic client."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError as e:
                raise ConfigurationError(
                    "anthropic package not installed",
                    hint="pip install anthropic",
                ) from e
            self._client = AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def create(self, request: ProviderRequest) -> Any:
        """Send one non-streaming Messages API request."""
        client = self._get_client()
        return await client.messages.create(**request.to_kwargs())

    async def stream(self, request: ProviderRequest) -> AsyncIterator[Any]:
        """Yield raw Messages API stream events as they arrive."""
        client = self._get_client()
        events = await client.messages.create(**request.to_kwargs(), stream=True)
        async for event in events:
            yield event

    async def aclose(self) -> None:
        """Close underlying async client resources."""
        client = self._client
        if client is None:
            return
        self._client = None
        await client.close()
