"""Mock provider for testing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from chat_adapter.providers.base import ProviderRequest


def _last_user_text(request: ProviderRequest) -> str:
    for message in reversed(request.messages):
        if message.get("role") != "user":
            continue
        for part in reversed(message.get("content", [])):
            if isinstance(part, dict) and part.get("type") == "text":
                return str(part.get("text", ""))
    return ""


class MockProvider:
    """Mock provider for testing without API calls.

    Echoes the last user text, as a response dict or as Messages API shaped
    stream events split into small deltas.
    """

    def __init__(self, *, chunk_size: int = 8) -> None:
        self.chunk_size = chunk_size

    async def create(self, request: ProviderRequest) -> dict[str, Any]:
        """Return a deterministic mock response."""
        text = f"echo: {_last_user_text(request)[:100]}"
        return {
            "id": "msg_mock",
            "type": "message",
            "role": "assistant",
            "model": request.model,
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 10, "output_tokens": len(text.split())},
        }

    async def stream(self, request: ProviderRequest) -> AsyncIterator[dict[str, Any]]:
        """Yield a deterministic message_start/delta/stop event sequence."""
        text = f"echo: {_last_user_text(request)[:100]}"
        yield {
            "type": "message_start",
            "message": {
                "id": "msg_mock",
                "model": request.model,
                "usage": {"input_tokens": 10, "output_tokens": 1},
            },
        }
        yield {
            "type": "content_block_start",
            "index": 0,
            "content_block": {"type": "text", "text": ""},
        }
        for start in range(0, len(text), self.chunk_size):
            yield {
                "type": "content_block_delta",
                "index": 0,
                "delta": {"type": "text_delta", "text": text[start : start + self.chunk_size]},
            }
        yield {"type": "content_block_stop", "index": 0}
        yield {
            "type": "message_delta",
            "delta": {"stop_reason": "end_turn"},
            "usage": {"output_tokens": len(text.split())},
        }
        yield {"type": "message_stop"}

    async def aclose(self) -> None:
        """Nothing to release."""
