"""Test helpers: builders for Messages API shaped stream events.

Keep this file tiny: it exists so streaming tests do not each spell out
nested event dicts.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any


def text_delta(text: str, *, index: int = 0) -> dict[str, Any]:
    return {
        "type": "content_block_delta",
        "index": index,
        "delta": {"type": "text_delta", "text": text},
    }


def message_start(input_tokens: int, output_tokens: int = 0) -> dict[str, Any]:
    return {
        "type": "message_start",
        "message": {
            "id": "msg_test",
            "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
        },
    }


def message_delta(output_tokens: int) -> dict[str, Any]:
    return {
        "type": "message_delta",
        "delta": {"stop_reason": "end_turn"},
        "usage": {"output_tokens": output_tokens},
    }


def as_sdk_object(value: Any) -> Any:
    """Recursively turn dicts into attribute-access objects, like SDK models."""
    if isinstance(value, dict):
        return SimpleNamespace(**{k: as_sdk_object(v) for k, v in value.items()})
    if isinstance(value, list):
        return [as_sdk_object(v) for v in value]
    return value


async def aiter_events(events: list[Any]) -> Any:
    """Async-iterate a list of events; exceptions in the list are raised."""
    for event in events:
        if isinstance(event, BaseException):
            raise event
        yield event
