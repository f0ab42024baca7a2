"""Normalize caller messages into the Anthropic Messages API shape.

Anthropic takes system instructions on a separate channel and expects
user/assistant alternation, so system-role content is split out and
back-to-back user turns are merged into a single entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from chat_adapter.errors import ConfigurationError
from chat_adapter.types import AdaptedMessages, ContentPart, Message, TextPart


def normalize_content(content: Any) -> list[ContentPart]:
    """Coerce message content to a fresh list of content parts."""
    if content is None:
        return []
    if isinstance(content, str):
        part: TextPart = {"type": "text", "text": content}
        return [part]  # type: ignore[list-item]
    if isinstance(content, (list, tuple)):
        return list(content)
    return [content]


def normalize_messages(messages: Iterable[Mapping[str, Any]]) -> AdaptedMessages:
    """Split out system content and merge consecutive user turns.

    The caller's messages are left untouched; every returned entry and
    content list is newly built.

    Example:
        >>> normalize_messages([{"role": "user", "content": "hi"}])
        AdaptedMessages(messages=[{'role': 'user', 'content': [{'type': 'text', 'text': 'hi'}]}], system_prompts=[])
    """
    adapted: list[Message] = []
    system_prompts: list[ContentPart] = []
    previous_was_user = False

    for idx, message in enumerate(messages):
        if not isinstance(message, Mapping):
            raise ConfigurationError(
                f"messages[{idx}] must be a mapping, got {type(message).__name__}",
                hint="Pass messages like {'role': 'user', 'content': 'Hello'}.",
            )
        role = message.get("role") or "user"
        content = normalize_content(message.get("content"))

        if role == "system":
            system_prompts.extend(content)
            continue

        if role == "user" and previous_was_user:
            adapted[-1]["content"].extend(content)
            continue

        entry: dict[str, Any] = dict(message)
        entry["role"] = role
        entry["content"] = content
        adapted.append(entry)  # type: ignore[arg-type]
        previous_was_user = role == "user"

    return AdaptedMessages(adapted, system_prompts)
