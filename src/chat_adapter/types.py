"""Request-scoped data shapes shared across the adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, NamedTuple, TypedDict

Role = Literal["user", "assistant", "system"]

#: A tagged content fragment. Only ``{"type": "text", "text": ...}`` is
#: interpreted; image, tool_use, tool_result, etc. pass through opaquely.
ContentPart = dict[str, Any]


class TextPart(TypedDict):
    """The one content part variant the adapter builds itself."""

    type: Literal["text"]
    text: str


class Message(TypedDict):
    """A message after adaptation: ``content`` is always a list."""

    role: Role
    content: list[ContentPart]


class FunctionDescriptor(TypedDict, total=False):
    name: str
    description: str
    parameters: dict[str, Any]


class ToolDefinition(TypedDict):
    """Canonical, provider-agnostic tool definition."""

    type: Literal["function"]
    function: FunctionDescriptor


class ClaudeTool(TypedDict, total=False):
    name: str
    description: str
    input_schema: dict[str, Any]


class AdaptedMessages(NamedTuple):
    """Output of message normalization."""

    messages: list[Message]
    system_prompts: list[ContentPart]


@dataclass
class UsageCounts:
    """Token usage accumulated over a streaming session."""

    input_tokens: int = 0
    output_tokens: int = 0

    def add(self, *, input_tokens: Any = None, output_tokens: Any = None) -> None:
        """Accumulate reported deltas; missing or zero values are ignored."""
        if input_tokens:
            self.input_tokens += int(input_tokens)
        if output_tokens:
            self.output_tokens += int(output_tokens)

    def as_dict(self) -> dict[str, int]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
        }


class CompletionResult(TypedDict):
    """Result of a non-streaming completion.

    ``message`` is the raw provider response; ``usage`` is whatever the
    provider reported on it.
    """

    message: Any
    usage: Any
    finish_reason: Literal["stop"]


@dataclass(frozen=True)
class ModelCost:
    """Price per ``tokens`` units, in ``currency``."""

    currency: str
    tokens: int
    input: int
    output: int


@dataclass(frozen=True)
class ModelDescriptor:
    """A static catalog entry for one provider model."""

    id: str
    cost: ModelCost
    context: int
    name: str | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)
    qualitative_speed: str | None = None
    max_output: int | None = None
    training_cutoff: str | None = None
    succeeded_by: str | None = None
