"""Provider protocol: the minimal surface the dispatcher needs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@dataclass(frozen=True)
class ProviderRequest:
    """One Messages API request, already adapted and budget-checked."""

    model: str
    max_tokens: int
    temperature: float
    system: str
    messages: list[dict[str, Any]]
    tools: list[dict[str, Any]] | None = None
    tool_choice: dict[str, str] | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``messages.create``; unset optionals omitted."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": self.system,
            "messages": self.messages,
        }
        if self.tools:
            kwargs["tools"] = self.tools
        if self.tool_choice is not None:
            kwargs["tool_choice"] = self.tool_choice
        return kwargs


@runtime_checkable
class Provider(Protocol):
    """Issue one request, either as a whole response or as an event stream."""

    async def create(self, request: ProviderRequest) -> Any:
        """Return the provider's response object (with a ``usage`` field)."""
        ...

    def stream(self, request: ProviderRequest) -> AsyncIterator[Any]:
        """Return the provider's stream events; the call starts on iteration."""
        ...

    async def aclose(self) -> None:
        """Release client resources."""
        ...
