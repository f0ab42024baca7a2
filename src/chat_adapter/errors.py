"""Exception hierarchy for chat-adapter."""

from __future__ import annotations


class ChatAdapterError(Exception):
    """Base exception for all chat-adapter errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ChatAdapterError):
    """Configuration validation or caller input shape failed."""


class TokenBudgetExceeded(ChatAdapterError):
    """Estimated input size is over the configured limit.

    Raised before any provider call is issued. Carries the estimate and the
    limit so callers can report or trim without re-estimating.
    """

    def __init__(
        self,
        input_tokens: int,
        max_tokens: int,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"Input is too large: ~{input_tokens} tokens exceeds the limit of "
            f"{max_tokens}",
            hint=hint
            or "Shorten the conversation or raise Config.max_input_tokens.",
        )
        self.input_tokens = input_tokens
        self.max_tokens = max_tokens


class StreamClosedError(ChatAdapterError):
    """A write was attempted on an output stream that is already closed."""
