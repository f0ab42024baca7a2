"""Configuration: frozen Config with environment-resolved credentials."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from chat_adapter.errors import ConfigurationError

load_dotenv()

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"
MODEL_ENV_VAR = "CHAT_ADAPTER_MODEL"

DEFAULT_MODEL = "claude-3-5-sonnet-latest"
DEFAULT_MAX_INPUT_TOKENS = 10000
DEFAULT_MAX_OUTPUT_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.0
#: Heuristic divisor for the character-count token estimate.
CHARS_PER_TOKEN = 4

DEFAULT_PREAMBLE = (
    "You are running as the Claude implementation behind a generic "
    "chat-completion adapter. "
    "The following JSON contains system messages from the "
    "user of the chat-completion interface:"
)


@dataclass(frozen=True)
class Config:
    """Immutable configuration for a completion dispatcher.

    The API key is auto-resolved from ``ANTHROPIC_API_KEY`` and the default
    model may be overridden with ``CHAT_ADAPTER_MODEL``. A missing key is only
    an error once the built-in Anthropic provider is constructed.

    Example:
        config = Config(max_input_tokens=20000)
        dispatcher = CompletionDispatcher(config)
    """

    #: Auto-resolved from ``ANTHROPIC_API_KEY`` when *None*.
    api_key: str | None = None
    #: Used when a request does not name a model.
    default_model: str | None = None
    max_input_tokens: int = DEFAULT_MAX_INPUT_TOKENS
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    chars_per_token: int = CHARS_PER_TOKEN
    #: Prepended to the serialized system prompts.
    preamble: str = DEFAULT_PREAMBLE
    use_mock: bool = False
    #: Max lines buffered for a stream consumer; 0 means unbounded.
    stream_buffer: int = 0

    def __post_init__(self) -> None:
        """Auto-resolve environment values and validate configuration."""
        if self.default_model is None:
            object.__setattr__(
                self,
                "default_model",
                os.environ.get(MODEL_ENV_VAR) or DEFAULT_MODEL,
            )

        if self.max_input_tokens < 1:
            raise ConfigurationError(
                f"max_input_tokens must be ≥ 1, got {self.max_input_tokens}",
                hint="This is the estimated input budget checked before each call.",
            )
        if self.max_output_tokens < 1:
            raise ConfigurationError(
                f"max_output_tokens must be ≥ 1, got {self.max_output_tokens}",
                hint="Anthropic requires a positive max_tokens on every request.",
            )
        if self.chars_per_token < 1:
            raise ConfigurationError(
                f"chars_per_token must be ≥ 1, got {self.chars_per_token}",
            )
        if not 0.0 <= self.temperature <= 1.0:
            raise ConfigurationError(
                f"temperature must be between 0 and 1, got {self.temperature}",
            )
        if self.stream_buffer < 0:
            raise ConfigurationError(
                f"stream_buffer must be ≥ 0, got {self.stream_buffer}",
                hint="Use 0 for an unbounded stream buffer.",
            )

        if self.api_key is None and not self.use_mock:
            object.__setattr__(self, "api_key", os.environ.get(API_KEY_ENV_VAR))

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(default_model={self.default_model!r}, "
            f"api_key={'[REDACTED]' if self.api_key else None}, "
            f"max_input_tokens={self.max_input_tokens}, use_mock={self.use_mock})"
        )

    __repr__ = __str__
