"""Provider implementations."""

from .anthropic import AnthropicProvider
from .base import Provider, ProviderRequest
from .mock import MockProvider

__all__ = [
    "AnthropicProvider",
    "MockProvider",
    "Provider",
    "ProviderRequest",
]
