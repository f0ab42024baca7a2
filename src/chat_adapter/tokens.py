"""Heuristic input-size estimation and budget enforcement.

This is a character-count approximation, not a tokenizer: the serialized
request payload is divided by ``CHARS_PER_TOKEN``.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from chat_adapter.config import CHARS_PER_TOKEN, DEFAULT_MAX_INPUT_TOKENS
from chat_adapter.errors import TokenBudgetExceeded

logger = logging.getLogger(__name__)


def to_json(value: Any) -> str:
    """Compact JSON matching what is measured and sent on the wire."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def estimate_tokens(
    messages: list[Any],
    system_prompts: list[Any],
    *,
    chars_per_token: int = CHARS_PER_TOKEN,
) -> int:
    """Estimate input tokens from the adapted payload.

    Length is counted in UTF-16 code units, so characters outside the Basic
    Multilingual Plane (emoji etc.) count twice. Rounded up, so
    ``estimate > limit`` agrees with comparing the exact quotient against an
    integer limit.
    """
    text = to_json(messages) + to_json(system_prompts)
    return math.ceil(utf16_length(text) / chars_per_token)


def check_token_budget(
    messages: list[Any],
    system_prompts: list[Any],
    limit: int = DEFAULT_MAX_INPUT_TOKENS,
    *,
    chars_per_token: int = CHARS_PER_TOKEN,
) -> int:
    """Return the estimate, or raise TokenBudgetExceeded when it is over ``limit``."""
    estimate = estimate_tokens(
        messages, system_prompts, chars_per_token=chars_per_token
    )
    if estimate > limit:
        logger.debug("Rejecting request: ~%d tokens > limit %d", estimate, limit)
        raise TokenBudgetExceeded(input_tokens=estimate, max_tokens=limit)
    return estimate
