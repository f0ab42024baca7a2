"""chat-adapter: a generic chat-completion interface over Anthropic Messages.

Public API:
    - complete(): One-shot chat completion (optionally streamed)
    - CompletionDispatcher: Reusable dispatcher bound to one provider client
    - Config: Configuration dataclass
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from chat_adapter.config import Config
from chat_adapter.dispatcher import CompletionDispatcher
from chat_adapter.errors import (
    ChatAdapterError,
    ConfigurationError,
    StreamClosedError,
    TokenBudgetExceeded,
)
from chat_adapter.messages import normalize_messages
from chat_adapter.streaming import StreamHandle, StreamTranscoder
from chat_adapter.tokens import check_token_budget, estimate_tokens
from chat_adapter.tools import normalize_tools, to_claude_tools, to_openai_tools
from chat_adapter.types import CompletionResult, UsageCounts

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("chat-adapter")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("chat_adapter").addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)

_cleanup_tasks: set[asyncio.Task[None]] = set()


async def _close_quietly(dispatcher: CompletionDispatcher) -> None:
    try:
        await dispatcher.aclose()
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        # Cleanup should never mask the primary failure.
        logger.warning("Provider cleanup failed: %s", exc)


async def complete(
    messages: Iterable[Mapping[str, Any]],
    *,
    config: Config,
    stream: bool = False,
    model: str | None = None,
    tools: Iterable[Mapping[str, Any]] | None = None,
    tool_choice: str | Mapping[str, Any] | None = None,
) -> CompletionResult | StreamHandle:
    """Run a single chat completion with a short-lived dispatcher.

    For streamed calls the provider client is closed once the stream ends.

    Example:
        config = Config()
        result = await complete([{"role": "user", "content": "Hi"}], config=config)
        print(result["usage"])
    """
    dispatcher = CompletionDispatcher(config)
    try:
        result = await dispatcher.complete(
            messages, stream=stream, model=model, tools=tools, tool_choice=tool_choice
        )
    except BaseException:
        await _close_quietly(dispatcher)
        raise

    if isinstance(result, StreamHandle):

        def _schedule_close(_: asyncio.Future[UsageCounts]) -> None:
            task = asyncio.ensure_future(_close_quietly(dispatcher))
            _cleanup_tasks.add(task)
            task.add_done_callback(_cleanup_tasks.discard)

        result.usage.add_done_callback(_schedule_close)
    else:
        await _close_quietly(dispatcher)
    return result


__all__ = [
    "ChatAdapterError",
    "CompletionDispatcher",
    "CompletionResult",
    "Config",
    "ConfigurationError",
    "StreamClosedError",
    "StreamHandle",
    "StreamTranscoder",
    "TokenBudgetExceeded",
    "UsageCounts",
    "check_token_budget",
    "complete",
    "estimate_tokens",
    "normalize_messages",
    "normalize_tools",
    "to_claude_tools",
    "to_openai_tools",
]
