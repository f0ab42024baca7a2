"""Transcode provider stream events into newline-delimited JSON.

A ``StreamTranscoder`` is the single producer for one stream: it drains the
provider's event iterator, writes one ``{"text": ...}`` line per text delta
into an ``asyncio.Queue`` and accumulates usage as it goes. The usage future
is resolved only after the output has been closed, so a consumer that sees
the end of the output can await usage without racing the producer.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass
import json
import logging
from typing import TYPE_CHECKING, Any

from chat_adapter.errors import StreamClosedError
from chat_adapter.types import UsageCounts

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)

NDJSON_CONTENT_TYPE = "application/x-ndjson"


@dataclass(frozen=True)
class _EndOfStream:
    """Queue marker: no more lines. Carries the producer's error, if any."""

    error: BaseException | None = None


def field_of(obj: Any, name: str) -> Any:
    """Read ``name`` from a dict or an SDK object, ``None`` when absent."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_usage(event: Any) -> Any:
    """Usage reported on the event itself, else on its nested message."""
    usage = field_of(event, "usage")
    if usage is None:
        usage = field_of(field_of(event, "message"), "usage")
    return usage


def extract_text_delta(event: Any) -> str | None:
    """Return the delta text for text-delta events, else ``None``.

    A text delta without string text is skipped like any other event.
    """
    if field_of(event, "type") != "content_block_delta":
        return None
    delta = field_of(event, "delta")
    if field_of(delta, "type") != "text_delta":
        return None
    text = field_of(delta, "text")
    return text if isinstance(text, str) else None


def consume_future_exception(fut: asyncio.Future[Any]) -> None:
    """Avoid 'Future exception was never retrieved' when nobody awaits usage."""
    try:
        _ = fut.exception()
    except asyncio.CancelledError:
        return


def encode_line(text: str) -> str:
    """Encode one stream event as a self-contained JSON line."""
    return json.dumps({"text": text}, separators=(",", ":"), ensure_ascii=False) + "\n"


class StreamHandle:
    """What a streaming ``complete()`` returns immediately.

    Iterate it (or ``lines()``) for ndjson lines; await ``usage`` for the
    final counts. The two are independent: usage stays pending until the
    provider stream has been fully drained.
    """

    content_type = NDJSON_CONTENT_TYPE
    chunked = True
    stream = True

    def __init__(
        self,
        queue: asyncio.Queue[str | _EndOfStream],
        usage: asyncio.Future[UsageCounts],
    ) -> None:
        self._queue = queue
        self.usage = usage

    def __aiter__(self) -> AsyncIterator[str]:
        return self.lines()

    async def lines(self) -> AsyncIterator[str]:
        """Yield encoded lines until the producer closes the stream."""
        while True:
            item = await self._queue.get()
            if isinstance(item, _EndOfStream):
                # Leave the marker for any other consumer.
                self._queue.put_nowait(item)
                if item.error is not None:
                    raise item.error
                return
            yield item

    async def aiter_text(self) -> AsyncIterator[str]:
        """Yield the decoded delta text of each line."""
        async for line in self.lines():
            yield json.loads(line)["text"]


class StreamTranscoder:
    """Single producer for one stream's output lines and usage future.

    Must be constructed while an event loop is running.
    """

    def __init__(self, *, max_buffered: int = 0) -> None:
        loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[str | _EndOfStream] = asyncio.Queue(
            maxsize=max_buffered
        )
        self._closed = False
        self.counts = UsageCounts()
        self.usage: asyncio.Future[UsageCounts] = loop.create_future()
        self.usage.add_done_callback(consume_future_exception)
        self.handle = StreamHandle(self._queue, self.usage)

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, line: str) -> None:
        if self._closed:
            raise StreamClosedError("Cannot write to a closed stream")
        await self._queue.put(line)

    async def _close(self, error: BaseException | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_EndOfStream(error))

    async def run(self, events: AsyncIterable[Any]) -> UsageCounts | None:
        """Drain ``events``, then close the output and resolve usage.

        Provider errors are not handled here: they are delivered unchanged to
        the output consumer and to the usage future.
        """
        try:
            async for event in events:
                usage = extract_usage(event)
                if usage is not None:
                    self.counts.add(
                        input_tokens=field_of(usage, "input_tokens"),
                        output_tokens=field_of(usage, "output_tokens"),
                    )

                text = extract_text_delta(event)
                if text is None:
                    continue
                await self.write(encode_line(text))
        except asyncio.CancelledError:
            self._closed = True
            # A full bounded buffer means the consumer is gone.
            with suppress(asyncio.QueueFull):
                self._queue.put_nowait(_EndOfStream(asyncio.CancelledError()))
            self.usage.cancel()
            raise
        except Exception as exc:
            logger.debug("Provider stream failed: %s", exc)
            await self._close(exc)
            if not self.usage.done():
                self.usage.set_exception(exc)
            return None

        await self._close()
        if not self.usage.done():
            self.usage.set_result(self.counts)
        logger.debug(
            "Stream finished: input_tokens=%d output_tokens=%d",
            self.counts.input_tokens,
            self.counts.output_tokens,
        )
        return self.counts
