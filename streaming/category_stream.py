"""Paced, cancellable streaming of a catalog category."""

import asyncio
import logging
from typing import Optional

from retrieval.catalog_provider import CatalogProvider
from schemas.catalog import Item
from schemas.stream import StreamState

logger = logging.getLogger(__name__)

_CLOSED = object()


def format_sse_event(item: Item) -> str:
    """Render one item as a server-sent event frame."""
    return f"data: {item.model_dump_json()}\n\n"


class CategoryStream:
    """
    One category stream: a single producer task writing into an unbounded
    queue that the caller drains with ``async for``.

    The producer pauses between items, so the emission rate is bounded by
    time rather than queue depth. The close marker is always enqueued,
    whichever way the producer exits, and a closed stream keeps raising
    ``StopAsyncIteration``.

    The producer starts on the first read. A consumer that stops reading
    early without setting ``cancel`` must call ``aclose()``; using the
    stream as an async context manager does that on exit::

        async with pump.stream("Action") as stream:
            async for movie in stream:
                ...
    """

    def __init__(
        self,
        catalog_provider: CatalogProvider,
        category: str,
        cancel: asyncio.Event,
        delay_seconds: float
    ):
        self.catalog_provider = catalog_provider
        self.category = category
        self.cancel = cancel
        self.delay_seconds = delay_seconds

        self.state = StreamState.RUNNING
        self.exit_state: Optional[StreamState] = None
        self.error: Optional[Exception] = None
        self.emitted = 0

        self._queue: asyncio.Queue = asyncio.Queue()
        self._producer: Optional[asyncio.Task] = None

    def __aiter__(self) -> "CategoryStream":
        return self

    async def __aenter__(self) -> "CategoryStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def __anext__(self) -> Item:
        if self.state == StreamState.CLOSED and self._queue.empty():
            await self._wait_producer()
            raise StopAsyncIteration

        if self._producer is None:
            self._producer = asyncio.create_task(self._produce())

        if not self.cancel.is_set():
            item = await self._queue.get()
            if item is not _CLOSED and not self.cancel.is_set():
                return item

        # Closed or cancelled: let the producer finish its cleanup
        await self._wait_producer()
        raise StopAsyncIteration

    async def aclose(self) -> None:
        """Stop the producer and wait for the stream to close."""
        if self._producer is None:
            self.exit_state = StreamState.CANCELLED
            self.state = StreamState.CLOSED
            return
        if not self._producer.done():
            self._producer.cancel()
        await self._wait_producer()

    async def _wait_producer(self) -> None:
        if self._producer is None:
            return
        try:
            await self._producer
        except asyncio.CancelledError:
            if not self._producer.cancelled():
                raise

    async def _produce(self) -> None:
        try:
            items = await self.catalog_provider.fetch_all_async()
            category = self.category.lower()
            matches = sorted(
                (item for item in items if item.category.lower() == category),
                key=lambda item: item.rating,
                reverse=True,
            )
            logger.info(f"Streaming {len(matches)} movies for category '{self.category}'")

            for item in matches:
                if self.cancel.is_set():
                    self.exit_state = StreamState.CANCELLED
                    break
                self._queue.put_nowait(item)
                self.emitted += 1
                if await self._pause():
                    self.exit_state = StreamState.CANCELLED
                    break
            else:
                self.exit_state = StreamState.EXHAUSTED
        except asyncio.CancelledError:
            self.exit_state = StreamState.CANCELLED
            raise
        except Exception as e:
            logger.error(f"Category stream '{self.category}' failed: {e}")
            self.error = e
            self.exit_state = StreamState.FAILED
        finally:
            self._queue.put_nowait(_CLOSED)
            self.state = StreamState.CLOSED
            logger.debug(
                f"Category stream '{self.category}' closed after {self.emitted} items "
                f"({self.exit_state.value if self.exit_state else 'unknown'})"
            )

    async def _pause(self) -> bool:
        """Wait out the pacing interval; returns True if cancelled meanwhile."""
        try:
            await asyncio.wait_for(self.cancel.wait(), timeout=self.delay_seconds)
        except asyncio.TimeoutError:
            return False
        return True


class CategoryStreamPump:
    """Opens paced category streams over a catalog provider."""

    def __init__(self, catalog_provider: CatalogProvider, delay_seconds: float = 0.1):
        """
        Initialize stream pump.

        Args:
            catalog_provider: Source of catalog items
            delay_seconds: Pause after each emitted item
        """
        self.catalog_provider = catalog_provider
        self.delay_seconds = delay_seconds

    def stream(self, category: str, cancel: Optional[asyncio.Event] = None) -> CategoryStream:
        """
        Stream the movies of a category, best rated first.

        Matching is case-insensitive and exact. Iterate the result with
        ``async for`` inside ``async with``; set ``cancel`` to stop early.
        """
        return CategoryStream(
            catalog_provider=self.catalog_provider,
            category=category,
            cancel=cancel if cancel is not None else asyncio.Event(),
            delay_seconds=self.delay_seconds,
        )
