"""Tests for paced, cancellable category streaming."""

import asyncio
import json
import time

from retrieval.catalog_provider import CatalogProvider, InMemoryCatalogProvider
from schemas.catalog import Item
from schemas.stream import StreamState
from streaming.category_stream import CategoryStreamPump, format_sse_event


def _movie(id, category, rating):
    return Item(id=id, title=f"Movie {id}", category=category, release_year=2000, rating=rating)


class BrokenCatalog(CatalogProvider):
    def fetch_all(self):
        raise RuntimeError("catalog offline")


class TestCategoryStreamPump:
    """Test the category stream pump."""

    def setup_method(self):
        """Set up test fixtures."""
        self.catalog = InMemoryCatalogProvider([
            _movie(5, "action", 7.5),
            _movie(1, "Drama", 9.3),
            _movie(2, "Action", 9.0),
            _movie(3, "Action Comedy", 9.9),
        ])

    def test_case_insensitive_match_in_descending_rating(self):
        """Only exact category matches, best rated first, then the stream closes."""
        pump = CategoryStreamPump(self.catalog, delay_seconds=0.01)
        stream = pump.stream("ACTION")

        async def collect():
            return [m.id async for m in stream]

        assert asyncio.run(collect()) == [2, 5]
        assert stream.state == StreamState.CLOSED
        assert stream.exit_state == StreamState.EXHAUSTED
        assert stream.error is None

    def test_emissions_are_paced(self):
        pump = CategoryStreamPump(self.catalog, delay_seconds=0.1)

        async def collect():
            arrivals = []
            async for movie in pump.stream("Action"):
                arrivals.append((movie.id, time.monotonic()))
            return arrivals, time.monotonic()

        arrivals, closed_at = asyncio.run(collect())

        assert [movie_id for movie_id, _ in arrivals] == [2, 5]
        assert arrivals[1][1] - arrivals[0][1] >= 0.09
        assert closed_at - arrivals[1][1] >= 0.09

    def test_cancel_after_first_item(self):
        """Cancelling after the first item yields exactly one item and closes."""
        pump = CategoryStreamPump(self.catalog, delay_seconds=0.05)
        cancel = asyncio.Event()
        stream = pump.stream("action", cancel=cancel)

        async def consume():
            received = []
            async for movie in stream:
                received.append(movie.id)
                cancel.set()
            await asyncio.sleep(0.2)
            return received

        assert asyncio.run(consume()) == [2]
        assert stream.state == StreamState.CLOSED
        assert stream.exit_state == StreamState.CANCELLED
        assert stream.emitted == 1

    def test_cancel_interrupts_pacing_delay(self):
        pump = CategoryStreamPump(self.catalog, delay_seconds=5.0)
        cancel = asyncio.Event()

        async def consume():
            start = time.monotonic()
            async for _ in pump.stream("action", cancel=cancel):
                cancel.set()
            return time.monotonic() - start

        assert asyncio.run(consume()) < 1.0

    def test_cancel_before_start_yields_nothing(self):
        pump = CategoryStreamPump(self.catalog, delay_seconds=0.01)
        cancel = asyncio.Event()
        cancel.set()

        async def collect():
            return [m async for m in pump.stream("action", cancel=cancel)]

        assert asyncio.run(collect()) == []

    def test_unknown_category_closes_immediately(self):
        pump = CategoryStreamPump(self.catalog, delay_seconds=0.01)
        stream = pump.stream("Western")

        async def collect():
            return [m async for m in stream]

        assert asyncio.run(collect()) == []
        assert stream.exit_state == StreamState.EXHAUSTED

    def test_fetch_failure_still_closes(self):
        pump = CategoryStreamPump(BrokenCatalog(), delay_seconds=0.01)
        stream = pump.stream("action")

        async def collect():
            return [m async for m in stream]

        assert asyncio.run(asyncio.wait_for(collect(), timeout=2.0)) == []
        assert stream.state == StreamState.CLOSED
        assert stream.exit_state == StreamState.FAILED
        assert isinstance(stream.error, RuntimeError)

    def test_aclose_stops_producer(self):
        pump = CategoryStreamPump(self.catalog, delay_seconds=5.0)
        stream = pump.stream("action")

        async def run():
            first = await stream.__anext__()
            await stream.aclose()
            return first

        assert asyncio.run(run()).id == 2
        assert stream.state == StreamState.CLOSED
        assert stream.exit_state == StreamState.CANCELLED

    def test_reading_past_the_end_keeps_stopping(self):
        pump = CategoryStreamPump(self.catalog, delay_seconds=0.0)
        stream = pump.stream("Action")

        async def run():
            ids = [m.id async for m in stream]
            outcomes = []
            for _ in range(2):
                try:
                    await asyncio.wait_for(stream.__anext__(), timeout=1.0)
                    outcomes.append("item")
                except StopAsyncIteration:
                    outcomes.append("stop")
            return ids, outcomes

        ids, outcomes = asyncio.run(run())

        assert ids == [2, 5]
        assert outcomes == ["stop", "stop"]
        assert stream.exit_state == StreamState.EXHAUSTED

    def test_context_manager_closes_after_break(self):
        """Leaving the block stops the producer even without the cancel signal."""
        pump = CategoryStreamPump(self.catalog, delay_seconds=5.0)

        async def run():
            async with pump.stream("action") as stream:
                async for movie in stream:
                    first = movie
                    break
            return stream, first

        started = time.monotonic()
        stream, first = asyncio.run(run())

        assert time.monotonic() - started < 2.0
        assert first.id == 2
        assert stream.state == StreamState.CLOSED
        assert stream.exit_state == StreamState.CANCELLED
        assert stream._producer.done()


class TestFormatSseEvent:
    """Test server-sent event rendering."""

    def test_frame_carries_item_json(self):
        frame = format_sse_event(_movie(2, "Action", 9.0))

        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        payload = json.loads(frame[len("data: "):])
        assert payload["id"] == 2
        assert payload["category"] == "Action"
