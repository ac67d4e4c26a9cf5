"""Catalog provider interface with an in-memory implementation."""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from schemas.catalog import Item


class CatalogFetchError(Exception):
    """Raised when the catalog cannot be fetched."""


class CatalogProvider(ABC):
    """Read-only access to the full movie catalog.

    Implementations must tolerate concurrent calls to ``fetch_all``.
    """

    @abstractmethod
    def fetch_all(self) -> list[Item]:
        """
        Fetch the full catalog.

        Returns:
            Every catalog item

        Raises:
            CatalogFetchError: If the underlying source cannot be read
        """
        pass

    async def fetch_all_async(self) -> list[Item]:
        """
        Run ``fetch_all`` on a dedicated worker thread.

        The thread is not joined when the awaiting task is cancelled or the
        event loop shuts down, so a stalled source never holds up the caller.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog-fetch")
        try:
            return await asyncio.get_running_loop().run_in_executor(executor, self.fetch_all)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


SEED_MOVIES = (
    Item(
        id=1,
        title="The Shawshank Redemption",
        description=(
            "Two imprisoned men bond over a number of years, finding solace "
            "and eventual redemption through acts of common decency."
        ),
        category="Drama",
        release_year=1994,
        rating=9.3,
        minimum_age=13,
        director="Frank Darabont",
        cast=["Tim Robbins", "Morgan Freeman"],
        duration_minutes=142,
    ),
    Item(
        id=2,
        title="The Dark Knight",
        description=(
            "When the menace known as the Joker wreaks havoc on Gotham, Batman "
            "must accept one of the greatest tests of his ability to fight injustice."
        ),
        category="Action",
        release_year=2008,
        rating=9.0,
        minimum_age=13,
        director="Christopher Nolan",
        cast=["Christian Bale", "Heath Ledger"],
        duration_minutes=152,
    ),
    Item(
        id=3,
        title="Toy Story",
        description=(
            "A cowboy doll is profoundly threatened when a new spaceman figure "
            "supplants him as top toy in a boy's room."
        ),
        category="Animation",
        release_year=1995,
        rating=8.3,
        minimum_age=0,
        director="John Lasseter",
        cast=["Tom Hanks", "Tim Allen"],
        duration_minutes=81,
    ),
)


class InMemoryCatalogProvider(CatalogProvider):
    """Catalog held in memory, seeded with a few well-known movies."""

    def __init__(self, items: Optional[Sequence[Item]] = None):
        self._items = tuple(items) if items is not None else SEED_MOVIES

    def fetch_all(self) -> list[Item]:
        return list(self._items)
