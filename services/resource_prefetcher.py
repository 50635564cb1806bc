"""
Resource Prefetcher - Idempotent async front for card image loading.

This module handles:
- One load per resource key, shared by every concurrent caller
- Placeholder substitution when a resource cannot be loaded
- Bounded fan-out when prefetching a group of cards
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from utils.card_record import CardRecord

MISSING_RESOURCE = object()

ResourceLoader = Callable[[str], Any]


class ResourcePrefetcher:
    """Caches loaded resources by key and deduplicates in-flight loads."""

    def __init__(self, loader: ResourceLoader, placeholder: Any = MISSING_RESOURCE) -> None:
        """
        Args:
            loader: Loads one resource by key. Coroutine functions are awaited,
                plain callables run in a worker thread.
            placeholder: Returned for resources that fail to load
        """
        self._loader = loader
        self._loader_is_async = inspect.iscoroutinefunction(loader) or inspect.iscoroutinefunction(
            getattr(loader, "__call__", None)
        )
        self.placeholder = placeholder
        self._cache: dict[str, Any] = {}
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self.load_count = 0
        self.failure_count = 0

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def is_cached(self, key: str) -> bool:
        return key in self._cache

    def clear(self) -> None:
        """Forget cached handles. Loads already in flight still complete."""
        self._cache.clear()

    async def fetch(self, key: str) -> Any:
        """Return the handle for ``key``, loading it at most once at a time."""
        if not key:
            return self.placeholder
        if key in self._cache:
            return self._cache[key]

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key))
            self._in_flight[key] = task
            task.add_done_callback(lambda _t, k=key: self._in_flight.pop(k, None))
        # shield so one cancelled caller does not cancel the load for the others
        return await asyncio.shield(task)

    async def _load(self, key: str) -> Any:
        self.load_count += 1
        try:
            if self._loader_is_async:
                handle = await self._loader(key)
            else:
                handle = await asyncio.to_thread(self._loader, key)
        except Exception as exc:
            self.failure_count += 1
            logger.warning(f"Failed to load resource {key}: {exc}")
            return self.placeholder
        self._cache[key] = handle
        return handle

    async def prefetch(self, cards: Sequence[CardRecord], fan_out: int) -> None:
        """
        Load handles for cards that have none yet or still hold the placeholder.

        At most ``fan_out`` loads run at once; failures leave the placeholder
        on the card so a later prefetch retries them.
        """
        pending = [
            card
            for card in cards
            if card.resource_handle is None or card.resource_handle is self.placeholder
        ]
        if not pending:
            return
        semaphore = asyncio.Semaphore(max(1, fan_out))

        async def _fill(card: CardRecord) -> None:
            async with semaphore:
                card.resource_handle = await self.fetch(card.resource_key)

        await asyncio.gather(*(_fill(card) for card in pending))


__all__ = ["MISSING_RESOURCE", "ResourceLoader", "ResourcePrefetcher"]
