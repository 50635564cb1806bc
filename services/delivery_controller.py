"""
Incremental Delivery Controller - Feeds a filtered card list to the view in batches.

This module handles:
- Priming the view with an initial window after every new result list
- Growing or shrinking batches with the consumer's scroll velocity
- Interleaving image prefetch and delivery in small sub-batches
- Discarding in-flight work that belongs to a superseded result list
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from loguru import logger

from services.resource_prefetcher import ResourcePrefetcher
from utils.card_record import CardRecord
from utils.service_config import (
    BASE_BATCH_SIZE,
    BATCH_SIZE_DECREMENT,
    BATCH_SIZE_INCREMENT,
    INITIAL_WINDOW_SIZE,
    MAX_BATCH_SIZE,
    MIN_BATCH_SIZE,
    PREFETCH_FAN_OUT,
    SIGNAL_COOLDOWN_SECONDS,
    SUB_BATCH_SIZE,
    VELOCITY_THRESHOLD,
)


class DeliveryState(str, Enum):
    IDLE = "idle"
    PRIMING = "priming"
    STREAMING = "streaming"


class ViewNotifier(Protocol):
    def on_reset(self, items: list[CardRecord]) -> None: ...

    def on_append(self, items: list[CardRecord]) -> None: ...


@dataclass(frozen=True)
class DeliveryConfig:
    """Tuning of the incremental delivery."""

    initial_window_size: int = INITIAL_WINDOW_SIZE
    base_batch_size: int = BASE_BATCH_SIZE
    min_batch_size: int = MIN_BATCH_SIZE
    max_batch_size: int = MAX_BATCH_SIZE
    batch_increment: int = BATCH_SIZE_INCREMENT
    batch_decrement: int = BATCH_SIZE_DECREMENT
    velocity_threshold: float = VELOCITY_THRESHOLD
    cooldown_seconds: float = SIGNAL_COOLDOWN_SECONDS
    sub_batch_size: int = SUB_BATCH_SIZE
    prefetch_fan_out: int = PREFETCH_FAN_OUT

    def __post_init__(self) -> None:
        if self.min_batch_size < 1:
            raise ValueError("min_batch_size must be at least 1")
        if self.min_batch_size > self.max_batch_size:
            raise ValueError("min_batch_size cannot exceed max_batch_size")
        for name in ("initial_window_size", "sub_batch_size", "prefetch_fan_out"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.batch_increment < 0 or self.batch_decrement < 0:
            raise ValueError("batch size steps cannot be negative")
        if self.cooldown_seconds < 0:
            raise ValueError("cooldown_seconds cannot be negative")
        object.__setattr__(self, "base_batch_size", self.clamp_batch_size(self.base_batch_size))

    def clamp_batch_size(self, size: int) -> int:
        return max(self.min_batch_size, min(size, self.max_batch_size))

    def next_batch_size(self, current: int, velocity: float) -> int:
        """Grow by the increment on fast scrolling, otherwise shrink by the decrement."""
        if velocity > self.velocity_threshold:
            return self.clamp_batch_size(current + self.batch_increment)
        return self.clamp_batch_size(current - self.batch_decrement)


@dataclass
class ResultWindow:
    """One filtered list and how far into it the view has been fed."""

    generation: int
    source: tuple[CardRecord, ...]
    cursor: int = 0

    @property
    def total(self) -> int:
        return len(self.source)

    @property
    def pending(self) -> tuple[CardRecord, ...]:
        return self.source[self.cursor :]

    @property
    def pending_count(self) -> int:
        return len(self.source) - self.cursor

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.source)


@dataclass(frozen=True)
class DeliveryStats:
    generation: int
    state: DeliveryState
    batch_size: int
    total: int
    delivered: int
    pending: int
    busy: bool
    signals_processed: int
    signals_dropped: int
    batches_delivered: int


class IncrementalDeliveryController:
    """Delivers an ordered card list to a view incrementally.

    Driven by ``reset`` whenever a new result list is available and by
    ``on_consumption_signal`` whenever the consumer scrolls. Both run on a
    single event loop; the window, cursor and generation are only mutated by
    this class.
    """

    def __init__(
        self,
        prefetcher: ResourcePrefetcher,
        view: ViewNotifier,
        config: DeliveryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._prefetcher = prefetcher
        self._view = view
        self._config = config or DeliveryConfig()
        self._clock = clock

        self._generation = 0
        self._window: ResultWindow | None = None
        self._state = DeliveryState.IDLE
        self._batch_size = self._config.base_batch_size
        self._busy_generation: int | None = None
        self._last_signal_time: float | None = None
        self._last_position = 0.0

        self._signals_processed = 0
        self._signals_dropped = 0
        self._batches_delivered = 0

    # ============= Diagnostics =============

    @property
    def config(self) -> DeliveryConfig:
        return self._config

    @property
    def state(self) -> DeliveryState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def total_count(self) -> int:
        return self._window.total if self._window else 0

    @property
    def delivered_count(self) -> int:
        return self._window.cursor if self._window else 0

    @property
    def pending_count(self) -> int:
        return self._window.pending_count if self._window else 0

    @property
    def is_busy(self) -> bool:
        return self._busy_generation is not None and self._busy_generation == self._generation

    def stats(self) -> DeliveryStats:
        return DeliveryStats(
            generation=self._generation,
            state=self._state,
            batch_size=self._batch_size,
            total=self.total_count,
            delivered=self.delivered_count,
            pending=self.pending_count,
            busy=self.is_busy,
            signals_processed=self._signals_processed,
            signals_dropped=self._signals_dropped,
            batches_delivered=self._batches_delivered,
        )

    # ============= Reset =============

    async def reset(self, items: Iterable[CardRecord]) -> None:
        """
        Replace the list being delivered and prime the view with its first window.

        Valid in any state. Work still running for the previous list stops at
        its next generation check and never reaches the view.
        """
        self._generation += 1
        generation = self._generation
        window = ResultWindow(generation=generation, source=tuple(items))
        self._window = window
        self._state = DeliveryState.PRIMING
        self._batch_size = self._config.base_batch_size
        self._last_signal_time = None
        self._last_position = 0.0
        self._busy_generation = generation

        initial = list(window.source[: self._config.initial_window_size])
        logger.debug(
            f"Reset generation {generation}: {window.total} cards, initial window {len(initial)}"
        )
        try:
            completed = await self._prefetch_in_groups(initial, generation)
            if not completed or not self._is_current(generation):
                logger.debug(f"Discarding initial window of stale generation {generation}")
                return
            self._view.on_reset(initial)
            window.cursor = len(initial)
            self._state = DeliveryState.IDLE if window.exhausted else DeliveryState.STREAMING
        finally:
            self._release(generation)

    async def _prefetch_in_groups(self, cards: Sequence[CardRecord], generation: int) -> bool:
        fan_out = self._config.prefetch_fan_out
        for start in range(0, len(cards), fan_out):
            if not self._is_current(generation):
                return False
            await self._prefetcher.prefetch(cards[start : start + fan_out], fan_out)
            await asyncio.sleep(0)
        return True

    # ============= Streaming =============

    async def on_consumption_signal(
        self,
        position: float,
        timestamp: float | None = None,
        generation: int | None = None,
    ) -> bool:
        """
        React to the consumer's scroll position.

        Args:
            position: Current scroll position of the consumer
            timestamp: Signal time in seconds (defaults to the controller clock)
            generation: Generation the signal was issued against, if known

        Returns:
            True if the signal started a batch, False if it was dropped
        """
        window = self._window
        if window is None or (generation is not None and generation != self._generation):
            return self._drop("stale generation")
        if window.exhausted:
            return self._drop("queue empty")
        if self.is_busy:
            return self._drop("batch in flight")

        now = self._clock() if timestamp is None else timestamp
        if (
            self._last_signal_time is not None
            and now - self._last_signal_time < self._config.cooldown_seconds
        ):
            return self._drop("cooldown")

        velocity = abs(position - self._last_position)
        self._last_signal_time = now
        self._last_position = position
        self._batch_size = self._config.next_batch_size(self._batch_size, velocity)

        current = self._generation
        batch = list(window.pending[: self._batch_size])
        self._busy_generation = current
        self._state = DeliveryState.STREAMING
        self._signals_processed += 1
        logger.debug(
            f"Generation {current}: velocity {velocity:.3f}, delivering {len(batch)} "
            f"of {window.pending_count} pending"
        )

        try:
            await self._deliver_batch(window, batch, current)
        finally:
            self._release(current)

        if self._is_current(current) and window.exhausted:
            self._state = DeliveryState.IDLE
            logger.debug(f"Generation {current} fully delivered ({window.total} cards)")
        return True

    async def _deliver_batch(
        self, window: ResultWindow, batch: list[CardRecord], generation: int
    ) -> None:
        step = self._config.sub_batch_size
        for start in range(0, len(batch), step):
            sub_batch = batch[start : start + step]
            await self._prefetcher.prefetch(sub_batch, self._config.prefetch_fan_out)
            if not self._is_current(generation):
                logger.debug(f"Aborting batch of stale generation {generation}")
                return
            self._view.on_append(sub_batch)
            window.cursor += len(sub_batch)
            self._batches_delivered += 1
            if start + step < len(batch):
                await asyncio.sleep(0)

    # ============= Helpers =============

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _release(self, generation: int) -> None:
        if self._busy_generation == generation:
            self._busy_generation = None

    def _drop(self, reason: str) -> bool:
        self._signals_dropped += 1
        logger.trace(f"Consumption signal dropped: {reason}")
        return False


__all__ = [
    "DeliveryConfig",
    "DeliveryState",
    "DeliveryStats",
    "IncrementalDeliveryController",
    "ResultWindow",
    "ViewNotifier",
]
