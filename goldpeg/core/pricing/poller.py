from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, List, Optional, Set

from .aggregator import PriceFeedAggregator
from .models import PriceQuote
from ..contracts.gateway import CallerContext
from ..errors import PriceUnavailableError, RpcFailure
from ...config import settings


ContextProvider = Callable[[], Optional[CallerContext]]
QuoteListener = Callable[[PriceQuote], None]


class ResponseOrdering(str, Enum):
    """Which of several overlapping fetches gets to publish its quote."""
    LAST_COMPLETED = "last_completed"  # whichever finishes last wins
    LAST_ISSUED = "last_issued"        # late answers to older requests are dropped


class PricePoller:
    """Re-fetches the gold price on a fixed interval.

    Each tick starts an independent fetch; overlapping fetches are neither
    cancelled nor deduplicated. Transient failures leave ``latest`` unchanged
    until a later tick succeeds. ``reset()`` drops the current quote and any
    answer still in flight from before the reset.
    """

    def __init__(
        self,
        aggregator: PriceFeedAggregator,
        context_provider: ContextProvider,
        *,
        interval_seconds: Optional[float] = None,
        ordering: ResponseOrdering = ResponseOrdering.LAST_COMPLETED,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.aggregator = aggregator
        self._context_provider = context_provider
        self.interval_seconds = interval_seconds or settings.price_poll_interval_seconds
        self.ordering = ordering
        self.logger = logger or logging.getLogger(__name__)

        self.latest: Optional[PriceQuote] = None
        self.last_error: Optional[Exception] = None
        self._listeners: List[QuoteListener] = []
        self._issued = 0
        self._applied = 0
        self._generation = 0
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def on_quote(self, listener: QuoteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def poll_once(self) -> Optional[PriceQuote]:
        """Fetch once and publish the quote if it is still wanted.

        Returns the published quote, or ``None`` when there was nothing to poll
        with, the fetch failed transiently, or the answer was discarded.
        """
        context = self._context_provider()
        if context is None:
            self.logger.debug("No provider available; skipping price poll")
            return None

        self._issued += 1
        sequence = self._issued
        generation = self._generation
        try:
            quote = await self.aggregator.fetch_price(context)
        except (PriceUnavailableError, RpcFailure) as exc:
            self.last_error = exc
            self.logger.warning("Price poll %d failed: %s", sequence, exc)
            return None

        if generation != self._generation:
            self.logger.debug("Discarding price poll %d from before reset", sequence)
            return None
        if self.ordering == ResponseOrdering.LAST_ISSUED and sequence < self._applied:
            self.logger.debug("Discarding price poll %d; %d already applied", sequence, self._applied)
            return None

        self._applied = sequence
        self.latest = quote
        self.last_error = None
        for listener in list(self._listeners):
            try:
                listener(quote)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Quote listener failed: %s", exc, exc_info=True)
        return quote

    def reset(self, reason: str = "") -> None:
        self._generation += 1
        self.latest = None
        self.last_error = None
        if reason:
            self.logger.info("Price poller reset: %s", reason)

    # ---------------------------
    # Timer
    # ---------------------------
    async def start(self) -> None:
        if self.running:
            return
        self.logger.info("Price poller starting; interval=%ss", self.interval_seconds)
        self._loop_task = asyncio.create_task(self._run_loop(), name="price-poller")

    async def stop(self) -> None:
        if self._loop_task:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

        for task in list(self._inflight):
            task.cancel()
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)
        self._inflight.clear()

    async def _run_loop(self) -> None:
        while True:
            self._spawn_poll()
            await asyncio.sleep(self.interval_seconds)

    def _spawn_poll(self) -> None:
        task = asyncio.create_task(self.poll_once())
        self._inflight.add(task)
        task.add_done_callback(self._on_poll_done)

    def _on_poll_done(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.error("Price poll failed: %s", exc, exc_info=exc)

    async def __aenter__(self) -> "PricePoller":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
