"""Simulated live price feed."""

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Optional

from tradingdesk.cache import CacheStore
from tradingdesk.domain.views import Quote
from tradingdesk.providers.synthetic_provider import SyntheticDataGenerator

logger = logging.getLogger(__name__)

PriceEvent = dict[str, Any]
Subscriber = Callable[[PriceEvent], Any]


class PriceBroadcaster:
    """
    Periodically regenerates synthetic quotes for a fixed symbol set,
    publishes them to subscribers and writes them to the quote cache.

    Subscribers are plain or async callables taking the event dict. Delivery
    is fire-and-forget: a slow or failing subscriber never holds up a tick.
    The broadcaster never talks to the upstream provider.
    """

    def __init__(
        self,
        cache: CacheStore,
        synthetic: SyntheticDataGenerator,
        symbols: list[str],
        interval: float = 5.0,
        cache_ttl: int = 60,
    ):
        self._cache = cache
        self._synthetic = synthetic
        self._symbols = [s.upper() for s in symbols]
        self._interval = interval
        self._cache_ttl = cache_ttl
        self._subscribers: list[Subscriber] = []
        self._task: Optional[asyncio.Task] = None
        self._deliveries: set[asyncio.Task] = set()

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def tick(self) -> list[Quote]:
        """Run one simulation round over all symbols."""
        published: list[Quote] = []
        for symbol in self._symbols:
            try:
                quote = self._synthetic.quote(symbol)
                event = quote.to_dict()
                self._publish(event)
                await self._cache.set(f"price:{symbol}", json.dumps(event), self._cache_ttl)
                published.append(quote)
            except Exception:
                logger.exception("Price simulation failed for %s", symbol)
        return published

    def start(self) -> None:
        """Start the periodic loop; calling it again while running is a no-op."""
        if self.is_running:
            return
        logger.info("Starting price simulation for: %s", ", ".join(self._symbols))
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel the loop and any pending async deliveries, then wait for them."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Price simulation stopped")

        deliveries = list(self._deliveries)
        for delivery in deliveries:
            delivery.cancel()
        if deliveries:
            await asyncio.gather(*deliveries, return_exceptions=True)
        self._deliveries.clear()

    async def _run(self) -> None:
        while True:
            await self.tick()
            await asyncio.sleep(self._interval)

    def _publish(self, event: PriceEvent) -> None:
        loop = asyncio.get_running_loop()
        for callback in list(self._subscribers):
            if inspect.iscoroutinefunction(callback):
                self._track(loop.create_task(self._deliver_async(callback(dict(event)), event)))
            else:
                loop.call_soon(self._deliver_sync, callback, dict(event))

    def _track(self, task: asyncio.Task) -> None:
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    @staticmethod
    async def _deliver_async(pending: Awaitable[Any], event: PriceEvent) -> None:
        try:
            await pending
        except Exception:
            logger.exception("Price subscriber failed for %s", event.get("symbol"))

    def _deliver_sync(self, callback: Subscriber, event: PriceEvent) -> None:
        try:
            result = callback(event)
        except Exception:
            logger.exception("Price subscriber failed for %s", event.get("symbol"))
            return
        # Lambdas and partials can hand back a coroutine
        if inspect.isawaitable(result):
            self._track(asyncio.ensure_future(self._deliver_async(result, event)))
