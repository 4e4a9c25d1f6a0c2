import asyncio
from collections.abc import Awaitable, Callable, Hashable
from functools import partial
from typing import Any

from loguru import logger

from asyncmemo.cache import Cache, CacheEntry
from asyncmemo.options import MemoizeOptions


def _failed(outcome: asyncio.Future) -> bool:
    # retrieving the exception keeps asyncio from reporting it as unhandled
    return outcome.cancelled() or outcome.exception() is not None


class Lifecycle:
    """
    Drives cache entries through their states:

    pending -> fresh | failed, fresh -> prefetch due -> refreshing -> fresh,
    and any of them -> evicted.

    Every callback carries the entry it was armed for and does nothing once
    the cache no longer holds that exact entry.
    """

    def __init__(
        self,
        cache: Cache,
        producer: Callable[..., Awaitable[Any]],
        options: MemoizeOptions,
    ):
        self.cache = cache
        self.producer = producer
        self.options = options
        # background refreshes nobody awaits, held until they settle
        self.refreshes: set[asyncio.Task] = set()

    async def _produce(self, args: tuple, kwargs: dict[str, Any]) -> Any:
        return await self.producer(*args, **kwargs)

    def invoke(self, args: tuple, kwargs: dict[str, Any]) -> asyncio.Task:
        return asyncio.get_running_loop().create_task(self._produce(args, kwargs))

    def create(self, key: Hashable, args: tuple, kwargs: dict[str, Any]) -> CacheEntry:
        outcome = self.invoke(args, kwargs)
        entry = CacheEntry(outcome=outcome)
        # arguments are only needed to re-invoke the producer on prefetch
        if self.options.max_age:
            entry.args, entry.kwargs = args, kwargs
        self.cache.set(key, entry)
        outcome.add_done_callback(partial(self._settled, key, entry))
        logger.debug(f"Cache miss for {key!r}, producer invoked")
        return entry

    def _settled(self, key: Hashable, entry: CacheEntry, outcome: asyncio.Future):
        failed = _failed(outcome)
        if not self.cache.holds(key, entry):
            return
        if not failed:
            self._arm_fresh(key, entry)
        elif self.options.max_error_age:
            loop = asyncio.get_running_loop()
            entry.expiry_timer = loop.call_later(
                self.options.max_error_age, self._expire, key, entry
            )
        else:
            self.cache.delete(key)
            logger.debug(f"Evicted failed entry for {key!r}")

    def _arm_fresh(self, key: Hashable, entry: CacheEntry):
        if not self.options.max_age:
            return
        loop = asyncio.get_running_loop()
        entry.expiry_timer = loop.call_later(
            self.options.max_age, self._expire, key, entry
        )
        entry.prefetch_timer = loop.call_later(
            self.options.prefetch_after, self._request_prefetch, key, entry
        )

    def _expire(self, key: Hashable, entry: CacheEntry):
        if self.cache.holds(key, entry):
            self.cache.delete(key)
            logger.debug(f"Expired entry for {key!r}")

    def _request_prefetch(self, key: Hashable, entry: CacheEntry):
        if self.cache.holds(key, entry):
            entry.prefetch_timer = None
            entry.prefetch_requested = True

    def hit(self, key: Hashable, entry: CacheEntry):
        if entry.prefetch_requested:
            self.refresh(key, entry)

    def refresh(self, key: Hashable, entry: CacheEntry):
        entry.prefetch_requested = False
        outcome = self.invoke(entry.args or (), entry.kwargs)
        self.refreshes.add(outcome)
        outcome.add_done_callback(partial(self._refreshed, key, entry))
        outcome.add_done_callback(self.refreshes.discard)
        logger.debug(f"Background refresh dispatched for {key!r}")

    def _refreshed(self, key: Hashable, entry: CacheEntry, outcome: asyncio.Future):
        # a failed refresh leaves the stale entry to its original expiry
        if _failed(outcome) or not self.cache.holds(key, entry):
            return
        entry.cancel_timers()
        entry.outcome = outcome
        self._arm_fresh(key, entry)
        logger.debug(f"Refreshed entry installed for {key!r}")
