import asyncio
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CacheEntry:
    outcome: asyncio.Future
    args: tuple | None = None
    kwargs: dict[str, Any] = field(default_factory=dict)
    expiry_timer: asyncio.TimerHandle | None = None
    prefetch_timer: asyncio.TimerHandle | None = None
    prefetch_requested: bool = False

    def cancel_timers(self):
        if self.expiry_timer is not None:
            self.expiry_timer.cancel()
            self.expiry_timer = None
        if self.prefetch_timer is not None:
            self.prefetch_timer.cancel()
            self.prefetch_timer = None


class Cache:
    def __init__(self):
        self.store: dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable) -> CacheEntry | None:
        return self.store.get(key)

    def holds(self, key: Hashable, entry: CacheEntry) -> bool:
        return self.store.get(key) is entry

    def set(self, key: Hashable, entry: CacheEntry):
        if (previous := self.store.get(key)) is not None:
            previous.cancel_timers()
        self.store[key] = entry

    def delete(self, key: Hashable) -> bool:
        if (entry := self.store.get(key)) is None:
            return False
        entry.cancel_timers()
        del self.store[key]
        return True

    def clear(self) -> int:
        keys = list(self.store)
        for key in keys:
            self.delete(key)
        return len(keys)

