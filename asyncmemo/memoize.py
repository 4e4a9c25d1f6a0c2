import asyncio
from collections.abc import Awaitable, Callable
from functools import update_wrapper
from typing import Any

from loguru import logger

from asyncmemo.cache import Cache
from asyncmemo.lifecycle import Lifecycle
from asyncmemo.options import Duration, MemoizeOptions
from asyncmemo.resolver import KeywordArguments, ResolveOption


class MemoizedFunction:
    """
    Call-compatible wrapper around an async producer.

    Calls return an awaitable future synchronously. Calls whose arguments
    resolve to the same key share one future until the entry expires or is
    cleared.
    """

    def __init__(self, producer: Callable[..., Awaitable[Any]], options: MemoizeOptions):
        update_wrapper(self, producer)
        self.options = options
        self.cache = Cache()
        self.lifecycle = Lifecycle(self.cache, producer, options)

    def __call__(self, *args, **kwargs) -> asyncio.Future:
        call_args = args + (KeywordArguments(sorted(kwargs.items())),) if kwargs else args
        key = self.options.resolve(call_args)
        if (entry := self.cache.get(key)) is not None:
            self.lifecycle.hit(key, entry)
        else:
            entry = self.lifecycle.create(key, args, kwargs)
        return entry.outcome

    def clear(self) -> int:
        cleared = self.cache.clear()
        name = getattr(self, "__name__", "producer")
        logger.debug(f"Cleared {cleared} entries from {name}")
        return cleared


class Memoize:
    def __init__(
        self,
        resolve: ResolveOption = None,
        max_age: Duration = 0,
        max_error_age: Duration = 0,
    ):
        self.options = MemoizeOptions.build(resolve, max_age, max_error_age)

    def __call__(self, func: Callable[..., Awaitable[Any]]) -> MemoizedFunction:
        return MemoizedFunction(func, self.options)


def memoize(
    producer: Callable[..., Awaitable[Any]],
    *,
    resolve: ResolveOption = None,
    max_age: Duration = 0,
    max_error_age: Duration = 0,
) -> MemoizedFunction:
    return Memoize(resolve, max_age, max_error_age)(producer)
