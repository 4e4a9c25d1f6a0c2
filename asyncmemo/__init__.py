from loguru import logger

from asyncmemo.errors import ConfigurationError
from asyncmemo.memoize import Memoize, MemoizedFunction, memoize
from asyncmemo.options import PREFETCH_RATIO, MemoizeOptions
from asyncmemo.resolver import EMPTY_KEY, SEPARATOR, KeywordArguments, create_resolver

logger.disable("asyncmemo")

__all__ = [
    "ConfigurationError",
    "EMPTY_KEY",
    "KeywordArguments",
    "Memoize",
    "MemoizeOptions",
    "MemoizedFunction",
    "PREFETCH_RATIO",
    "SEPARATOR",
    "create_resolver",
    "memoize",
]
