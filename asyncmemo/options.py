from dataclasses import dataclass
from datetime import timedelta
from numbers import Real

from asyncmemo.errors import ConfigurationError
from asyncmemo.resolver import ResolveOption, Resolver, create_resolver

# fraction of max_age after which a hit schedules a background refresh
PREFETCH_RATIO = 0.7

Duration = float | timedelta | None


def to_seconds(value: Duration, name: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, Real) and not isinstance(value, bool):
        seconds = float(value)
    else:
        raise ConfigurationError(f"{name} must be a number of seconds or a timedelta")
    if seconds < 0:
        raise ConfigurationError(f"{name} must not be negative")
    return seconds


@dataclass(frozen=True)
class MemoizeOptions:
    resolve: Resolver
    max_age: float = 0.0
    max_error_age: float = 0.0

    @classmethod
    def build(
        cls,
        resolve: ResolveOption = None,
        max_age: Duration = 0,
        max_error_age: Duration = 0,
    ) -> "MemoizeOptions":
        return cls(
            resolve=create_resolver(resolve),
            max_age=to_seconds(max_age, "max_age"),
            max_error_age=to_seconds(max_error_age, "max_error_age"),
        )

    @property
    def prefetch_after(self) -> float:
        return self.max_age * PREFETCH_RATIO
