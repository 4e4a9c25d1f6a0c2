import json
from collections.abc import Callable, Hashable, Sequence
from typing import Any

from asyncmemo.errors import ConfigurationError

SEPARATOR = "\x02"
EMPTY_KEY = "\x01"
KEYWORDS_MARK = "\x03"

Resolver = Callable[[Sequence[Any]], Hashable]
ResolveOption = str | Sequence[str | Callable[[Any], Any]] | Resolver | None


class KeywordArguments(dict):
    """Keyword arguments of a call, handed to resolvers after the positional ones."""

    def __str__(self) -> str:
        return KEYWORDS_MARK + super().__repr__()


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def simple_fragment(arg: Any) -> str:
    return str(arg)


def json_fragment(arg: Any) -> str:
    text = json.dumps(
        arg,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )
    return KEYWORDS_MARK + text if isinstance(arg, KeywordArguments) else text


BUILTINS: dict[str, Callable[[Any], str]] = {
    "simple": simple_fragment,
    "json": json_fragment,
}


def _builtin(fragment: Callable[[Any], str]) -> Resolver:
    def resolve(args: Sequence[Any]) -> str:
        if not args:
            return EMPTY_KEY
        return SEPARATOR.join(fragment(arg) for arg in args)

    return resolve


def _positional(strategies: Sequence[str | Callable[[Any], Any]]) -> Resolver:
    fragments = []
    for strategy in strategies:
        if isinstance(strategy, str):
            if strategy not in BUILTINS:
                raise ConfigurationError(
                    f'unknown value "{strategy}" in resolve option'
                )
            fragments.append(BUILTINS[strategy])
        elif callable(strategy):
            fragments.append(strategy)
        else:
            raise ConfigurationError(f"invalid value {strategy!r} in resolve option")
    fragments = tuple(fragments)

    def resolve(args: Sequence[Any]) -> str:
        # extra args and unused strategies are ignored
        if not (pairs := list(zip(fragments, args))):
            return EMPTY_KEY
        return SEPARATOR.join(str(fragment(arg)) for fragment, arg in pairs)

    return resolve


def create_resolver(how: ResolveOption = None) -> Resolver:
    """
    Build the key resolver for a memoizer.

    `how` is one of:
    - None or "simple": join str() of every argument
    - "json": join the canonical JSON text of every argument
    - a list of per-position strategies, each a built-in name or a function
      of one argument
    - a function receiving the whole argument list and returning the key
    """
    if how is None:
        return _builtin(simple_fragment)
    if isinstance(how, str):
        if how not in BUILTINS:
            raise ConfigurationError(f'invalid resolve option "{how}"')
        return _builtin(BUILTINS[how])
    if isinstance(how, (list, tuple)):
        return _positional(how)
    if callable(how):
        return how
    raise ConfigurationError(f"invalid resolve option {how!r}")
