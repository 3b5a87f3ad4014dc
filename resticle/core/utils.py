"""Small helpers shared by the core modules."""

from __future__ import annotations

import copy
import inspect
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any


def freeze(value: Any) -> Any:
    """
    Return a structurally immutable deep copy of ``value``.

    Mappings become read-only ``MappingProxyType`` views over fresh dicts,
    lists and tuples become tuples, sets become frozensets. Anything else
    is deep-copied so the caller cannot reach the original through it.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(v) for v in value)
    if isinstance(value, (str, bytes, int, float, bool, type(None))):
        return value
    return copy.deepcopy(value)


def is_sequence(value: Any) -> bool:
    """True for list/tuple values (the shapes treated as JSON arrays)."""
    return isinstance(value, (list, tuple))


async def resolve(result: Any) -> Any:
    """Await ``result`` if it is awaitable, otherwise return it as-is."""
    if inspect.isawaitable(result):
        return await result
    return result


async def then(result: Any, continuation: Callable[[Any], Any]) -> Any:
    """Await ``result`` and feed it to ``continuation`` (the default subscribe)."""
    return await resolve(continuation(await resolve(result)))
