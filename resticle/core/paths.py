"""
Path template resolution.

A template like ``/users/:id/posts/:post`` is populated from a merged
parameter map. Parameters that match a ``/:name`` segment are substituted
(or the segment is dropped when there is no value); the rest become query
parameters. Body references are never leaked into the query string.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from .definitions import BodyRef, ParamValue, parse_param
from .query import Encoder, encode_param

_ANY_SEGMENT = re.compile(r"/:[A-Za-z_][A-Za-z0-9_]*")


def _segment(name: str) -> re.Pattern[str]:
    # Whole-name match: "/:id" must not match inside "/:identifier"
    return re.compile(rf"/:{re.escape(name)}(?![A-Za-z0-9_])")


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value)


def resolve_body_ref(payload: Any, ref: BodyRef) -> Any:
    """
    Walk ``payload`` along the reference path.

    Mappings are indexed by key, sequences by integer position, any other
    object by attribute. Returns None as soon as a step is missing or None.
    """
    current = payload
    for key in ref.path:
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(key)
        elif isinstance(current, Sequence) and not isinstance(current, str):
            if not key.isdigit() or int(key) >= len(current):
                return None
            current = current[int(key)]
        else:
            current = getattr(current, key, None)
    return current


def resolve_path(
    template: str,
    params: Mapping[str, ParamValue | Any],
    payload: Any = None,
    encode: Encoder = encode_param,
) -> tuple[str, dict[str, Any]]:
    """
    Populate a path template.

    Args:
        template: Path with ``/:name`` placeholders
        params: Merged parameters (raw values are parsed on the fly)
        payload: Request body used to resolve body references
        encode: Path value encoder

    Returns:
        Tuple of (populated path, leftover query parameters)

    Example:
        >>> resolve_path("/test/:id", {"id": 123, "q": "x"})
        ('/test/123', {'q': 'x'})
    """
    path = template
    query: dict[str, Any] = {}

    for name, raw in params.items():
        param = parse_param(raw)
        pattern = _segment(name)

        if pattern.search(template):
            if isinstance(param, BodyRef):
                value = resolve_body_ref(payload, param)
            else:
                value = param.value
            replacement = "" if _is_absent(value) else f"/{encode(value)}"
            path = pattern.sub(lambda _m: replacement, path, count=1)
        elif not isinstance(param, BodyRef):
            query[name] = param.value

    # Declared in the template but never supplied
    path = _ANY_SEGMENT.sub("", path)
    return path, query


def join_path(base: str, suffix: str) -> str:
    """Append an action suffix to a resource path with a single ``/``."""
    if not suffix:
        return base
    if not base:
        return suffix if suffix.startswith("/") else f"/{suffix}"
    return f"{base.rstrip('/')}/{suffix.lstrip('/')}"


def prefix_root(root: str, path: str) -> str:
    """Prefix a populated path with the factory's root path or base URL."""
    if not root:
        return path
    if not path:
        return root
    return join_path(root, path)
