"""
Query string serialization.

The default encoding matches JavaScript's ``encodeURIComponent`` so URLs built
here agree with what browser-side clients of the same API produce.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

from .utils import is_sequence

# Characters encodeURIComponent leaves untouched (besides alphanumerics)
_UNRESERVED = "-_.!~*'()"

Encoder = Callable[[Any], str]


def encode_param(value: Any) -> str:
    """
    Percent-encode a single path or query value.

    Booleans render as ``true``/``false`` and None as an empty string.
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif value is None:
        text = ""
    else:
        text = str(value)
    return quote(text, safe=_UNRESERVED)


def serialize_query(query: Mapping[str, Any], encode: Encoder = encode_param) -> str:
    """
    Serialize a query map to ``k1=v1&k2=v2`` (no leading ``?``).

    Array values are exploded with an index suffix, preserving order:
    ``{"ids": [4, 7]}`` -> ``ids[0]=4&ids[1]=7``. Keys whose value is None
    are skipped.

    Example:
        >>> serialize_query({"blorg": True, "amount": 123})
        'blorg=true&amount=123'
    """
    parts: list[str] = []
    for key, value in query.items():
        if value is None:
            continue
        if is_sequence(value):
            parts.extend(
                f"{encode(key)}[{i}]={encode(item)}" for i, item in enumerate(value)
            )
        else:
            parts.append(f"{encode(key)}={encode(value)}")
    return "&".join(parts)
