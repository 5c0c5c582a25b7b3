"""
JSON codec for stored values.

Values are the JSON-native Python types: ``None``, ``bool``, ``int``,
``float``, ``str``, ``list`` and ``dict`` with string keys, nested freely.
They are written as compact ASCII JSON text (non-ASCII as ``\\uXXXX`` escapes,
so lone surrogates survive) and read back with ``json.loads``.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Union

from ..core.errors import SerializationError

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]


def encode_value(value: JsonValue) -> str:
    """
    Encode *value* as compact JSON text.

    NaN and Infinity are rejected since they are not valid JSON.

    Raises
    ------
    SerializationError
        If the value contains non-serializable content or a circular reference.
    """
    try:
        return json.dumps(value, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(f"Value is not JSON-serializable: {exc}") from exc


def decode_value(text: Optional[str]) -> JsonValue:
    """
    Decode stored JSON text. A NULL column decodes to an empty dict.

    Raises
    ------
    SerializationError
        If *text* is not valid JSON.
    """
    if text is None:
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Stored data is not valid JSON: {exc.msg}") from exc
