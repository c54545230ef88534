"""Normalization of host Python values into the JSON data model."""

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from .errors import NestingDepthError
from .types import DEFAULT_MAX_DEPTH, JsonValue


def normalize_value(value: Any, max_depth: int = DEFAULT_MAX_DEPTH, _depth: int = 0) -> JsonValue:
    """
    Normalize a value for JSON compatibility.

    Converts:
    - Date objects to ISO strings
    - Sets to sorted lists
    - Tuples and other iterables to lists
    - Mappings to dicts with string keys
    - NaN/Infinity to None and -0.0 to 0

    Decimal values are kept as-is so the encoder can render them exactly.

    Args:
        value: The value to normalize.
        max_depth: Maximum container nesting accepted.

    Returns:
        A JSON-compatible value.

    Raises:
        NestingDepthError: If containers nest deeper than ``max_depth``.
    """
    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        # Normalize -0 to 0
        if value == 0.0:
            return 0
        return value

    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return value

    if isinstance(value, int):
        return value

    if hasattr(value, "isoformat"):
        return value.isoformat()

    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")

    if isinstance(value, Mapping) or hasattr(value, "__iter__"):
        if _depth >= max_depth:
            raise NestingDepthError(f"Value nests deeper than max_depth={max_depth}")
        child_depth = _depth + 1

        if isinstance(value, Mapping):
            return {
                str(k): normalize_value(v, max_depth, child_depth) for k, v in value.items()
            }

        if isinstance(value, (set, frozenset)):
            return [normalize_value(v, max_depth, child_depth) for v in sorted(value, key=str)]

        return [normalize_value(v, max_depth, child_depth) for v in value]

    # Last resort: string conversion
    return str(value)
