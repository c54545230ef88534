"""Scalar and key tokens: canonical encoding and literal parsing."""

import math
import re
from decimal import Context, Decimal
from typing import TYPE_CHECKING

from .errors import ScalarParseError
from .string_utils import (
    QUOTE,
    escape_string,
    is_identifier_key,
    is_number_literal,
    is_safe_unquoted,
    unescape_string,
)

if TYPE_CHECKING:
    from .types import Delimiter, JsonPrimitive

LITERALS = {"null": None, "true": True, "false": False}

# A quoted string: opening quote, escaped or plain characters, closing quote
QUOTED_PATTERN = re.compile(r'"((?:[^"\\]|\\.)*)"', re.DOTALL)


def encode_primitive(value: "JsonPrimitive | Decimal", delimiter: "Delimiter" = ",") -> str:
    """
    Encode a primitive value to TOON format.

    Args:
        value: The primitive value (str, int, float, Decimal, bool, or None).
        delimiter: The active delimiter for quoting checks.

    Returns:
        The encoded token.

    Raises:
        TypeError: For anything that is not a JSON primitive.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value if is_safe_unquoted(value, delimiter) else quote(value)
    if isinstance(value, (int, float, Decimal)):
        return _encode_number(value)
    raise TypeError(f"Cannot encode value of type {type(value).__name__}")


def quote(value: str) -> str:
    return f"{QUOTE}{escape_string(value)}{QUOTE}"


def _encode_number(value: int | float | Decimal) -> str:
    """Encode a number as canonical decimal text."""
    if isinstance(value, int):
        return str(value)

    if isinstance(value, Decimal):
        return _plain_decimal(value) if value.is_finite() else "null"

    if math.isnan(value) or math.isinf(value):
        return "null"
    # Whole floats use their exact digits; repr's shortest form can name another value
    if value.is_integer():
        # int() also turns -0.0 into 0
        return str(int(value))
    text = repr(value)
    if "e" in text:
        return _plain_decimal(Decimal(text))
    return text


def _plain_decimal(value: Decimal) -> str:
    """Render a finite Decimal without exponent or trailing zeros."""
    if value.is_zero():
        return "0"
    digits = len(value.as_tuple().digits)
    return format(value.normalize(Context(prec=digits)), "f")


def encode_key(key: str, quote_dotted: bool = False) -> str:
    """
    Encode an object key for TOON format.

    Identifier-like keys (letters, digits, underscores and dots) are left bare.

    Args:
        key: The key string.
        quote_dotted: Quote keys containing dots so path expansion leaves them alone.

    Returns:
        The encoded key (quoted if necessary).
    """
    if is_identifier_key(key) and not (quote_dotted and "." in key):
        return key
    return quote(key)


def parse_primitive(token: str) -> "JsonPrimitive":
    """
    Parse a trimmed token into a Python value.

    Quoted tokens are always strings. Bare tokens are literals, numbers, or
    else strings as written; the empty token is the empty string.

    Raises:
        ScalarParseError: For malformed quoted strings.
    """
    if token.startswith(QUOTE):
        return parse_string_literal(token)
    if token in LITERALS:
        return LITERALS[token]
    if is_number_literal(token):
        return _parse_number(token)
    return token


def parse_string_literal(token: str) -> str:
    """
    Parse a quoted string literal.

    Args:
        token: The token starting with '"'.

    Returns:
        The unescaped string content.

    Raises:
        ScalarParseError: If the string is unterminated or followed by more text.
    """
    match = QUOTED_PATTERN.match(token)
    if match is None:
        raise ScalarParseError(f"Unterminated string: {token}")
    if match.end() != len(token):
        raise ScalarParseError(f"Unexpected characters after closing quote: {token}")
    return unescape_string(match.group(1))


def _parse_number(token: str) -> int | float:
    """
    Parse a token already known to match the number grammar.

    Fractional and exponent forms become ``float``, so digits beyond double
    precision are lost. Decoded values stay within what ``orjson`` renders.
    """
    if "." not in token and "e" not in token.lower():
        return int(token)
    value = float(token)
    # -0.0 reads back as 0
    return 0 if value == 0.0 else value


def format_array_header(
    length: int,
    key: str | None = None,
    fields: list[str] | None = None,
    delimiter: "Delimiter" = ",",
) -> str:
    """
    Format an array header line.

    A non-comma delimiter is written inside the brackets, and tabular field
    names are joined with it. ``key`` must already be encoded.
    """
    marker = "" if delimiter == "," else delimiter
    header = f"{key or ''}[{length}{marker}]"
    if fields:
        header += "{" + delimiter.join(encode_key(f) for f in fields) + "}"
    return header + ":"
