"""Quoting, escaping and quote-aware scanning of TOON text."""

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

from .errors import ScalarParseError

if TYPE_CHECKING:
    from .types import Delimiter

QUOTE = '"'
BACKSLASH = "\\"

# The only escapes TOON knows: written form -> character
ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

_ESCAPE_TABLE = str.maketrans({char: BACKSLASH + code for code, char in ESCAPES.items()})
_ESCAPE_SEQUENCE = re.compile(r"\\(.?)", re.DOTALL)

RESERVED_LITERALS = frozenset({"true", "false", "null"})

# Any of these inside a string forces quotes
FORCE_QUOTE_CHARS = frozenset(':"\\[]{}\n\r\t')

NUMBER_PATTERN = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
ZERO_PADDED_PATTERN = re.compile(r"0\d+")

IDENTIFIER_SEGMENT_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
IDENTIFIER_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


def escape_string(value: str) -> str:
    """Escape backslash, quote and the three control characters."""
    return value.translate(_ESCAPE_TABLE)


def unescape_string(value: str) -> str:
    """
    Resolve escape sequences in the body of a quoted string.

    Raises:
        ScalarParseError: On an unknown escape or a trailing backslash.
    """

    def resolve(match: re.Match) -> str:
        code = match.group(1)
        if not code:
            raise ScalarParseError("Backslash at end of string")
        if code not in ESCAPES:
            raise ScalarParseError(f"Invalid escape sequence: \\{code}")
        return ESCAPES[code]

    return _ESCAPE_SEQUENCE.sub(resolve, value)


def is_safe_unquoted(value: str, delimiter: "Delimiter" = ",") -> bool:
    """
    Check if a string reads back as itself when written without quotes.

    Empty strings, padded strings, literal and number lookalikes, strings
    holding structural or control characters or the active delimiter, and
    strings starting with the list marker all need quotes.
    """
    if not value or value != value.strip() or value.startswith("-"):
        return False
    if value in RESERVED_LITERALS or looks_like_number(value):
        return False
    return delimiter not in value and FORCE_QUOTE_CHARS.isdisjoint(value)


def looks_like_number(value: str) -> bool:
    """Check if a string would be read back as a number (or is a zero-padded digit run)."""
    return bool(NUMBER_PATTERN.fullmatch(value) or ZERO_PADDED_PATTERN.fullmatch(value))


def is_number_literal(token: str) -> bool:
    """Check if a bare token decodes as a number."""
    return NUMBER_PATTERN.fullmatch(token) is not None


def is_valid_identifier_segment(segment: str) -> bool:
    """Check if ``segment`` can be one part of a folded or expanded path."""
    return IDENTIFIER_SEGMENT_PATTERN.fullmatch(segment) is not None


def is_identifier_key(key: str) -> bool:
    """Check if a key may be written without quotes."""
    return IDENTIFIER_KEY_PATTERN.fullmatch(key) is not None


def is_valid_dotted_path(key: str) -> bool:
    """Check if ``key`` has at least two segments and each is an identifier."""
    segments = key.split(".")
    return len(segments) > 1 and all(map(is_valid_identifier_segment, segments))


def _outside_quotes(text: str) -> Iterator[tuple[int, str]]:
    """
    Yield ``(index, char)`` for characters outside quoted sections.

    Quote characters themselves are not yielded. Inside quotes a backslash
    hides the character after it.
    """
    in_quotes = False
    chars = enumerate(text)
    for i, char in chars:
        if in_quotes:
            if char == BACKSLASH:
                next(chars, None)
            elif char == QUOTE:
                in_quotes = False
        elif char == QUOTE:
            in_quotes = True
        else:
            yield i, char


def find_unquoted_colon(line: str) -> int:
    """Return the index of the first colon outside quotes, or -1."""
    return next((i for i, char in _outside_quotes(line) if char == ":"), -1)


def split_by_delimiter(value: str, delimiter: "Delimiter") -> list[str]:
    """
    Split on the delimiter outside quotes.

    Cells keep their quotes and escapes; surrounding spaces are trimmed.
    """
    cuts = [i for i, char in _outside_quotes(value) if char == delimiter]
    starts = [0] + [i + 1 for i in cuts]
    ends = cuts + [len(value)]
    return [value[start:end].strip(" ") for start, end in zip(starts, ends)]


def is_tabular_row(content: str, delimiter: "Delimiter") -> bool:
    """
    Check if a line looks like a tabular row rather than a ``key: value`` field.

    A row either has no unquoted colon, or its first unquoted delimiter
    comes before its first unquoted colon.
    """
    for _, char in _outside_quotes(content):
        if char == delimiter:
            return True
        if char == ":":
            return False
    return True
