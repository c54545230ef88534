"""Line scanner for TOON documents.

Splits a document into indentation-tagged lines and classifies each line's
structural role without interpreting values.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from .errors import (
    InvalidIndentationError,
    NestingDepthError,
    ScalarParseError,
    StructuralParseError,
    ToonifyError,
)
from .primitives import parse_string_literal
from .string_utils import QUOTE, find_unquoted_colon, split_by_delimiter
from .types import DEFAULT_MAX_DEPTH, ArrayHeaderInfo, LineKind, ParsedLine

logger = logging.getLogger(__name__)

Reporter = Callable[[ToonifyError], None]

# Pattern for array header: key[N<delim?>]{fields}:
ARRAY_HEADER_PATTERN = re.compile(
    r"^(?P<key>[^:\[\]{}\"]+|\"(?:[^\"\\]|\\.)*\")?"  # Optional key (possibly quoted)
    r"\[(?P<length>\d+)(?P<delim>[,\t|])?\]"  # [N<delim?>]
    r"(?:\{(?P<fields>[^}]*)\})?"  # Optional {fields}
    r":(?P<rest>.*)$"  # Colon and rest
)

LIST_ITEM_PREFIX = "- "
LIST_ITEM_MARKER = "-"


def _raise(error: ToonifyError) -> None:
    raise error


def scan_lines(
    lines: Iterable[str],
    indent_size: int = 2,
    strict: bool = True,
    report: Reporter | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[ParsedLine]:
    """
    Split raw lines into classified ParsedLine records.

    Blank lines are dropped. Indentation problems are passed to ``report``
    in strict mode (the default reporter raises) and logged otherwise.

    Args:
        lines: Raw lines without newline terminators.
        indent_size: Expected spaces per indentation level.
        strict: Whether indentation problems are violations.
        report: Callback receiving non-fatal violations.
        max_depth: Deepest indentation level accepted.

    Returns:
        The non-blank lines in document order.

    Raises:
        NestingDepthError: If a line is indented deeper than ``max_depth``.
    """
    report = report or _raise
    parsed: list[ParsedLine] = []
    previous: ParsedLine | None = None

    for i, raw in enumerate(lines, start=1):
        raw = raw.rstrip("\r")
        if not raw.strip():
            continue

        stripped = raw.lstrip(" ")
        indent = len(raw) - len(stripped)

        if stripped.startswith("\t"):
            _indentation_issue(report, strict, "Tab in indentation (use spaces)", i)
            stripped = stripped.lstrip(" \t")

        if indent % indent_size != 0:
            _indentation_issue(
                report,
                strict,
                f"Indentation {indent} is not a multiple of {indent_size}",
                i,
            )

        depth = indent // indent_size
        if depth > max_depth:
            raise NestingDepthError(
                f"Indentation level {depth} exceeds max_depth={max_depth}", line_number=i
            )

        limit = _deepest_child_level(previous)
        if depth > limit:
            _indentation_issue(
                report,
                strict,
                f"Indentation jumps to level {depth}, expected at most {limit}",
                i,
            )

        content = stripped.rstrip()
        line = ParsedLine(
            raw=raw,
            content=content,
            indent=indent,
            depth=depth,
            line_number=i,
            kind=classify(content),
        )
        parsed.append(line)
        previous = line

    return parsed


def _indentation_issue(report: Reporter, strict: bool, message: str, line_number: int) -> None:
    if strict:
        report(InvalidIndentationError(message, line_number=line_number))
    else:
        logger.debug("Line %d: tolerated in loose mode: %s", line_number, message)


def _deepest_child_level(previous: ParsedLine | None) -> int:
    """Deepest level the line after ``previous`` may use."""
    if previous is None:
        return 0
    if opens_item_field(previous):
        # "- key:" puts the nested object's fields two levels below the hyphen
        return previous.depth + 2
    return previous.depth + 1


def classify(content: str) -> LineKind:
    """Classify a line (without indentation) by its structural shape."""
    if content == LIST_ITEM_MARKER or content.startswith(LIST_ITEM_PREFIX):
        return LineKind.LIST_ITEM

    match = ARRAY_HEADER_PATTERN.match(content)
    if match:
        if match.group("fields") is not None:
            return LineKind.TABULAR_HEADER
        return LineKind.ARRAY_HEADER

    if find_unquoted_colon(content) != -1:
        return LineKind.PAIR

    return LineKind.SCALAR


def list_item_content(line: ParsedLine) -> str:
    """Return the text after a list item's hyphen marker."""
    return line.content[len(LIST_ITEM_MARKER) :].strip()


def opens_item_field(line: ParsedLine) -> bool:
    """Check if a list item line is ``- key:`` with its value on following lines."""
    if line.kind is not LineKind.LIST_ITEM:
        return False
    item = list_item_content(line)
    if classify(item) is not LineKind.PAIR:
        return False
    colon = find_unquoted_colon(item)
    return not item[colon + 1 :].strip()


def parse_key(raw: str, line_number: int | None = None) -> tuple[str, bool]:
    """
    Parse a key, handling quoted keys.

    Args:
        raw: The key text (possibly quoted).
        line_number: Line used in error messages.

    Returns:
        The key and whether it was quoted.
    """
    key = raw.strip()
    if not key:
        raise StructuralParseError("Empty key", line_number=line_number)

    if key.startswith(QUOTE):
        try:
            return parse_string_literal(key), True
        except ScalarParseError as exc:
            raise ScalarParseError(f"Invalid key: {exc.message}", line_number=line_number) from exc

    if any(c in key for c in "[]{}"):
        raise StructuralParseError(
            f"Malformed array header: {raw.strip()}", line_number=line_number
        )

    return key, False


def split_pair(content: str, line_number: int | None = None) -> tuple[str, bool, str]:
    """
    Split a ``key: value`` line.

    Returns:
        The parsed key, whether it was quoted, and the trimmed value text.
    """
    colon = find_unquoted_colon(content)
    if colon == -1:
        raise StructuralParseError(f"Expected key: value, got {content!r}", line_number=line_number)
    key, quoted = parse_key(content[:colon], line_number)
    return key, quoted, content[colon + 1 :].strip()


def parse_array_header(content: str, line_number: int | None = None) -> ArrayHeaderInfo:
    """
    Parse an array header line.

    Args:
        content: The header text (without indentation or list marker).
        line_number: Line used in error messages.

    Returns:
        The parsed header.
    """
    match = ARRAY_HEADER_PATTERN.match(content)
    if not match:
        raise StructuralParseError(f"Invalid array header: {content}", line_number=line_number)

    key = None
    key_quoted = False
    if match.group("key") is not None:
        key, key_quoted = parse_key(match.group("key"), line_number)

    delimiter = match.group("delim") or ","

    fields = None
    fields_str = match.group("fields")
    if fields_str is not None:
        if not fields_str.strip():
            raise StructuralParseError(
                "Empty field list in tabular header", line_number=line_number
            )
        fields = [parse_key(f, line_number)[0] for f in split_by_delimiter(fields_str, delimiter)]

    rest = match.group("rest").strip()

    return ArrayHeaderInfo(
        length=int(match.group("length")),
        key=key,
        key_quoted=key_quoted,
        delimiter=delimiter,
        fields=fields,
        inline=rest or None,
    )
