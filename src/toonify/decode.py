"""TOON decoder implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .errors import (
    ArrayCountMismatchError,
    PathExpansionConflictError,
    RowArityError,
    ScalarParseError,
    StructuralParseError,
    ToonifyError,
    UnexpectedEndOfInputError,
)
from .primitives import parse_primitive
from .scanner import (
    Reporter,
    classify,
    list_item_content,
    parse_array_header,
    scan_lines,
    split_pair,
)
from .string_utils import is_tabular_row, is_valid_dotted_path, split_by_delimiter
from .types import ArrayHeaderInfo, DecodeOptions, JsonValue, LineKind, ParsedLine

logger = logging.getLogger(__name__)

HEADER_KINDS = (LineKind.TABULAR_HEADER, LineKind.ARRAY_HEADER)


def decode(text: str, options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON text to a Python value.

    Args:
        text: The TOON-formatted string.
        options: Decoding options.

    Returns:
        The decoded Python value. An empty document decodes to ``{}``.

    Raises:
        ToonifyError: The first violation found (see ``toonify.errors``).
    """
    opts = options or DecodeOptions()
    return decode_lines(text.split("\n"), opts)


def decode_lines(lines: Iterable[str], options: DecodeOptions | None = None) -> JsonValue:
    """
    Decode TOON from pre-split lines.

    Args:
        lines: Iterable of line strings.
        options: Decoding options.

    Returns:
        The decoded Python value.
    """
    opts = options or DecodeOptions()
    return decode_with_reporter(lines, opts, _raise)


def decode_with_reporter(
    lines: Iterable[str], options: DecodeOptions, report: Reporter
) -> JsonValue:
    """
    Run the decoding pass, sending non-fatal violations to ``report``.

    Fatal errors are always raised. ``decode`` passes a reporter that raises;
    ``validate`` passes one that collects and lets the pass continue.
    """
    parsed = scan_lines(lines, options.indent, options.strict, report, options.max_depth)
    cursor = _Cursor(parsed, options, report)
    result = _decode_root(cursor)

    leftover = cursor.peek()
    if leftover is not None:
        raise StructuralParseError(
            f"Unexpected content: {leftover.content!r}", line_number=leftover.line_number
        )
    return result


def _raise(error: ToonifyError) -> None:
    raise error


class _Cursor:
    """Cursor for iterating through parsed lines."""

    def __init__(self, lines: list[ParsedLine], options: DecodeOptions, report: Reporter):
        self.lines = lines
        self.options = options
        self.report = report
        self.pos = 0

    def peek(self) -> ParsedLine | None:
        """Look at current line without advancing."""
        if self.pos < len(self.lines):
            return self.lines[self.pos]
        return None

    def advance(self) -> ParsedLine | None:
        """Get current line and advance position."""
        line = self.peek()
        if line is not None:
            self.pos += 1
        return line

    def peek_at_depth(self, depth: int) -> ParsedLine | None:
        """Peek at next line at specific depth."""
        line = self.peek()
        if line is not None and line.depth == depth:
            return line
        return None


def _decode_root(cursor: _Cursor) -> JsonValue:
    """Decode the root value."""
    line = cursor.peek()
    if line is None:
        return {}

    # Root array
    if line.kind in HEADER_KINDS:
        header = parse_array_header(line.content, line.line_number)
        if header.key is None:
            cursor.advance()
            return _decode_array(cursor, header, line)

    # Single primitive
    if line.kind is LineKind.SCALAR and len(cursor.lines) == 1:
        cursor.advance()
        return _parse_scalar(line.content, line)

    return _decode_object(cursor, line.depth)


def _decode_object(cursor: _Cursor, depth: int, result: dict | None = None) -> dict:
    """Decode the fields at the given depth into ``result``."""
    if result is None:
        result = {}

    while True:
        line = cursor.peek_at_depth(depth)
        if line is None:
            break
        cursor.advance()
        _decode_field(cursor, line, depth, result)

    return result


def _decode_field(cursor: _Cursor, line: ParsedLine, depth: int, target: dict) -> None:
    """Decode one ``key: value`` or ``key[N]...:`` line into ``target``."""
    if line.kind in HEADER_KINDS:
        header = parse_array_header(line.content, line.line_number)
        if header.key is None:
            raise StructuralParseError(
                "Array header inside an object needs a key", line_number=line.line_number
            )
        value = _decode_array(cursor, header, line)
        _assign(cursor, target, header.key, header.key_quoted, value, line)
        return

    if line.kind is LineKind.PAIR:
        key, quoted, value_part = split_pair(line.content, line.line_number)
        if value_part:
            value = _parse_scalar(value_part, line)
        else:
            value = _decode_nested_object(cursor, depth)
        _assign(cursor, target, key, quoted, value, line)
        return

    raise StructuralParseError(
        f"Expected key: value, got {line.content!r}", line_number=line.line_number
    )


def _decode_nested_object(cursor: _Cursor, parent_depth: int) -> dict:
    """Decode the object opened by an empty value, or ``{}`` if nothing is nested."""
    next_line = cursor.peek()
    if next_line is not None and next_line.depth > parent_depth:
        return _decode_object(cursor, next_line.depth)
    return {}


def _decode_array(cursor: _Cursor, header: ArrayHeaderInfo, line: ParsedLine) -> list:
    """Decode the body of an array whose header was already consumed."""
    if header.inline is not None:
        if header.fields is not None:
            raise StructuralParseError(
                "Tabular header cannot carry inline values", line_number=line.line_number
            )
        values = _decode_inline_values(header, line)
        _check_count(cursor, header, len(values), line)
        return values

    next_line = cursor.peek()
    if next_line is None or next_line.depth <= line.depth:
        if next_line is None and header.length > 0 and cursor.options.strict:
            raise UnexpectedEndOfInputError(
                f"Document ended before the {header.length} declared items",
                line_number=line.line_number,
                path=header.key,
            )
        _check_count(cursor, header, 0, line)
        return []

    if header.fields is not None:
        result = _decode_tabular_rows(cursor, header, next_line.depth)
    else:
        result = _decode_list_items(cursor, next_line.depth)

    _check_count(cursor, header, len(result), line)
    return result


def _check_count(cursor: _Cursor, header: ArrayHeaderInfo, actual: int, line: ParsedLine) -> None:
    if actual == header.length:
        return
    if cursor.options.strict:
        cursor.report(
            ArrayCountMismatchError(
                f"Array declares {header.length} items but has {actual}",
                expected=header.length,
                actual=actual,
                line_number=line.line_number,
                path=header.key,
            )
        )
    else:
        logger.debug(
            "Line %d: declared %d items, accepting %d", line.line_number, header.length, actual
        )


def _decode_inline_values(header: ArrayHeaderInfo, line: ParsedLine) -> list:
    """Decode inline primitive array values."""
    values = split_by_delimiter(header.inline or "", header.delimiter)
    return [_parse_scalar(v, line) for v in values]


def _decode_tabular_rows(cursor: _Cursor, header: ArrayHeaderInfo, depth: int) -> list[dict]:
    """Decode tabular array rows."""
    result = []
    fields = header.fields or []

    while True:
        line = cursor.peek_at_depth(depth)
        if line is None or not _is_row(line, header):
            break
        cursor.advance()

        values = split_by_delimiter(line.content, header.delimiter)
        if len(values) != len(fields):
            raise RowArityError(
                f"Expected {len(fields)} values, got {len(values)}",
                expected=len(fields),
                actual=len(values),
                line_number=line.line_number,
                path=header.key,
            )

        row = {}
        for field, value in zip(fields, values):
            row[field] = _parse_scalar(value, line)
        result.append(row)

    return result


def _is_row(line: ParsedLine, header: ArrayHeaderInfo) -> bool:
    """Tell a tabular row apart from a sibling field sharing its depth."""
    if line.kind not in (LineKind.SCALAR, LineKind.PAIR):
        return False
    return is_tabular_row(line.content, header.delimiter)


def _decode_list_items(cursor: _Cursor, depth: int) -> list:
    """Decode list items (lines starting with -)."""
    result = []

    while True:
        line = cursor.peek_at_depth(depth)
        if line is None or line.kind is not LineKind.LIST_ITEM:
            break
        cursor.advance()
        result.append(_decode_list_item(cursor, line, depth))

    return result


def _decode_list_item(cursor: _Cursor, line: ParsedLine, depth: int) -> JsonValue:
    """Decode a single list item."""
    content = list_item_content(line)

    if not content:
        # Bare hyphen - check for nested content
        return _decode_nested_object(cursor, depth)

    kind = classify(content)

    if kind is LineKind.LIST_ITEM:
        raise StructuralParseError(
            "Nested list marker; write inner arrays as '- [N]:'", line_number=line.line_number
        )

    if kind in HEADER_KINDS:
        header = parse_array_header(content, line.line_number)
        value = _decode_array(cursor, header, line)
        if header.key is None:
            # Bare array as list item
            return value
        # Object with array as first field; rows share depth + 1 with other fields
        item: dict = {}
        _assign(cursor, item, header.key, header.key_quoted, value, line)
        return _decode_object(cursor, depth + 1, item)

    if kind is LineKind.PAIR:
        key, quoted, value_part = split_pair(content, line.line_number)
        if value_part:
            value = _parse_scalar(value_part, line)
        else:
            # Nested object fields sit below the item's own fields
            value = _decode_nested_object(cursor, depth + 1)
        item = {}
        _assign(cursor, item, key, quoted, value, line)
        return _decode_object(cursor, depth + 1, item)

    return _parse_scalar(content, line)


def _parse_scalar(token: str, line: ParsedLine) -> JsonValue:
    try:
        return parse_primitive(token)
    except ScalarParseError as exc:
        raise ScalarParseError(exc.message, line_number=line.line_number) from exc


def _assign(
    cursor: _Cursor,
    target: dict,
    key: str,
    quoted: bool,
    value: JsonValue,
    line: ParsedLine,
) -> None:
    """Store a decoded field, expanding dotted keys when enabled."""
    if cursor.options.expand_paths != "safe":
        target[key] = value
    elif not quoted and is_valid_dotted_path(key):
        _set_nested(cursor, target, key.split("."), value, line)
    else:
        # Quoted keys are never split but still take part in conflict checks
        _put(cursor, target, key, value, line, key)


def _set_nested(
    cursor: _Cursor, obj: dict, path: list[str], value: JsonValue, line: ParsedLine
) -> None:
    """Set a value at a nested path, creating intermediate objects."""
    for i, segment in enumerate(path[:-1]):
        if segment not in obj:
            obj[segment] = {}
        elif not isinstance(obj[segment], dict):
            prefix = ".".join(path[: i + 1])
            _conflict(cursor, f"Cannot expand through non-object value at {prefix!r}", line, prefix)
            obj[segment] = {}
        obj = obj[segment]

    _put(cursor, obj, path[-1], value, line, ".".join(path))


def _put(
    cursor: _Cursor, obj: dict, key: str, value: JsonValue, line: ParsedLine, path: str
) -> None:
    """
    Insert ``value`` under ``key``, merging objects and reporting clashes.

    With expansion on, every key takes part in conflict checks, dotted or not,
    so a plain duplicate such as ``a: 1`` then ``a: 2`` is a conflict too.
    """
    if key not in obj:
        obj[key] = value
        return

    existing = obj[key]
    if isinstance(existing, dict) and isinstance(value, dict):
        for child_key, child_value in value.items():
            _put(cursor, existing, child_key, child_value, line, f"{path}.{child_key}")
        return

    if type(existing) is not type(value) or existing != value:
        _conflict(cursor, f"Key {path!r} already holds a different value", line, path)
    obj[key] = value


def _conflict(cursor: _Cursor, message: str, line: ParsedLine, path: str) -> None:
    if cursor.options.strict:
        cursor.report(PathExpansionConflictError(message, line_number=line.line_number, path=path))
    else:
        logger.debug("Line %d: %s; last write wins", line.line_number, message)
