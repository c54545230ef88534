"""TOON encoder implementation."""

import logging
from collections.abc import Generator
from typing import Any

from .normalize import normalize_value
from .primitives import encode_key, encode_primitive, format_array_header
from .string_utils import is_valid_identifier_segment
from .types import EncodeOptions, JsonValue

logger = logging.getLogger(__name__)

LIST_ITEM_PREFIX = "- "


def encode(value: Any, options: EncodeOptions | None = None) -> str:
    """
    Encode a Python value to TOON format.

    Args:
        value: The value to encode (dict, list, or primitive).
        options: Encoding options.

    Returns:
        The TOON-formatted string.

    Raises:
        NestingDepthError: If the value nests deeper than ``options.max_depth``.
    """
    opts = options or EncodeOptions()
    return "\n".join(encode_lines(value, opts))


def encode_lines(
    value: Any, options: EncodeOptions | None = None
) -> Generator[str, None, None]:
    """
    Encode a Python value to TOON format, yielding lines.

    This is memory-efficient for large data structures.

    Args:
        value: The value to encode.
        options: Encoding options.

    Yields:
        Lines of TOON output.
    """
    opts = options or EncodeOptions()
    normalized = normalize_value(value, opts.max_depth)

    # Root form detection
    if isinstance(normalized, dict):
        yield from _encode_object_lines(normalized, opts, 0)
    elif isinstance(normalized, list):
        yield from _encode_array(None, normalized, opts, 0)
    else:
        yield encode_primitive(normalized, opts.delimiter)


def _encode_object_lines(
    obj: dict, opts: EncodeOptions, depth: int
) -> Generator[str, None, None]:
    """Encode an object's key-value pairs."""
    siblings = set(obj)
    for key, value in obj.items():
        yield from _encode_field(key, value, opts, depth, siblings)


def _encode_field(
    key: str,
    value: JsonValue,
    opts: EncodeOptions,
    depth: int,
    siblings: set[str],
    marker: str = "",
) -> Generator[str, None, None]:
    """
    Encode one object field.

    ``marker`` is the list item prefix when the field sits on a hyphen line;
    a nested object in that position goes two levels below the hyphen.
    """
    encoded_key, value = _resolve_key(key, value, opts, siblings)
    indent = _indent(opts, depth)

    if isinstance(value, dict):
        yield f"{indent}{marker}{encoded_key}:"
        if value:
            child_depth = depth + 2 if marker else depth + 1
            yield from _encode_object_lines(value, opts, child_depth)
    elif isinstance(value, list):
        yield from _encode_array(encoded_key, value, opts, depth, marker)
    else:
        encoded_value = encode_primitive(value, opts.delimiter)
        yield f"{indent}{marker}{encoded_key}: {encoded_value}"


def _encode_array(
    encoded_key: str | None,
    arr: list,
    opts: EncodeOptions,
    depth: int,
    marker: str = "",
) -> Generator[str, None, None]:
    """Encode an array with the best format."""
    prefix = _indent(opts, depth) + marker

    if all(_is_primitive(v) for v in arr):
        # Inline primitive array (also covers the empty array)
        header = format_array_header(len(arr), encoded_key, delimiter=opts.delimiter)
        if not arr:
            yield f"{prefix}{header}"
            return
        values = [encode_primitive(v, opts.delimiter) for v in arr]
        yield f"{prefix}{header} " + opts.delimiter.join(values)
        return

    fields = _tabular_fields(arr)
    if fields is not None:
        yield prefix + format_array_header(len(arr), encoded_key, fields, opts.delimiter)
        for row in arr:
            yield _encode_tabular_row(row, fields, opts, depth + 1)
        return

    # List format
    yield prefix + format_array_header(len(arr), encoded_key, delimiter=opts.delimiter)
    for item in arr:
        yield from _encode_list_item(item, opts, depth + 1)


def _encode_list_item(
    item: JsonValue, opts: EncodeOptions, depth: int
) -> Generator[str, None, None]:
    """Encode a list item (after the - marker)."""
    indent = _indent(opts, depth)

    if isinstance(item, dict):
        if not item:
            # Empty object as list item
            yield f"{indent}-"
        else:
            yield from _encode_object_list_item(item, opts, depth)
    elif isinstance(item, list):
        # Nested array as list item
        yield from _encode_array(None, item, opts, depth, LIST_ITEM_PREFIX)
    else:
        yield f"{indent}{LIST_ITEM_PREFIX}{encode_primitive(item, opts.delimiter)}"


def _encode_object_list_item(
    obj: dict, opts: EncodeOptions, depth: int
) -> Generator[str, None, None]:
    """Encode an object as a list item with first field on hyphen line."""
    siblings = set(obj)
    items = iter(obj.items())

    first_key, first_value = next(items)
    yield from _encode_field(first_key, first_value, opts, depth, siblings, LIST_ITEM_PREFIX)

    # Remaining fields at depth + 1
    for key, value in items:
        yield from _encode_field(key, value, opts, depth + 1, siblings)


def _encode_tabular_row(row: dict, fields: list[str], opts: EncodeOptions, depth: int) -> str:
    """Encode a single tabular row."""
    values = [encode_primitive(row[f], opts.delimiter) for f in fields]
    return _indent(opts, depth) + opts.delimiter.join(values)


def _resolve_key(
    key: str, value: JsonValue, opts: EncodeOptions, siblings: set[str]
) -> tuple[str, JsonValue]:
    """
    Pick the written key for a field, folding single-key chains when enabled.

    Returns:
        The encoded key and the value to write under it.
    """
    if opts.key_folding != "safe":
        return encode_key(key), value

    path, folded_value = _fold_path(key, value, opts.flatten_depth)
    if len(path) > 1:
        folded_key = ".".join(path)
        if folded_key not in siblings:
            return folded_key, folded_value
        logger.debug("Not folding %r: collides with a sibling key", folded_key)

    # Literal dotted keys stay quoted so path expansion leaves them whole
    return encode_key(key, quote_dotted=True), value


def _fold_path(
    key: str, value: JsonValue, flatten_depth: int | None
) -> tuple[list[str], JsonValue]:
    """Walk down single-key objects collecting identifier segments."""
    path = [key]
    if not is_valid_identifier_segment(key):
        return path, value

    while (
        (flatten_depth is None or len(path) < flatten_depth)
        and isinstance(value, dict)
        and len(value) == 1
    ):
        next_key, next_value = next(iter(value.items()))
        if not is_valid_identifier_segment(next_key):
            break
        path.append(next_key)
        value = next_value

    return path, value


def _tabular_fields(arr: list) -> list[str] | None:
    """Return the shared field list if the array can use tabular format."""
    # All elements must be non-empty objects
    if not all(isinstance(v, dict) and v for v in arr):
        return None

    # Same keys in the same order
    fields = list(arr[0])
    for item in arr[1:]:
        if list(item) != fields:
            return None

    # All values must be primitives
    for item in arr:
        if not all(_is_primitive(v) for v in item.values()):
            return None

    return fields


def _is_primitive(value: JsonValue) -> bool:
    """Check if value is a primitive (not dict or list)."""
    return not isinstance(value, (dict, list))


def _indent(opts: EncodeOptions, depth: int) -> str:
    return " " * (opts.indent * depth)
