"""Type definitions for the TOON encoder/decoder."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

# JSON type aliases
JsonPrimitive = str | int | float | bool | None
JsonArray = list["JsonValue"]
JsonObject = dict[str, "JsonValue"]
JsonValue = JsonPrimitive | JsonArray | JsonObject

# Delimiter options
Delimiter = Literal[",", "\t", "|"]

DELIMITERS: dict[str, Delimiter] = {
    "comma": ",",
    "tab": "\t",
    "pipe": "|",
}

DEFAULT_MAX_DEPTH = 128


def _resolve_delimiter(value: str) -> Delimiter:
    if not isinstance(value, str):
        raise ValueError(f"Unsupported delimiter: {value!r}")
    if value in DELIMITERS.values():
        return value  # type: ignore[return-value]
    try:
        return DELIMITERS[value.lower()]
    except KeyError:
        raise ValueError(f"Unsupported delimiter: {value!r}") from None


def _check_positive(name: str, value: int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def _check_mode(name: str, value: str) -> None:
    if value not in ("off", "safe"):
        raise ValueError(f"{name} must be 'off' or 'safe', got {value!r}")


@dataclass
class EncodeOptions:
    """Options for TOON encoding."""

    indent: int = 2
    """Number of spaces per indentation level."""

    delimiter: Delimiter = ","
    """Delimiter for inline arrays and tabular rows (also accepts comma/tab/pipe)."""

    key_folding: Literal["off", "safe"] = "off"
    """Whether to fold single-key object chains into dotted paths."""

    flatten_depth: int | None = None
    """Maximum number of segments in a folded key. None means unlimited."""

    max_depth: int = DEFAULT_MAX_DEPTH
    """Maximum nesting depth accepted before NestingDepthError is raised."""

    def __post_init__(self) -> None:
        _check_positive("indent", self.indent)
        _check_positive("flatten_depth", self.flatten_depth)
        _check_positive("max_depth", self.max_depth)
        _check_mode("key_folding", self.key_folding)
        self.delimiter = _resolve_delimiter(self.delimiter)


@dataclass
class DecodeOptions:
    """Options for TOON decoding."""

    indent: int = 2
    """Expected indentation size (for strict mode validation)."""

    expand_paths: Literal["off", "safe"] = "off"
    """Expand dotted keys into nested objects."""

    strict: bool = True
    """Enforce declared array counts and indentation."""

    pretty: bool = False
    """Pretty-print JSON produced by decode_to_json. Does not affect decoding."""

    max_depth: int = DEFAULT_MAX_DEPTH
    """Maximum indentation depth accepted before NestingDepthError is raised."""

    def __post_init__(self) -> None:
        _check_positive("indent", self.indent)
        _check_positive("max_depth", self.max_depth)
        _check_mode("expand_paths", self.expand_paths)


class LineKind(Enum):
    """Structural role of a scanned line."""

    PAIR = "pair"
    TABULAR_HEADER = "tabular_header"
    ARRAY_HEADER = "array_header"
    LIST_ITEM = "list_item"
    SCALAR = "scalar"


@dataclass
class ParsedLine:
    """A parsed line with indentation info."""

    raw: str
    """Original line content."""

    content: str
    """Content after stripping indentation."""

    indent: int
    """Number of leading spaces."""

    depth: int
    """Indentation level (indent / indent_size)."""

    line_number: int
    """1-based line number."""

    kind: LineKind = LineKind.SCALAR
    """Structural role of the line."""


@dataclass
class ArrayHeaderInfo:
    """Parsed array header information."""

    length: int
    """Declared array length."""

    key: str | None = None
    """Key preceding the bracket (None for root arrays and bare list items)."""

    key_quoted: bool = False
    """Whether the key was written as a quoted string."""

    delimiter: Delimiter = ","
    """Delimiter for this array's values."""

    fields: list[str] | None = None
    """Field names for tabular format (None for non-tabular)."""

    inline: str | None = None
    """Values following the colon on the header line, if any."""
