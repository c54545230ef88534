"""
toonify - TOON (Token-Oriented Object Notation) for Python

Encodes generic data trees to TOON, decodes TOON back to the JSON data
model, and validates documents for structural conformance.

Usage:
    import toonify

    # Encode Python data to TOON
    data = {"users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]}
    encoded = toonify.encode(data)

    # Decode TOON to Python data
    decoded = toonify.decode(encoded)

    # Collect every violation instead of stopping at the first
    errors = toonify.validate(text)

    # With options
    from toonify import EncodeOptions, DecodeOptions

    encoded = toonify.encode(data, EncodeOptions(delimiter="|", key_folding="safe"))
    decoded = toonify.decode(text, DecodeOptions(strict=False, expand_paths="safe"))
"""

__version__ = "0.1.0"

from .decode import decode, decode_lines
from .encode import encode, encode_lines
from .errors import (
    ArrayCountMismatchError,
    InvalidIndentationError,
    NestingDepthError,
    PathExpansionConflictError,
    RowArityError,
    ScalarParseError,
    StructuralParseError,
    ToonifyError,
    UnexpectedEndOfInputError,
)
from .render import decode_to_json, to_json
from .types import DecodeOptions, EncodeOptions, JsonValue, LineKind
from .validate import is_valid, validate, validate_lines

__all__ = [
    # Version
    "__version__",
    # Main API
    "encode",
    "encode_lines",
    "decode",
    "decode_lines",
    "validate",
    "validate_lines",
    "is_valid",
    "decode_to_json",
    "to_json",
    # Options
    "EncodeOptions",
    "DecodeOptions",
    # Types
    "JsonValue",
    "LineKind",
    # Errors
    "ToonifyError",
    "InvalidIndentationError",
    "ArrayCountMismatchError",
    "PathExpansionConflictError",
    "RowArityError",
    "ScalarParseError",
    "StructuralParseError",
    "UnexpectedEndOfInputError",
    "NestingDepthError",
]
