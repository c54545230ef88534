"""JSON rendering of decoded TOON values."""

import orjson

from .decode import decode
from .types import DecodeOptions, JsonValue


def to_json(value: JsonValue, pretty: bool = False) -> str:
    """
    Serialize a decoded value as JSON text.

    Args:
        value: A value produced by ``decode``.
        pretty: Indent with two spaces instead of emitting compact JSON.

    Returns:
        The JSON string.

    Raises:
        orjson.JSONEncodeError: If the value holds an integer wider than 64 bits.
    """
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(value, option=option).decode()


def decode_to_json(text: str, options: DecodeOptions | None = None) -> str:
    """Decode TOON text and render it as JSON, honoring ``options.pretty``."""
    opts = options or DecodeOptions()
    return to_json(decode(text, opts), pretty=opts.pretty)
