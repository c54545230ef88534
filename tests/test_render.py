"""Tests for JSON rendering."""

import sys
from pathlib import Path

import orjson
import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toonify import DecodeOptions, RowArityError, decode_to_json, to_json


class TestToJson:
    """Test value serialization."""

    def test_compact(self):
        assert to_json({"a": [1, None, True]}) == '{"a":[1,null,true]}'

    def test_pretty(self):
        assert to_json({"a": 1}, pretty=True) == '{\n  "a": 1\n}'

    def test_key_order(self):
        assert to_json({"z": 1, "a": 2}) == '{"z":1,"a":2}'


class TestDecodeToJson:
    """Test decoding straight to JSON."""

    def test_tabular(self):
        toon = "users[2]{id,name}:\n  1,Alice\n  2,Bob"
        result = decode_to_json(toon)
        assert orjson.loads(result) == {
            "users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
        }
        assert "\n" not in result

    def test_pretty_option(self):
        result = decode_to_json("a: 1", DecodeOptions(pretty=True))
        assert result == '{\n  "a": 1\n}'

    def test_empty_document(self):
        assert decode_to_json("") == "{}"

    def test_errors_propagate(self):
        with pytest.raises(RowArityError):
            decode_to_json("rows[1]{x,y}:\n  1")
