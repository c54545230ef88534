"""Tests for TOON encoder."""

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toonify import EncodeOptions, NestingDepthError, encode, encode_lines

FOLD = EncodeOptions(key_folding="safe")


def lines_of(value, options=None):
    return encode(value, options).split("\n")


class TestRootScalars:
    """A scalar at the root is a single canonical token."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "null"),
            (False, "false"),
            (-17, "-17"),
            (-0.0, "0"),
            (1.0, "1"),
            (1e-7, "0.0000001"),
            (1.5e20, "150000000000000000000"),
            (1e23, "99999999999999991611392"),
            (float("-inf"), "null"),
            (Decimal("2.50"), "2.5"),
            ("hello world", "hello world"),
            ("key: value", '"key: value"'),
            ("-item", '"-item"'),
            ("007", '"007"'),
            ("false", '"false"'),
            (" padded ", '" padded "'),
            ("", '""'),
        ],
    )
    def test_token(self, value, expected):
        assert encode(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("a\nb", '"a\\nb"'),
            ("a\rb", '"a\\rb"'),
            ("a\tb", '"a\\tb"'),
            ("C:\\dir", '"C:\\\\dir"'),
            ('say "hi"', '"say \\"hi\\""'),
        ],
    )
    def test_escapes(self, value, expected):
        assert encode(value) == expected

    def test_escaped_output_is_one_line(self):
        result = encode({"code": "def f():\n    return 1\n"})
        assert result == 'code: "def f():\\n    return 1\\n"'


class TestObjects:
    """Test encoding of objects."""

    def test_fields_in_insertion_order(self):
        assert lines_of({"z": 1, "a": "x", "m": None}) == ["z: 1", "a: x", "m: null"]

    def test_nested(self):
        assert lines_of({"user": {"id": 3, "tags": {"admin": True}}}) == [
            "user:",
            "  id: 3",
            "  tags:",
            "    admin: true",
        ]

    def test_empty_root_and_nested(self):
        assert encode({}) == ""
        assert encode({"data": {}}) == "data:"

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("key with spaces", '"key with spaces": 1'),
            ("1", '"1": 1'),
            ("a-b", '"a-b": 1'),
            ("x.y", "x.y: 1"),
            ("_private", "_private: 1"),
        ],
    )
    def test_key_quoting(self, key, expected):
        assert encode({key: 1}) == expected

    def test_value_with_active_delimiter_quoted(self):
        assert encode({"note": "a,b"}) == 'note: "a,b"'


class TestArrayForms:
    """Each array picks exactly one of the inline, tabular and list forms."""

    def test_inline_primitives(self):
        assert encode({"mix": [1, "two", True, None, 2.5]}) == "mix[5]: 1,two,true,null,2.5"

    def test_inline_empty(self):
        assert encode({"items": []}) == "items[0]:"

    def test_tabular(self):
        value = {"users": [{"id": 1, "name": "Ann"}, {"id": 2, "name": "a,b"}]}
        assert lines_of(value) == ["users[2]{id,name}:", "  1,Ann", '  2,"a,b"']

    def test_tabular_needs_same_key_order(self):
        assert lines_of({"rows": [{"a": 1, "b": 2}, {"b": 3, "a": 4}]}) == [
            "rows[2]:",
            "  - a: 1",
            "    b: 2",
            "  - b: 3",
            "    a: 4",
        ]

    def test_tabular_needs_same_keys(self):
        assert lines_of({"rows": [{"a": 1}, {"b": 2}]}) == ["rows[2]:", "  - a: 1", "  - b: 2"]

    def test_tabular_needs_scalar_cells(self):
        assert lines_of({"rows": [{"a": [1]}, {"a": [2]}]}) == [
            "rows[2]:",
            "  - a[1]: 1",
            "  - a[1]: 2",
        ]

    def test_arrays_of_arrays(self):
        assert lines_of({"matrix": [[1, 2], [], [[3]]]}) == [
            "matrix[3]:",
            "  - [2]: 1,2",
            "  - [0]:",
            "  - [1]:",
            "    - [1]: 3",
        ]


class TestListItems:
    """Layout of objects inside list arrays."""

    def test_scalars_and_objects(self):
        assert lines_of({"items": [1, {"x": 2, "y": 3}, "three"]}) == [
            "items[3]:",
            "  - 1",
            "  - x: 2",
            "    y: 3",
            "  - three",
        ]

    def test_empty_object(self):
        assert lines_of({"items": [{}, 1]}) == ["items[2]:", "  -", "  - 1"]

    def test_object_first_field(self):
        value = {"items": [{"meta": {"a": 1}, "name": "n"}, {"meta": {"a": 2}}]}
        assert lines_of(value) == [
            "items[2]:",
            "  - meta:",
            "      a: 1",
            "    name: n",
            "  - meta:",
            "      a: 2",
        ]

    def test_tabular_first_field(self):
        value = {"items": [{"rows": [{"a": 1}, {"a": 2}], "name": "x"}, 5]}
        assert lines_of(value) == [
            "items[2]:",
            "  - rows[2]{a}:",
            "    1",
            "    2",
            "    name: x",
            "  - 5",
        ]


class TestRootArray:
    """Test root-level array encoding."""

    def test_forms(self):
        assert encode([1, 2]) == "[2]: 1,2"
        assert encode([]) == "[0]:"
        assert lines_of([{"a": 1}, {"a": 2}]) == ["[2]{a}:", "  1", "  2"]

    def test_list_form(self):
        assert lines_of([{"a": {"b": 1}}, "s"]) == ["[2]:", "  - a:", "      b: 1", "  - s"]


class TestKeyFolding:
    """Test key folding (dotted paths)."""

    def test_off_by_default(self):
        assert lines_of({"a": {"b": {"c": 1}}}) == ["a:", "  b:", "    c: 1"]

    def test_full_chain(self):
        assert encode({"a": {"b": {"c": 1}}}, FOLD) == "a.b.c: 1"

    def test_stops_at_multiple_keys(self):
        assert lines_of({"a": {"b": {"c": 1, "d": 2}}}, FOLD) == ["a.b:", "  c: 1", "  d: 2"]

    def test_into_array(self):
        assert encode({"a": {"tags": [1, 2]}}, FOLD) == "a.tags[2]: 1,2"

    def test_flatten_depth_limits_segments(self):
        value = {"a": {"b": {"c": {"d": 1}}}}
        result = lines_of(value, EncodeOptions(key_folding="safe", flatten_depth=2))
        assert result == ["a.b:", "  c.d: 1"]

    def test_flatten_depth_one_disables_folding(self):
        result = lines_of({"a": {"b": 1}}, EncodeOptions(key_folding="safe", flatten_depth=1))
        assert result == ["a:", "  b: 1"]

    def test_non_identifier_segment_stops_folding(self):
        assert lines_of({"a": {"b-c": 1}}, FOLD) == ["a:", '  "b-c": 1']

    def test_collision_with_sibling_skips_fold(self):
        result = lines_of({"a": {"b": 1}, "a.b": 2}, FOLD)
        assert result == ["a:", "  b: 1", '"a.b": 2']

    def test_literal_dotted_key_quoted(self):
        assert encode({"x.y": 1}, FOLD) == '"x.y": 1'

    def test_in_list_items(self):
        result = lines_of({"items": [{"a": {"b": 1}, "c": {"d": 2}}]}, FOLD)
        assert result == ["items[1]:", "  - a.b: 1", "    c.d: 2"]


class TestDelimiters:
    """Test delimiter options."""

    @pytest.mark.parametrize(
        ("delimiter", "expected"),
        [
            ("\t", "items[3\t]: 1\t2\t3"),
            ("|", "items[3|]: 1|2|3"),
            ("pipe", "items[3|]: 1|2|3"),
            ("tab", "items[3\t]: 1\t2\t3"),
            ("comma", "items[3]: 1,2,3"),
        ],
    )
    def test_inline(self, delimiter, expected):
        assert encode({"items": [1, 2, 3]}, EncodeOptions(delimiter=delimiter)) == expected

    def test_only_active_delimiter_quoted(self):
        result = encode({"items": ["a,b", "c|d"]}, EncodeOptions(delimiter="|"))
        assert result == 'items[2|]: a,b|"c|d"'

    def test_tabular_fields_use_delimiter(self):
        result = lines_of({"rows": [{"a": 1, "b": 2}]}, EncodeOptions(delimiter="|"))
        assert result == ["rows[1|]{a|b}:", "  1|2"]


class TestIndentation:
    """Test indentation options."""

    def test_custom_indent(self):
        value = {"a": {"b": 1}, "l": [{"c": {"d": 2}}]}
        assert lines_of(value, EncodeOptions(indent=4)) == [
            "a:",
            "    b: 1",
            "l[1]:",
            "    - c:",
            "            d: 2",
        ]


class TestOptions:
    """Test option validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"indent": 0},
            {"indent": True},
            {"key_folding": "aggressive"},
            {"flatten_depth": 0},
            {"max_depth": -1},
        ],
    )
    def test_rejected(self, kwargs):
        with pytest.raises(ValueError):
            EncodeOptions(**kwargs)

    @pytest.mark.parametrize("delimiter", [";", "", None, 1])
    def test_rejected_delimiter(self, delimiter):
        with pytest.raises(ValueError, match="delimiter"):
            EncodeOptions(delimiter=delimiter)


class TestHostValues:
    """Host values are normalized before encoding."""

    def test_containers_and_dates(self):
        value = {"t": (1, 2), "s": {3, 1}, "d": date(2024, 1, 15), "n": float("nan")}
        assert lines_of(value) == ["t[2]: 1,2", "s[2]: 1,3", "d: 2024-01-15", "n: null"]

    def test_nesting_guard(self):
        value: dict = {}
        node = value
        for _ in range(10):
            node["k"] = {}
            node = node["k"]
        with pytest.raises(NestingDepthError):
            encode(value, EncodeOptions(max_depth=5))


class TestEncodeLines:
    """Test the line generator."""

    def test_yields_lines(self):
        lines = encode_lines({"a": 1, "b": [1, 2]})
        assert next(lines) == "a: 1"
        assert list(lines) == ["b[2]: 1,2"]
