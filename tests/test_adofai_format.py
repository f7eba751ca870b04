"""
Tests for the canonical .adofai text generator.

The exact layout matters: files must diff cleanly against files written
by the game, so most tests compare whole strings.

Tests cover:
    - Scalar arrays on one line
    - Container arrays one element per line, each flattened
    - Root and nested object layout
    - Custom indent units
    - Idempotence through the parser
"""

import pytest
from adofai_core.backends import export_as_adofai, export_level, format_as_single_line
from adofai_core.config import FormatOptions
from adofai_core.examples import build_legacy_level, build_modern_level
from adofai_core.string_parser import parse


class TestArrayConvention:
    """Scalar arrays inline, container arrays split."""

    def test_scalar_array_inline(self):
        out = export_as_adofai({"a": [1, 2, 3]}, 0, True)
        assert '"a": [1,2,3]' in out
        assert out == '{\n\t"a": [1,2,3]\n}'

    def test_object_array_one_per_line(self):
        out = export_as_adofai({"a": [{"x": 1}, {"x": 2}]}, 0, True)
        assert out == '{\n\t"a": [\n\t\t{"x": 1},\n\t\t{"x": 2}\n\t]\n}'

    def test_mixed_array_splits(self):
        out = export_as_adofai([1, {"x": 1}], 0, False)
        assert out == '[\n\t1,\n\t{"x": 1}\n]'

    def test_empty_array(self):
        assert export_as_adofai({"a": []}, 0, True) == '{\n\t"a": []\n}'

    def test_nested_elements_flattened(self):
        event = {"floor": 2, "eventType": "MoveCamera", "position": [0, 2], "ease": {"k": [1]}}
        out = export_as_adofai({"actions": [event]}, 0, True)
        expected_line = '\t\t{"floor": 2, "eventType": "MoveCamera", "position": [0,2], "ease": {"k": [1]}}'
        assert out == '{\n\t"actions": [\n' + expected_line + "\n\t]\n}"


class TestObjects:
    """Root and nested object layout."""

    def test_nested_object_multiline(self):
        out = export_as_adofai({"settings": {"version": 15, "bpm": 100}}, 0, True)
        assert out == '{\n\t"settings": {\n\t\t"version": 15,\n\t\t"bpm": 100\n\t}\n}'

    def test_deep_nesting_indents(self):
        out = export_as_adofai({"a": {"b": {"c": 1}}}, 0, True)
        assert out == '{\n\t"a": {\n\t\t"b": {\n\t\t\t"c": 1\n\t\t}\n\t}\n}'

    def test_root_single_member_still_multiline(self):
        assert export_as_adofai({"k": 1}, 0, True) == '{\n\t"k": 1\n}'

    def test_empty_root(self):
        assert export_as_adofai({}, 0, True) == "{\n\n}"

    def test_scalars(self):
        assert export_as_adofai("a\"b") == '"a\\"b"'
        assert export_as_adofai(None) == "null"
        assert export_as_adofai(True) == "true"
        assert export_as_adofai(1.5) == "1.5"
        assert export_as_adofai(float("nan")) == "null"

    def test_non_ascii_kept_raw(self):
        assert export_as_adofai({"song": "曲"}, 0, True) == '{\n\t"song": "曲"\n}'


class TestIndentOptions:
    """indent_char / indent_step."""

    def test_spaces_and_step(self):
        out = export_as_adofai({"s": {"a": 1}, "l": [{"x": 1}]}, 0, True, " ", 2)
        assert out == '{\n  "s": {\n    "a": 1\n  },\n  "l": [\n    {"x": 1}\n  ]\n}'

    def test_export_level_uses_options(self):
        options = FormatOptions(indent_char="  ", indent_step=1)
        assert export_level({"a": {"b": 1}}, options) == '{\n  "a": {\n    "b": 1\n  }\n}'


class TestSingleLine:
    """format_as_single_line."""

    def test_object(self):
        assert format_as_single_line({"a": 1, "b": "x"}) == '{"a": 1, "b": "x"}'

    def test_array(self):
        assert format_as_single_line([1, [2, 3], {"a": None}]) == '[1,[2,3],{"a": null}]'

    def test_empty(self):
        assert format_as_single_line({}) == "{}"
        assert format_as_single_line([]) == "[]"


class TestIdempotence:
    """export(parse(export(v))) == export(v)."""

    @pytest.mark.parametrize("builder", [build_legacy_level, build_modern_level])
    def test_idempotent(self, builder):
        first = export_as_adofai(builder(), 0, True)
        second = export_as_adofai(parse(first), 0, True)
        assert second == first

    def test_negative_zero_idempotent(self):
        level = {"a": -0.0, "angleData": [-0.0, 15], "actions": [{"x": -0.0}]}
        first = export_as_adofai(level, 0, True)
        assert '"a": 0.0' in first
        assert export_as_adofai(parse(first), 0, True) == first

    def test_export_reparses_to_same_document(self):
        level = build_modern_level()
        assert parse(export_as_adofai(level, 0, True)) == level
