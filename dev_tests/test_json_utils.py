"""
Tests for json_utils.py - orjson wrapper.
"""

import pytest
import json_utils as json


class TestDumps:
    def test_compact_by_default(self):
        assert json.dumps(["Words", {"ReadingTime": 275}]) == '["Words",{"ReadingTime":275}]'

    def test_returns_str(self):
        assert isinstance(json.dumps({}), str)

    def test_sort_keys(self):
        assert json.dumps({"b": 1, "a": 2}, sort_keys=True) == '{"a":2,"b":1}'

    def test_indent_pretty_prints(self):
        assert json.dumps({"a": 1}, indent=2) == '{\n  "a": 1\n}'

    def test_unicode_is_not_escaped(self):
        assert json.dumps("café") == '"café"'


class TestLoads:
    def test_str_and_bytes(self):
        assert json.loads('{"a": 1}') == {"a": 1}
        assert json.loads(b"[1, 2]") == [1, 2]

    def test_invalid_raises_decode_error(self):
        with pytest.raises(json.JSONDecodeError):
            json.loads("{broken")

    def test_decode_error_is_a_value_error(self):
        assert issubclass(json.JSONDecodeError, ValueError)
