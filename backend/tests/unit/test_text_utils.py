"""
Unit tests for text processing utilities.
"""

import pytest

from trainforge.utils.text_utils import (
    clean_text,
    extract_json_from_response,
    normalize_llm_json_response,
    truncate_text,
    unwrap_llm_single_object_response,
)


class TestCleanText:
    def test_normalizes_whitespace_and_lines(self):
        raw = "  Line one\t\twith tabs  \r\n\r\n\r\n\r\nLine\x00 two  "
        assert clean_text(raw) == "Line one with tabs\n\nLine two"

    def test_empty(self):
        assert clean_text("") == ""
        assert clean_text(None) == ""


class TestExtractJson:
    def test_raw_json(self):
        assert extract_json_from_response('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert extract_json_from_response('```json\n[1, 2]\n```') == [1, 2]

    def test_embedded_json(self):
        text = 'Sure! Here is the result: {"summary": "x"} Hope it helps.'
        assert extract_json_from_response(text) == {"summary": "x"}

    @pytest.mark.parametrize("text", ["", None, "no json here", "{broken: json"])
    def test_unparseable(self, text):
        assert extract_json_from_response(text) is None


class TestResponseShapes:
    def test_normalize_wraps_bare_list(self):
        assert normalize_llm_json_response([1], "questions") == {"questions": [1]}
        assert normalize_llm_json_response({"questions": []}, "questions") == {"questions": []}
        assert normalize_llm_json_response("text", "questions") == {}

    def test_unwrap_single_object(self):
        assert unwrap_llm_single_object_response([{"a": 1}, {"b": 2}]) == {"a": 1}
        assert unwrap_llm_single_object_response({"a": 1}) == {"a": 1}
        assert unwrap_llm_single_object_response([]) == {}
        assert unwrap_llm_single_object_response(None) == {}


class TestTruncate:
    def test_truncates_with_suffix(self):
        assert truncate_text("abcdef", 3) == "abc..."

    def test_short_text_unchanged(self):
        assert truncate_text("abc", 3) == "abc"
        assert truncate_text("", 3) == ""
