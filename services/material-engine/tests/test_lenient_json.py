"""
Unit Tests for lenient JSON decoding of model replies
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.lenient_json import (
    JSONExtractionError,
    as_number,
    as_str_list,
    extract_json_object,
    get_text,
    parse_json_object,
)


class TestExtraction:

    def test_object_surrounded_by_prose(self):
        text = 'Zde je výsledek: {"title": "Zlomky"} Doufám, že pomůže.'
        assert extract_json_object(text) == '{"title": "Zlomky"}'

    def test_braces_inside_strings_are_ignored(self):
        text = '{"hint": "použij {závorky}", "n": 1} {"second": true}'
        assert extract_json_object(text) == '{"hint": "použij {závorky}", "n": 1}'

    def test_no_object(self):
        with pytest.raises(JSONExtractionError):
            extract_json_object("Bez JSONu")

    def test_unbalanced_prefix_is_skipped(self):
        assert extract_json_object('{ nedokončeno {"a": 1}') == '{"a": 1}'


class TestParsing:

    def test_markdown_fence(self):
        text = '```json\n{"title": "Kvíz", "questions": []}\n```'
        assert parse_json_object(text) == {"title": "Kvíz", "questions": []}

    def test_trailing_commas_and_python_literals(self):
        text = '{"include_answers": True, "items": [1, 2,], "note": None,}'
        assert parse_json_object(text) == {"include_answers": True, "items": [1, 2], "note": None}

    def test_unrepairable(self):
        with pytest.raises(JSONExtractionError) as exc_info:
            parse_json_object('{"title": "chybí uvozovka}')
        assert exc_info.value.original_content == '{"title": "chybí uvozovka}'

    def test_non_text(self):
        with pytest.raises(JSONExtractionError):
            parse_json_object(None)


class TestCoercion:

    def test_as_str_list_drops_non_strings(self):
        assert as_str_list(["  zlomky ", 3, "", None, "sčítání"]) == ["zlomky", "sčítání"]
        assert as_str_list("zlomky") == []

    def test_as_number_rejects_bool(self):
        assert as_number(True, 0.7) == 0.7
        assert as_number("0.9", 0.7) == 0.7
        assert as_number(1, 0.7) == 1.0

    def test_get_text_first_non_empty(self):
        assert get_text({"question": "", "problem": "Kolik je 2 + 2?"}, "question", "problem") == "Kolik je 2 + 2?"
        assert get_text("not a dict", "question") == ""
