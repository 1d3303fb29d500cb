"""
Unit tests for src/common/json_utils.py
"""

import pytest

from src.common.json_utils import parse_llm_json


class TestParseLlmJson:
    def test_plain_object(self):
        assert parse_llm_json('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        assert parse_llm_json('```json\n{"subject": "Hi"}\n```') == {"subject": "Hi"}

    def test_surrounding_prose(self):
        text = 'Here you go:\n{"message": "Hello"}\nLet me know!'
        assert parse_llm_json(text) == {"message": "Hello"}

    def test_trailing_comma_repaired(self):
        assert parse_llm_json('{"tips": ["a", "b",],}') == {"tips": ["a", "b"]}

    def test_nested_objects(self):
        text = '{"summary": {"totalContacts": 2}, "recommendations": []}'
        assert parse_llm_json(text)["summary"] == {"totalContacts": 2}

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input(self, text):
        with pytest.raises(ValueError, match="Empty input"):
            parse_llm_json(text)

    def test_no_object(self):
        with pytest.raises(ValueError, match="No JSON object"):
            parse_llm_json("I cannot help with that.")
