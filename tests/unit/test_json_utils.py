"""
Unit tests for contact_finder/common/json_utils.py

Tests robust JSON parsing for provider outputs including:
- Valid JSON parsing
- Markdown code block extraction
- First-object extraction from surrounding prose
- Single quote / trailing comma repair
- Error handling for invalid inputs
"""

import pytest

from contact_finder.common.json_utils import (
    decode_json_object,
    find_first_object_block,
    parse_llm_json,
    strip_markdown_blocks,
)


# ===== TESTS: Valid JSON Parsing =====

class TestValidJsonParsing:
    """Tests for parsing valid, well-formed JSON."""

    def test_parses_simple_json(self):
        """Should parse simple valid JSON."""
        assert parse_llm_json('{"leaders": []}') == {"leaders": []}

    def test_parses_nested_people(self):
        """Should parse a people array with nested objects."""
        text = '{"leaders": [{"name": "Jane Smith", "role": "CEO"}]}'
        result = parse_llm_json(text)
        assert result["leaders"][0]["name"] == "Jane Smith"
        assert result["leaders"][0]["role"] == "CEO"

    def test_handles_unicode(self):
        """Should handle unicode escapes and literal accents."""
        result = parse_llm_json('{"name": "Jos\\u00e9 Núñez"}')
        assert result["name"] == "José Núñez"


# ===== TESTS: Markdown Code Block Extraction =====

class TestMarkdownExtraction:
    """Tests for stripping markdown code fences."""

    def test_strips_json_fence(self):
        """Should strip ```json ... ``` wrapper."""
        assert strip_markdown_blocks('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_plain_fence(self):
        """Should strip ``` ... ``` wrapper without a language."""
        assert strip_markdown_blocks('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_leaves_plain_text_alone(self):
        """Should only trim whitespace from unfenced text."""
        assert strip_markdown_blocks('  {"a": 1}  ') == '{"a": 1}'

    def test_parses_fenced_response(self):
        """Should parse a fenced provider answer."""
        assert parse_llm_json('```json\n{"managers": []}\n```') == {"managers": []}


# ===== TESTS: First Object Extraction =====

class TestFirstObjectBlock:
    """Tests for locating the first balanced object in free text."""

    def test_returns_none_without_brace(self):
        """Should return None when there is no opening brace."""
        assert find_first_object_block("no json here") is None

    def test_skips_leading_prose(self):
        """Should ignore text before the object."""
        assert find_first_object_block('Sure! {"a": 1} done') == '{"a": 1}'

    def test_stops_at_first_balanced_object(self):
        """Should not include a second object."""
        text = '{"a": {"b": 2}} and then {"c": 3}'
        assert find_first_object_block(text) == '{"a": {"b": 2}}'

    def test_ignores_braces_inside_strings(self):
        """Braces within string literals do not affect balance."""
        text = 'x {"a": "}{", "b": "\\"}"} y'
        assert find_first_object_block(text) == '{"a": "}{", "b": "\\"}"}'

    def test_unclosed_object_returns_remainder(self):
        """An unclosed object yields the rest of the text for repair."""
        assert find_first_object_block('lead {"a": [1, 2') == '{"a": [1, 2'


# ===== TESTS: Repair =====

class TestJsonRepair:
    """Tests for the json-repair fallback."""

    def test_repairs_single_quotes(self):
        """Should repair single-quoted keys and values."""
        result = parse_llm_json("{'leaders': [{'name': 'Jane Smith', 'role': 'CEO'}]}")
        assert result["leaders"][0]["name"] == "Jane Smith"

    def test_repairs_trailing_comma(self):
        """Should repair a trailing comma."""
        assert parse_llm_json('Here you go: {"leaders": [],}') == {"leaders": []}

    def test_repairs_truncated_object(self):
        """Should close a truncated array and object."""
        result = parse_llm_json('{"leaders": [{"name": "Jane Smith", "role": "CEO"}')
        assert result["leaders"][0]["role"] == "CEO"

    def test_decode_prefers_strict_json(self):
        """Valid JSON never goes through repair."""
        assert decode_json_object('{"a": [1, 2]}') == {"a": [1, 2]}


# ===== TESTS: Error Handling =====

class TestErrorHandling:
    """Tests for inputs that cannot produce an object."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input_raises(self, text):
        """Should raise ValueError for blank input."""
        with pytest.raises(ValueError, match="Empty input"):
            parse_llm_json(text)

    def test_no_object_raises(self):
        """Should raise ValueError when the text holds no object."""
        with pytest.raises(ValueError, match="No JSON object"):
            parse_llm_json("I could not find anyone at that company.")
