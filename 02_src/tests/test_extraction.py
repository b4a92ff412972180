"""Tests for extract_text."""

from types import SimpleNamespace

import pytest

from convo.llm import extract_text


class TestExtractText:
    """Tests for response text extraction."""

    def test_flat_output_text(self):
        """Test the flat convenience field."""
        assert extract_text({"output_text": "  Hello  "}) == "Hello"

    def test_nested_output_items(self):
        """Test that nested content parts are concatenated in order."""
        response = {
            "output": [
                {"type": "reasoning", "content": []},
                {
                    "type": "message",
                    "content": [
                        {"type": "output_text", "text": "Line one"},
                        {"type": "output_text", "text": "Line two"},
                    ],
                },
            ]
        }
        assert extract_text(response) == "Line one\nLine two"

    def test_flat_wins_over_nested(self):
        """Test that output_text is preferred when present."""
        response = {"output_text": "flat", "output": [{"content": [{"text": "nested"}]}]}
        assert extract_text(response) == "flat"

    def test_top_level_content_blocks(self):
        """Test message-style responses with content blocks."""
        response = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="Claude says hi")]
        )
        assert extract_text(response) == "Claude says hi"

    def test_plain_string(self):
        """Test that a bare string is returned trimmed."""
        assert extract_text(" ok ") == "ok"

    @pytest.mark.parametrize(
        "response",
        [None, {}, {"output": "oops"}, {"output": [{"content": [{"text": 5}]}]}, 42],
    )
    def test_unknown_shapes_yield_empty(self, response):
        """Test that unrecognized shapes produce an empty string."""
        assert extract_text(response) == ""
