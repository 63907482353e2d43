"""
Unit tests for structured response parsing and block content normalization.
"""
import pytest

from slidethinker.services.thinking_agent.content import (
    UNSERIALIZABLE,
    AltContent,
    ItemListContent,
    RawJson,
    TextContent,
    UrlContent,
    block_content_text,
    classify_content,
)
from slidethinker.services.thinking_agent.parsing import get_int, get_str, get_str_list, parse_json


class TestParseJson:
    """Tests for parse_json."""

    def test_valid_object(self):
        assert parse_json('{"title": "Hello"}', {}) == {"title": "Hello"}

    @pytest.mark.parametrize("text", ["", "   ", '{"title": "Hel', "not json at all", "{'single': 1}"])
    def test_malformed_returns_fallback_object(self, text):
        """The exact fallback object comes back, not a copy."""
        fallback = {"score": 5}
        assert parse_json(text, fallback) is fallback

    def test_non_string_input(self):
        fallback = {"x": 1}
        assert parse_json(None, fallback) is fallback
        assert parse_json(42, fallback) is fallback

    def test_wrong_top_level_shape(self):
        """Valid JSON of the wrong shape is treated as a failure."""
        fallback = {"improvements": []}
        assert parse_json("[1, 2, 3]", fallback) is fallback
        assert parse_json('"just a string"', fallback) is fallback

        list_fallback = []
        assert parse_json('{"a": 1}', list_fallback) is list_fallback

    def test_deeply_nested_input_does_not_raise(self):
        fallback = {}
        assert parse_json("[" * 100000 + "]" * 100000, fallback) is fallback


class TestFieldHelpers:
    """Tests for the per-field defaulting helpers."""

    def test_get_str(self):
        data = {"title": "Deck", "empty": "  ", "number": 3}
        assert get_str(data, "title", "x") == "Deck"
        assert get_str(data, "empty", "x") == "x"
        assert get_str(data, "number", "x") == "x"
        assert get_str(data, "missing", "x") == "x"

    def test_get_str_list(self):
        data = {"items": ["a", None, {"k": 1}, 2], "bad": "a,b"}
        assert get_str_list(data, "items", []) == ["a", '{"k": 1}', "2"]
        assert get_str_list(data, "bad", ["default"]) == ["default"]

    def test_get_str_list_default_is_copied(self):
        default = ["x"]
        result = get_str_list({}, "missing", default)
        result.append("y")
        assert default == ["x"]

    def test_get_int(self):
        data = {"count": 4, "float": 3.7, "flag": True, "text": "5", "zero": 0}
        assert get_int(data, "count", 1) == 4
        assert get_int(data, "float", 1) == 3
        assert get_int(data, "flag", 1) == 1
        assert get_int(data, "text", 1) == 1
        assert get_int(data, "zero", 9) == 9
        assert get_int(data, "zero", 9, minimum=0) == 0

    def test_get_int_non_finite_uses_default(self):
        data = parse_json('{"inf": Infinity, "nan": NaN, "huge": 1e999, "neg": -Infinity}', {})
        assert get_int(data, "inf", 60) == 60
        assert get_int(data, "nan", 60) == 60
        assert get_int(data, "huge", 60) == 60
        assert get_int(data, "neg", 1, minimum=0) == 1


class TestBlockContent:
    """Tests for the block content tagged union."""

    def test_classify_variants(self):
        assert classify_content("hello") == TextContent("hello")
        assert classify_content(None) == TextContent("")
        assert classify_content(True) == TextContent("true")
        assert classify_content(2.5) == TextContent("2.5")
        assert classify_content({"text": "t"}) == TextContent("t")
        assert classify_content({"items": ["a", "b"]}) == ItemListContent(("a", "b"))
        assert classify_content({"url": "https://x"}) == UrlContent("https://x")
        assert classify_content({"alt": "diagram"}) == AltContent("diagram")
        assert isinstance(classify_content(["a", "b"]), RawJson)
        assert isinstance(classify_content({"other": 1}), RawJson)

    def test_text_rendering(self):
        assert block_content_text({"items": ["first", {"n": 1}]}) == 'first {"n": 1}'
        assert block_content_text(["a", "b"]) == '["a", "b"]'
        assert block_content_text({"other": 1}) == '{"other": 1}'
        assert block_content_text(False) == "false"

    def test_unserializable_values_never_raise(self):
        circular: dict = {}
        circular["self"] = circular
        assert block_content_text(circular) == UNSERIALIZABLE
        assert block_content_text(object()) == UNSERIALIZABLE
        assert block_content_text({1, 2}) == UNSERIALIZABLE
