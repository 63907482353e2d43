"""
Block content as a closed tagged union.

A block's ``content`` arrives from the model as a string, a number, a list or
one of several object shapes. ``classify_content`` maps any value onto one of
five variants and ``block_content_text`` turns a variant into a display
string. Both are total: neither raises on any input.
"""
import json
from dataclasses import dataclass
from typing import Any, Union

UNSERIALIZABLE = "[unserializable object]"


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ItemListContent:
    items: tuple[Any, ...]


@dataclass(frozen=True)
class UrlContent:
    url: str


@dataclass(frozen=True)
class AltContent:
    alt: str


@dataclass(frozen=True)
class RawJson:
    value: Any


BlockContent = Union[TextContent, ItemListContent, UrlContent, AltContent, RawJson]


def classify_content(content: Any) -> BlockContent:
    """Map arbitrary block content onto a tagged variant."""
    if content is None:
        return TextContent("")
    if isinstance(content, str):
        return TextContent(content)
    if isinstance(content, bool):
        return TextContent("true" if content else "false")
    if isinstance(content, (int, float)):
        return TextContent(str(content))
    if isinstance(content, dict):
        if isinstance(content.get("text"), str):
            return TextContent(content["text"])
        if isinstance(content.get("items"), list):
            return ItemListContent(tuple(content["items"]))
        if isinstance(content.get("url"), str):
            return UrlContent(content["url"])
        if isinstance(content.get("alt"), str):
            return AltContent(content["alt"])
    return RawJson(content)


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return UNSERIALIZABLE


def render_content(content: BlockContent) -> str:
    """Render a classified variant as a single display string."""
    if isinstance(content, TextContent):
        return content.text
    if isinstance(content, ItemListContent):
        return " ".join(item if isinstance(item, str) else _dump(item) for item in content.items)
    if isinstance(content, UrlContent):
        return content.url
    if isinstance(content, AltContent):
        return content.alt
    return _dump(content.value)


def block_content_text(content: Any) -> str:
    """Normalize any block content to display text. Never raises."""
    return render_content(classify_content(content))
