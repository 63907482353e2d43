"""Structured response parsing with a guaranteed-safe fallback."""
import json
import logging
import math
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

PREVIEW_LENGTH = 120


def parse_json(text: Any, fallback: T) -> T:
    """
    Decode model output as JSON, returning ``fallback`` on any failure.
    
    A decoded value whose top-level container differs from the fallback's
    (a list where an object was expected, and so on) also yields the
    fallback. Never raises.
    
    Args:
        text: Raw model output
        fallback: Value returned unchanged when decoding fails
        
    Returns:
        The decoded value or the fallback object itself
    """
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        preview = text[:PREVIEW_LENGTH] if isinstance(text, str) else type(text).__name__
        logger.warning("Failed to parse AI response, using fallback (%s): %r", e, preview)
        return fallback

    if isinstance(fallback, dict) and not isinstance(parsed, dict):
        logger.warning("AI response was %s, expected an object; using fallback", type(parsed).__name__)
        return fallback
    if isinstance(fallback, list) and not isinstance(parsed, list):
        logger.warning("AI response was %s, expected an array; using fallback", type(parsed).__name__)
        return fallback
    return parsed


def get_str(data: dict, key: str, default: str) -> str:
    """Read a non-empty string field, else the default."""
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return default


def get_str_list(data: dict, key: str, default: list[str]) -> list[str]:
    """Read a list of strings, dropping non-string items; default when absent or not a list."""
    value = data.get(key)
    if not isinstance(value, list):
        return list(default)
    return [item if isinstance(item, str) else json.dumps(item) for item in value if item is not None]


def get_int(data: dict, key: str, default: int, minimum: int = 1) -> int:
    """Read an integer field; bools, junk, non-finite numbers and values below minimum fall back to the default."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    number = int(value)
    return number if number >= minimum else default
