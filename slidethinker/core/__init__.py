"""Core configuration module for SlideThinker."""

from .config import Settings, get_settings
from .errors import (
    ModelGatewayError,
    SearchProviderError,
    SlideThinkerError,
    ThinkingCancelledError,
    ThinkingInvariantError,
)
from .logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "SlideThinkerError",
    "ModelGatewayError",
    "SearchProviderError",
    "ThinkingInvariantError",
    "ThinkingCancelledError",
]
