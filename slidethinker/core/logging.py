"""Logging configuration for SlideThinker."""
import logging
import sys
from typing import TextIO, Optional, Union

NOISY_LOGGERS = ("azure", "httpx", "agent_framework", "aiohttp")


def setup_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """
    Configure application logging.
    
    Args:
        level: Logging level as an int or a level name (default: INFO)
        stream: Output stream (default: stdout)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(stream or sys.stdout)
        ]
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        Logger instance
    """
    return logging.getLogger(name)
