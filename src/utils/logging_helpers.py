"""
Logging helper utilities for the image-sizes CLI.

Provides consistent formatting for multi-line errors and warnings on stderr.
"""

import logging
from typing import List, Optional


def log_section(
    level: int,
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60,
) -> None:
    """
    Log a titled block of messages between separator lines.

    Args:
        level: Logging level (e.g., logging.ERROR)
        title: First line of the block
        messages: Lines to display (empty strings give blank lines)
        logger: Logger instance (defaults to root logger if not provided)
        width: Width of separator line in characters
    """
    if logger is None:
        logger = logging.getLogger()

    separator = "=" * width
    logger.log(level, separator)
    logger.log(level, title)
    for message in messages:
        logger.log(level, message or "")
    logger.log(level, separator)


def log_error_section(
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60,
) -> None:
    """
    Log an error section with separator lines and multiple messages.

    Examples:
        >>> log_error_section(
        ...     "Cluster query failed.",
        ...     ["List pods failed: connection refused"]
        ... )
        ============================================================
        Cluster query failed.
        List pods failed: connection refused
        ============================================================
    """
    log_section(logging.ERROR, title, messages, logger=logger, width=width)


def log_warning_section(
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60,
) -> None:
    """Log a warning section with separator lines and multiple messages."""
    log_section(logging.WARNING, title, messages, logger=logger, width=width)
