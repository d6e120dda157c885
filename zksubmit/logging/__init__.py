"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from zksubmit.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("submission_attempt", iteration=1, attempt=2)
"""

from zksubmit.logging.logger import (
    bind_context,
    clear_context,
    get_logger,
    register_secret,
    setup_logging,
)


__all__ = [
    "get_logger",
    "register_secret",
    "setup_logging",
    "bind_context",
    "clear_context",
]
