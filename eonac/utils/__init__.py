"""Shared utilities for EONAC."""

from eonac.utils.logging_config import (
    LoggerAdapter,
    configure_solve_logging,
    get_logger,
    setup_logger,
)

__all__ = [
    "LoggerAdapter",
    "configure_solve_logging",
    "get_logger",
    "setup_logger",
]
