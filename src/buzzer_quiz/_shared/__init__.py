# Area: Shared
"""
Shared utilities used by the timer, engine and game layers.

This package contains:
- Logging configuration
- Fatal error reporting
"""

from .logging_config import (
    setup_logging,
    log_fatal_error,
    TerminalFormatter,
    JSONFormatter,
)

__all__ = [
    "setup_logging",
    "log_fatal_error",
    "TerminalFormatter",
    "JSONFormatter",
]
