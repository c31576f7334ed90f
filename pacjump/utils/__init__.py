"""
Utility helpers for pacjump.

This package provides reusable utilities used across pacjump:

- Console output helpers (Rich-based, stderr only)
- Logging configuration and retrieval

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from pacjump.utils.logger import get_logger, setup_logging

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from pacjump.utils.console import (
    print_error,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_warning",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
]
