# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for CollegeOS.

- logging: Structured logging with structlog
"""

from collegeos.utils.logging import (
    bind_context,
    clear_context,
    get_logger,
    log_context,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_context",
    "bind_context",
    "clear_context",
]
