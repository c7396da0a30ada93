# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for CollegeOS.

Settings are Pydantic-based and loaded from environment variables.

Example:
    >>> from collegeos.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.enrollment.bulk_concurrency
    10
"""

from collegeos.core.config.settings import (
    DatabaseSettings,
    EnrollmentSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "EnrollmentSettings",
]
