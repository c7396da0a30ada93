# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic year domain package.

This package resolves the active academic calendar of a college.
"""

from collegeos.domains.academic_year.service import AcademicCalendarResolver

__all__ = [
    "AcademicCalendarResolver",
]
