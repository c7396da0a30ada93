# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package writes student enrollments without ever duplicating a
(student, offering) pair.
"""

from collegeos.domains.enrollment.service import (
    FIRST_ATTEMPT,
    EnrollmentWriter,
    already_enrolled_message,
)

__all__ = [
    "FIRST_ATTEMPT",
    "EnrollmentWriter",
    "already_enrolled_message",
]
