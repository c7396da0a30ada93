# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic schemas returned by the enrollment engine."""

from collegeos.models.enrollment import (
    BulkEnrollmentReport,
    EnrollmentDetails,
    EnrollmentResult,
)
from collegeos.models.offering import (
    NOT_ASSIGNED,
    OfferingSummary,
    SemesterCourseGrouping,
    SemesterSummary,
)

__all__ = [
    "BulkEnrollmentReport",
    "EnrollmentDetails",
    "EnrollmentResult",
    "NOT_ASSIGNED",
    "OfferingSummary",
    "SemesterCourseGrouping",
    "SemesterSummary",
]
