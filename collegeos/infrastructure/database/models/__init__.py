# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the college database."""

from collegeos.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDMixin,
    generate_uuid,
)
from collegeos.infrastructure.database.models.college import (
    AcademicYear,
    College,
    Department,
    Section,
    Teacher,
)
from collegeos.infrastructure.database.models.curriculum import (
    Course,
    CourseOffering,
    CourseType,
)
from collegeos.infrastructure.database.models.student import (
    Student,
    StudentEnrollment,
)

__all__ = [
    "AcademicYear",
    "Base",
    "College",
    "Course",
    "CourseOffering",
    "CourseType",
    "Department",
    "Section",
    "Student",
    "StudentEnrollment",
    "Teacher",
    "TimestampMixin",
    "UUIDMixin",
    "generate_uuid",
]
