# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering read schemas for catalog views."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collegeos.infrastructure.database.models import CourseOffering

NOT_ASSIGNED = "Not assigned"


class OfferingSummary(BaseModel):
    """Flattened view of one course offering."""

    offering_id: str
    course_id: str
    course_code: str
    course_name: str
    semester: int
    has_theory: bool = True
    has_lab: bool = False
    teacher: str = NOT_ASSIGNED
    section: str = NOT_ASSIGNED

    @classmethod
    def from_offering(cls, offering: "CourseOffering") -> "OfferingSummary":
        """Build a summary from an offering with course, section and teacher loaded."""
        return cls(
            offering_id=offering.id,
            course_id=offering.course_id,
            course_code=offering.course.code,
            course_name=offering.course.name,
            semester=offering.semester,
            has_theory=bool(offering.course.has_theory_component),
            has_lab=bool(offering.course.has_lab_component),
            teacher=offering.teacher.name if offering.teacher else NOT_ASSIGNED,
            section=offering.section.name if offering.section else NOT_ASSIGNED,
        )


class SemesterSummary(BaseModel):
    """Per-semester counts of a grouping."""

    semester: int
    course_count: int
    courses: list[OfferingSummary]


class SemesterCourseGrouping(BaseModel):
    """Offerings of a department's core courses grouped by semester."""

    college_id: str
    department_id: str
    academic_year_id: str | None = None
    by_semester: dict[int, list[OfferingSummary]] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)

    @property
    def total_semesters(self) -> int:
        """Number of semesters with at least one offering."""
        return len(self.by_semester)

    def summary(self) -> list[SemesterSummary]:
        """Per-semester summary sorted by semester ascending."""
        return [
            SemesterSummary(semester=semester, course_count=len(courses), courses=courses)
            for semester, courses in sorted(self.by_semester.items())
        ]
