# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment outcome schemas.

Results are returned to callers (HTTP handlers, importers, bulk drivers)
which map them onto their own response envelopes.
"""

from pydantic import BaseModel, Field


class EnrollmentDetails(BaseModel):
    """Who was enrolled and into what."""

    student_id: str = Field(description="Student the operation ran for")
    offerings_enrolled: list[str] = Field(
        default_factory=list,
        description="Descriptions of newly enrolled offerings, e.g. 'CS201 - Data Structures (Semester 2)'",
    )


class EnrollmentResult(BaseModel):
    """Outcome of one enrollment or promotion operation.

    Errors, warnings and informational messages share the errors list.
    An "already enrolled" message does not make the result unsuccessful.
    """

    success: bool = Field(default=False, description="Whether the operation completed")
    enrollments_created: int = Field(default=0, ge=0, description="New enrollment rows written")
    errors: list[str] = Field(
        default_factory=list,
        description="Human-readable errors, warnings and informational messages",
    )
    details: EnrollmentDetails
    academic_year_id: str | None = Field(
        default=None,
        description="Academic year the offerings were taken from, when one was resolved",
    )

    @classmethod
    def for_student(cls, student_id: str) -> "EnrollmentResult":
        """Create an empty, unsuccessful result for a student."""
        return cls(details=EnrollmentDetails(student_id=str(student_id)))

    def fail(self, message: str) -> "EnrollmentResult":
        """Record an error and mark the result unsuccessful."""
        self.success = False
        self.errors.append(message)
        return self


class BulkEnrollmentReport(BaseModel):
    """Aggregate outcome of a per-student operation run over many students."""

    total_students: int = Field(default=0, ge=0)
    successful: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    total_enrollments_created: int = Field(default=0, ge=0)
    results: list[EnrollmentResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[EnrollmentResult]) -> "BulkEnrollmentReport":
        """Aggregate individual student results."""
        successful = sum(1 for r in results if r.success)
        return cls(
            total_students=len(results),
            successful=successful,
            failed=len(results) - successful,
            total_enrollments_created=sum(r.enrollments_created for r in results),
            results=results,
        )
