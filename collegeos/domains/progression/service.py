# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progression controller for semester enrollment and promotion.

This module provides the ProgressionController class for:
- Enrolling a student in the core offerings of a semester
- First-year enrollment (semester 1)
- Enrollment for the student's current semester
- Promotion to the next semester followed by enrollment

Every operation returns an EnrollmentResult. Missing data and storage
failures are reported inside the result; callers never receive an
exception from these operations.

Promotion is not transactional with enrollment: the semester counter is
committed first and stays advanced even if the new semester has no
offerings yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from collegeos.core.config import get_settings
from collegeos.domains.academic_year.service import AcademicCalendarResolver
from collegeos.domains.curriculum.lookup import CoreCurriculumLookup
from collegeos.domains.enrollment.service import EnrollmentWriter
from collegeos.domains.offering.locator import OfferingLocator
from collegeos.infrastructure.database.connection import DatabaseError
from collegeos.infrastructure.database.store import AcademicStore
from collegeos.models.enrollment import EnrollmentResult
from collegeos.utils.logging import get_logger

if TYPE_CHECKING:
    from collegeos.core.config.settings import Settings

logger = get_logger(__name__)

DEFAULT_SEMESTER = 1
FIRST_SEMESTER = 1


def no_offerings_message(semester: int) -> str:
    """Error reported when no active year has offerings for a semester."""
    return (
        f"No course offerings found for semester {semester} courses in the "
        "student's department across any active academic year"
    )


def promotion_message(from_semester: int, to_semester: int) -> str:
    """Message prepended to the result of a promotion."""
    return f"Student promoted from semester {from_semester} to semester {to_semester}"


class ProgressionController:
    """Orchestrates semester enrollment and promotion for one student.

    Attributes:
        store: Academic data store.
        settings: Application settings.
    """

    def __init__(self, store: AcademicStore, settings: Settings | None = None) -> None:
        """Initialize the controller.

        Args:
            store: Academic data store for this unit of work.
            settings: Application settings. Defaults to get_settings().
        """
        self.store = store
        self.settings = settings or get_settings()
        self.calendar = AcademicCalendarResolver(store)
        self.curriculum = CoreCurriculumLookup(store)
        self.locator = OfferingLocator(store)
        self.writer = EnrollmentWriter(store)

    async def enroll_for_semester(self, student_id: str, semester: int) -> EnrollmentResult:
        """Enroll a student in the core course offerings of a semester.

        Resolves the student, their department, the active academic years
        and the department's core courses, locates the offerings of the first
        active year that has any for the semester (restricted to the
        student's section if they have one), and enrolls the student in
        those they are not enrolled in yet.

        Args:
            student_id: Student identifier.
            semester: Semester number (1 or greater).

        Returns:
            Enrollment result. Unsuccessful when the student or their
            department is missing, no academic year is active, the
            department has no core courses, or no offerings exist.
        """
        result = EnrollmentResult.for_student(student_id)

        if semester < 1:
            return result.fail(f"Invalid semester: {semester}")

        try:
            student = await self.store.get_student(student_id)
            if student is None:
                return result.fail("Student not found")

            if not student.department_id:
                return result.fail("Student is not assigned to a department")

            department = await self.store.get_department(student.department_id)
            if department is None:
                return result.fail("Department not found")

            years = await self.calendar.active_years(student.college_id)
            if not years:
                logger.warning(
                    "no_active_academic_year",
                    student_id=student_id,
                    college_id=student.college_id,
                )
                return result.fail("No active academic year found for the college")

            courses = await self.curriculum.core_courses(student.college_id, department.id)
            if not courses:
                return result.fail("No core courses defined for the student's department")

            located = await self.locator.locate(
                [course.id for course in courses],
                semester,
                years,
                section_id=student.section_id,
            )
            if not located.found:
                logger.warning(
                    "no_course_offerings",
                    student_id=student_id,
                    semester=semester,
                    years_tried=[year.label for year in years],
                )
                return result.fail(no_offerings_message(semester))
        except Exception as e:
            logger.error("enrollment_lookup_failed", student_id=student_id, error=str(e))
            return result.fail(f"Error during auto-enrollment: {e}")

        result = await self.writer.reconcile(student.id, located.offerings, located.year.id)

        logger.info(
            "student_enrolled_for_semester",
            student_id=student_id,
            semester=semester,
            academic_year=located.year.label,
            success=result.success,
            enrollments_created=result.enrollments_created,
        )

        return result

    async def enroll_first_year(self, student_id: str) -> EnrollmentResult:
        """Enroll a newly admitted student in first-semester offerings.

        Args:
            student_id: Student identifier.

        Returns:
            Enrollment result.
        """
        return await self.enroll_for_semester(student_id, FIRST_SEMESTER)

    async def enroll_current_semester(
        self,
        student_id: str,
        target_semester: int | None = None,
    ) -> EnrollmentResult:
        """Enroll a student for a target semester or their current one.

        Args:
            student_id: Student identifier.
            target_semester: Semester to enroll for. Defaults to the
                student's stored semester, or 1 if unset.

        Returns:
            Enrollment result.
        """
        if target_semester is not None:
            return await self.enroll_for_semester(student_id, target_semester)

        result = EnrollmentResult.for_student(student_id)
        try:
            student = await self.store.get_student(student_id)
        except Exception as e:
            logger.error("enrollment_lookup_failed", student_id=student_id, error=str(e))
            return result.fail(f"Error during auto-enrollment: {e}")

        if student is None:
            return result.fail("Student not found")

        return await self.enroll_for_semester(student_id, student.semester or DEFAULT_SEMESTER)

    async def promote(self, student_id: str) -> EnrollmentResult:
        """Promote a student to the next semester and enroll them.

        The new semester is committed before enrollment runs and is kept
        even when enrollment fails. The promotion message is always the
        first entry of the result's messages.

        Args:
            student_id: Student identifier.

        Returns:
            Enrollment result for the new semester, with the promotion
            message prepended.
        """
        result = EnrollmentResult.for_student(student_id)

        try:
            student = await self.store.get_student(student_id)
            if student is None:
                return result.fail("Student not found")

            # Incremented in the database so concurrent promotions both count
            next_semester = await self.store.advance_student_semester(student.id)
            if next_semester is None:
                await self._rollback(student_id)
                return result.fail("Student not found")
            await self.store.commit()
        except Exception as e:
            await self._rollback(student_id)
            logger.error("student_promotion_failed", student_id=student_id, error=str(e))
            return result.fail(f"Error during semester promotion: {e}")

        current = next_semester - 1
        logger.info(
            "student_promoted",
            student_id=student_id,
            from_semester=current,
            to_semester=next_semester,
        )

        result = await self.enroll_for_semester(student_id, next_semester)
        result.errors.insert(0, promotion_message(current, next_semester))
        return result

    async def _rollback(self, student_id: str) -> None:
        try:
            await self.store.rollback()
        except DatabaseError as e:
            logger.error("rollback_failed", student_id=student_id, error=str(e))
