# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment writer for reconciling a student's offerings.

This module provides the EnrollmentWriter class, which brings a student's
enrollments in line with a resolved set of offerings:
- Existing enrollments are left untouched and reported as informational
- Missing enrollments are inserted with attempt number 1
- All inserts of one call are committed together or not at all

The (student, offering) unique constraint is the source of truth against
duplicates. The pre-check only avoids needless inserts; an insert that loses
a race with a concurrent call is counted as already enrolled.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from collegeos.infrastructure.database.connection import DatabaseError
from collegeos.infrastructure.database.models import CourseOffering, StudentEnrollment
from collegeos.infrastructure.database.store import AcademicStore, EnrollmentQuery, as_id_tuple
from collegeos.models.enrollment import EnrollmentResult

logger = logging.getLogger(__name__)

FIRST_ATTEMPT = 1


def already_enrolled_message(count: int) -> str:
    """Informational message for offerings the student already had."""
    return f"Student was already enrolled in {count} course(s)"


class EnrollmentWriter:
    """Writes the missing enrollments of a student.

    Attributes:
        store: Academic data store.
    """

    def __init__(self, store: AcademicStore) -> None:
        """Initialize enrollment writer.

        Args:
            store: Academic data store.
        """
        self.store = store

    async def reconcile(
        self,
        student_id: str,
        offerings: Sequence[CourseOffering],
        year_id: str,
    ) -> EnrollmentResult:
        """Enroll a student in every offering they are not enrolled in yet.

        Calling this twice with the same inputs writes nothing the second
        time and still succeeds.

        Args:
            student_id: Student identifier.
            offerings: Offerings the student must be enrolled in.
            year_id: Academic year recorded on new enrollments.

        Returns:
            Result with the number of enrollments created. On a storage
            failure nothing is kept, and the result is unsuccessful with
            zero enrollments created.
        """
        result = EnrollmentResult.for_student(student_id)
        result.academic_year_id = str(year_id)

        try:
            existing = await self.store.list_enrollments(
                EnrollmentQuery(
                    student_id=str(student_id),
                    offering_ids=as_id_tuple([o.id for o in offerings]),
                )
            )
            existing_ids = {enrollment.offering_id for enrollment in existing}
            missing = [o for o in offerings if o.id not in existing_ids]

            created: list[CourseOffering] = []
            raced = 0
            for offering in missing:
                inserted = await self.store.add_enrollment(
                    StudentEnrollment(
                        student_id=str(student_id),
                        offering_id=offering.id,
                        year_id=str(year_id),
                        attempt_number=FIRST_ATTEMPT,
                    )
                )
                if inserted:
                    created.append(offering)
                else:
                    raced += 1

            await self.store.commit()
        except Exception as e:
            await self._rollback(student_id)
            logger.error(
                "Enrollment failed, rolled back: student=%s, error=%s",
                student_id,
                e,
            )
            return result.fail(f"Error during auto-enrollment: {e}")

        result.success = True
        result.enrollments_created = len(created)
        result.details.offerings_enrolled = [offering.describe() for offering in created]

        already = len(existing_ids) + raced
        if already:
            result.errors.append(already_enrolled_message(already))

        logger.info(
            "Reconciled enrollments: student=%s, year=%s, created=%d, already_enrolled=%d",
            student_id,
            year_id,
            len(created),
            already,
        )

        return result

    async def _rollback(self, student_id: str) -> None:
        # A failed rollback must not hide the error that caused it
        try:
            await self.store.rollback()
        except DatabaseError as e:
            logger.error("Rollback failed: student=%s, error=%s", student_id, e)
