# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bulk enrollment and promotion over many students.

Each student runs in its own store (and so its own database session and
transaction). Students are processed concurrently, bounded by
``settings.enrollment.bulk_concurrency``. A failure for one student becomes
that student's unsuccessful result and never stops the others.

Example:
    service = BulkProgressionService(open_store)
    report = await service.enroll_department(department_id, semester=3)
    print(report.successful, report.failed)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING
from uuid import uuid4

from collegeos.core.config import get_settings
from collegeos.domains.progression.service import ProgressionController
from collegeos.infrastructure.database.store import AcademicStore, StudentQuery
from collegeos.models.enrollment import BulkEnrollmentReport, EnrollmentResult
from collegeos.utils.logging import get_logger, log_context

if TYPE_CHECKING:
    from collegeos.core.config.settings import Settings

logger = get_logger(__name__)

StoreFactory = Callable[[], AbstractAsyncContextManager[AcademicStore]]
StudentOperation = Callable[[ProgressionController, str], Awaitable[EnrollmentResult]]


class BulkProgressionService:
    """Runs per-student progression operations for many students.

    Attributes:
        store_factory: Opens a fresh store for one unit of work.
        settings: Application settings.
    """

    def __init__(self, store_factory: StoreFactory, settings: Settings | None = None) -> None:
        """Initialize the bulk service.

        Args:
            store_factory: Callable returning an async context manager that
                yields an AcademicStore, e.g. ``open_store``.
            settings: Application settings. Defaults to get_settings().
        """
        self.store_factory = store_factory
        self.settings = settings or get_settings()

    async def enroll_students(
        self,
        student_ids: Sequence[str],
        semester: int,
    ) -> BulkEnrollmentReport:
        """Enroll each student in the core offerings of a semester.

        Args:
            student_ids: Students to enroll.
            semester: Semester number.

        Returns:
            Aggregate report with one result per student, in input order.
        """
        return await self._run(
            "bulk_enroll",
            student_ids,
            lambda controller, student_id: controller.enroll_for_semester(student_id, semester),
        )

    async def enroll_department(
        self,
        department_id: str,
        semester: int,
        college_id: str | None = None,
    ) -> BulkEnrollmentReport:
        """Enroll every student of a department who is in the given semester.

        Args:
            department_id: Department identifier.
            semester: Semester the students are in and are enrolled for.
            college_id: Optional college restriction.

        Returns:
            Aggregate report. Empty when the department has no such students.
        """
        async with self.store_factory() as store:
            students = await store.list_students(
                StudentQuery(
                    department_id=str(department_id),
                    college_id=college_id,
                    semester=semester,
                )
            )

        if not students:
            logger.info(
                "bulk_enroll_no_students",
                department_id=department_id,
                semester=semester,
            )
            return BulkEnrollmentReport()

        return await self.enroll_students([student.id for student in students], semester)

    async def promote_students(self, student_ids: Sequence[str]) -> BulkEnrollmentReport:
        """Promote each student to their next semester and enroll them.

        Args:
            student_ids: Students to promote.

        Returns:
            Aggregate report with one result per student, in input order.
        """
        return await self._run(
            "bulk_promote",
            student_ids,
            lambda controller, student_id: controller.promote(student_id),
        )

    async def _run(
        self,
        operation: str,
        student_ids: Sequence[str],
        action: StudentOperation,
    ) -> BulkEnrollmentReport:
        semaphore = asyncio.Semaphore(self.settings.enrollment.bulk_concurrency)
        batch_id = str(uuid4())

        async def run_one(student_id: str) -> EnrollmentResult:
            async with semaphore:
                try:
                    async with self.store_factory() as store:
                        controller = ProgressionController(store, self.settings)
                        return await action(controller, student_id)
                except Exception as e:
                    logger.error(
                        "bulk_student_failed",
                        operation=operation,
                        batch_id=batch_id,
                        student_id=student_id,
                        error=str(e),
                    )
                    return EnrollmentResult.for_student(student_id).fail(
                        f"Error during {operation.replace('_', ' ')}: {e}"
                    )

        with log_context(batch_id=batch_id, operation=operation):
            results = await asyncio.gather(*(run_one(str(sid)) for sid in student_ids))

        report = BulkEnrollmentReport.from_results(list(results))

        logger.info(
            "bulk_operation_completed",
            operation=operation,
            batch_id=batch_id,
            total_students=report.total_students,
            successful=report.successful,
            failed=report.failed,
            total_enrollments_created=report.total_enrollments_created,
        )

        return report
