# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic data store used by the enrollment engine.

The engine never talks to a global database handle. Every component receives
an AcademicStore, which is implemented here over an SQLAlchemy AsyncSession
and can be replaced by a test double.

Lookups take explicit query objects. Optional filters are None rather than
missing keys, and a None filter means "do not filter on this column".

Conventions:
- Not found is a None or empty return, never an exception.
- Infrastructure failures are raised as DatabaseError.

Example:
    async with open_store() as store:
        student = await store.get_student(student_id)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from collegeos.infrastructure.database.connection import DatabaseError, get_session
from collegeos.infrastructure.database.models import (
    AcademicYear,
    Course,
    CourseOffering,
    CourseType,
    Department,
    Student,
    StudentEnrollment,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcademicYearQuery:
    """Filter for academic years of a college.

    Attributes:
        college_id: Owning college.
        is_active: Only years with this active flag. None returns all years.
        newest_first: Order by label descending instead of ascending.
    """

    college_id: str
    is_active: bool | None = True
    newest_first: bool = True


@dataclass(frozen=True)
class CourseQuery:
    """Filter for catalog courses of a department.

    Attributes:
        college_id: Owning college.
        department_id: Owning department.
        course_type: Only courses of this type. None returns every type.
    """

    college_id: str
    department_id: str
    course_type: CourseType | None = CourseType.CORE


@dataclass(frozen=True)
class OfferingQuery:
    """Filter for course offerings.

    Attributes:
        course_ids: Candidate courses.
        year_id: Academic year the offerings belong to.
        semester: Only offerings of this semester. None returns all semesters.
        section_id: Only offerings of this section. None applies no section
            filter, so offerings of every section are returned.
    """

    course_ids: tuple[str, ...]
    year_id: str
    semester: int | None = None
    section_id: str | None = None


@dataclass(frozen=True)
class EnrollmentQuery:
    """Filter for a student's enrollments within a set of offerings."""

    student_id: str
    offering_ids: tuple[str, ...]


@dataclass(frozen=True)
class StudentQuery:
    """Filter for students of a department.

    Attributes:
        department_id: Department the students belong to.
        college_id: Only students of this college. None skips the filter.
        semester: Only students currently in this semester. None skips it.
    """

    department_id: str
    college_id: str | None = None
    semester: int | None = None


class AcademicStore(Protocol):
    """Read/write operations the enrollment engine needs from storage."""

    async def get_student(self, student_id: str) -> Student | None: ...

    async def get_department(self, department_id: str) -> Department | None: ...

    async def list_academic_years(self, query: AcademicYearQuery) -> list[AcademicYear]: ...

    async def list_courses(self, query: CourseQuery) -> list[Course]: ...

    async def list_offerings(self, query: OfferingQuery) -> list[CourseOffering]: ...

    async def list_enrollments(self, query: EnrollmentQuery) -> list[StudentEnrollment]: ...

    async def list_students(self, query: StudentQuery) -> list[Student]: ...

    async def add_enrollment(self, enrollment: StudentEnrollment) -> bool: ...

    async def advance_student_semester(self, student_id: str) -> int | None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class SQLAlchemyAcademicStore:
    """AcademicStore backed by an SQLAlchemy async session.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the store.

        Args:
            db: Async database session for the college database.
        """
        self.db = db

    async def get_student(self, student_id: str) -> Student | None:
        """Get a student with department and section loaded.

        Args:
            student_id: Student identifier.

        Returns:
            Student if found, None otherwise.
        """
        query = (
            select(Student)
            .options(selectinload(Student.department), selectinload(Student.section))
            .where(Student.id == str(student_id))
        )
        return await self._scalar_one_or_none(query, "Failed to load student")

    async def get_department(self, department_id: str) -> Department | None:
        """Get a department by ID.

        Args:
            department_id: Department identifier.

        Returns:
            Department if found, None otherwise.
        """
        query = select(Department).where(Department.id == str(department_id))
        return await self._scalar_one_or_none(query, "Failed to load department")

    async def list_academic_years(self, query: AcademicYearQuery) -> list[AcademicYear]:
        """List academic years of a college ordered by label.

        Args:
            query: Academic year filter.

        Returns:
            Matching academic years.
        """
        stmt = select(AcademicYear).where(AcademicYear.college_id == query.college_id)
        if query.is_active is not None:
            stmt = stmt.where(AcademicYear.is_active == query.is_active)
        if query.newest_first:
            stmt = stmt.order_by(AcademicYear.label.desc())
        else:
            stmt = stmt.order_by(AcademicYear.label.asc())
        return await self._scalars(stmt, "Failed to load academic years")

    async def list_courses(self, query: CourseQuery) -> list[Course]:
        """List courses of a department.

        Args:
            query: Course filter.

        Returns:
            Matching courses ordered by code.
        """
        stmt = select(Course).where(
            Course.college_id == query.college_id,
            Course.department_id == query.department_id,
        )
        if query.course_type is not None:
            stmt = stmt.where(Course.type == query.course_type.value)
        stmt = stmt.order_by(Course.code.asc())
        return await self._scalars(stmt, "Failed to load courses")

    async def list_offerings(self, query: OfferingQuery) -> list[CourseOffering]:
        """List course offerings with course, section and teacher loaded.

        Args:
            query: Offering filter.

        Returns:
            Matching offerings ordered by semester, then course code.
        """
        if not query.course_ids:
            return []

        stmt = (
            select(CourseOffering)
            .join(CourseOffering.course)
            .options(
                selectinload(CourseOffering.course),
                selectinload(CourseOffering.section),
                selectinload(CourseOffering.teacher),
            )
            .where(
                CourseOffering.course_id.in_(query.course_ids),
                CourseOffering.year_id == query.year_id,
            )
        )
        if query.semester is not None:
            stmt = stmt.where(CourseOffering.semester == query.semester)
        if query.section_id is not None:
            stmt = stmt.where(CourseOffering.section_id == query.section_id)
        stmt = stmt.order_by(CourseOffering.semester.asc(), Course.code.asc())
        return await self._scalars(stmt, "Failed to load course offerings")

    async def list_enrollments(self, query: EnrollmentQuery) -> list[StudentEnrollment]:
        """List a student's enrollments among the given offerings.

        Args:
            query: Enrollment filter.

        Returns:
            Existing enrollments.
        """
        if not query.offering_ids:
            return []

        stmt = select(StudentEnrollment).where(
            StudentEnrollment.student_id == query.student_id,
            StudentEnrollment.offering_id.in_(query.offering_ids),
        )
        return await self._scalars(stmt, "Failed to load enrollments")

    async def list_students(self, query: StudentQuery) -> list[Student]:
        """List students of a department.

        Args:
            query: Student filter.

        Returns:
            Matching students.
        """
        stmt = select(Student).where(Student.department_id == query.department_id)
        if query.college_id is not None:
            stmt = stmt.where(Student.college_id == query.college_id)
        if query.semester is not None:
            stmt = stmt.where(Student.semester == query.semester)
        stmt = stmt.order_by(Student.usn.asc())
        return await self._scalars(stmt, "Failed to load students")

    async def add_enrollment(self, enrollment: StudentEnrollment) -> bool:
        """Insert an enrollment inside a savepoint.

        A violation of the (student, offering) unique constraint only rolls
        back the savepoint, so the surrounding transaction stays usable.

        Args:
            enrollment: New enrollment row.

        Returns:
            True if inserted, False if the pair already exists.

        Raises:
            DatabaseError: If the insert fails for any other reason.
        """
        try:
            async with self.db.begin_nested():
                self.db.add(enrollment)
        except IntegrityError:
            logger.info(
                "Enrollment already exists: student=%s, offering=%s",
                enrollment.student_id,
                enrollment.offering_id,
            )
            return False
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to insert enrollment", e) from e
        return True

    async def advance_student_semester(self, student_id: str) -> int | None:
        """Increment a student's semester counter in a single UPDATE.

        The increment is computed by the database, so concurrent promotions
        of the same student are serialized on the row and none is lost. An
        unset semester counts as semester 1.

        Returns:
            The new semester, or None if the student does not exist.

        Raises:
            DatabaseError: If the update fails.
        """
        stmt = (
            update(Student)
            .where(Student.id == str(student_id))
            .values(semester=func.coalesce(Student.semester, 1) + 1)
            .returning(Student.semester)
            .execution_options(synchronize_session="fetch")
        )
        return await self._scalar_one_or_none(stmt, "Failed to update student semester")

    async def commit(self) -> None:
        """Commit the current transaction.

        Raises:
            DatabaseError: If the commit fails.
        """
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to commit transaction", e) from e

    async def rollback(self) -> None:
        """Roll back the current transaction.

        Raises:
            DatabaseError: If the rollback fails.
        """
        try:
            await self.db.rollback()
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to roll back transaction", e) from e

    async def _scalar_one_or_none(self, stmt, message: str):
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise DatabaseError(message, e) from e
        return result.scalar_one_or_none()

    async def _scalars(self, stmt, message: str) -> list:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise DatabaseError(message, e) from e
        return list(result.scalars().all())


@asynccontextmanager
async def open_store() -> AsyncIterator[SQLAlchemyAcademicStore]:
    """Open a store bound to a fresh college database session.

    Yields:
        SQLAlchemyAcademicStore for one unit of work.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    async with get_session() as session:
        yield SQLAlchemyAcademicStore(session)


def as_id_tuple(ids: Sequence[str]) -> tuple[str, ...]:
    """Normalize identifiers to a tuple of strings for query objects."""
    return tuple(str(i) for i in ids)
