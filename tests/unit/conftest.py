# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit test fixtures.

Provides an in-memory AcademicStore and a small college to run the
enrollment engine against without a database.
"""

import asyncio
from collections import Counter
from contextlib import asynccontextmanager
from itertools import count

import pytest

from collegeos.core.config.settings import EnrollmentSettings, Settings
from collegeos.infrastructure.database.connection import DatabaseError
from collegeos.infrastructure.database.models import (
    AcademicYear,
    College,
    Course,
    CourseOffering,
    CourseType,
    Department,
    Section,
    Student,
    StudentEnrollment,
    Teacher,
)


# =============================================================================
# In-memory store
# =============================================================================


class CampusData:
    """Committed rows shared by every store opened on it."""

    def __init__(self):
        self.students: dict[str, Student] = {}
        self.departments: dict[str, Department] = {}
        self.years: list[AcademicYear] = []
        self.courses: list[Course] = []
        self.offerings: list[CourseOffering] = []
        self.enrollments: list[StudentEnrollment] = []
        self.ids = count(1)

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self.ids)}"

    def is_enrolled(self, student_id: str, offering_id: str) -> bool:
        return any(
            e.student_id == student_id and e.offering_id == offering_id
            for e in self.enrollments
        )


class InMemoryAcademicStore:
    """AcademicStore over CampusData with its own pending transaction.

    Writes stay pending until commit() and are dropped by rollback(). The
    (student, offering) pair is unique across committed and pending rows.

    Attributes:
        data: Shared committed rows.
        calls: Counter of store methods called.
        queries: Query objects received, in call order.
        stale_reads: Make list_enrollments return nothing, as a concurrent
            writer would see before the other transaction commits.
    """

    def __init__(self, data: CampusData):
        self.data = data
        self.calls: Counter[str] = Counter()
        self.queries: list[object] = []
        self.stale_reads = False
        self._pending_enrollments: list[StudentEnrollment] = []
        self._pending_promotions: Counter[str] = Counter()
        self._failures: dict[str, tuple[int, Exception]] = {}

    def fail(self, method: str, error: Exception | None = None, on_call: int = 1) -> None:
        """Make the n-th call of a store method raise."""
        self._failures[method] = (on_call, error or DatabaseError("Connection lost"))

    def _record(self, method: str, query: object = None) -> None:
        self.calls[method] += 1
        if query is not None:
            self.queries.append(query)
        failure = self._failures.get(method)
        if failure and self.calls[method] == failure[0]:
            raise failure[1]

    async def get_student(self, student_id):
        self._record("get_student")
        return self.data.students.get(str(student_id))

    async def get_department(self, department_id):
        self._record("get_department")
        return self.data.departments.get(str(department_id))

    async def list_academic_years(self, query):
        self._record("list_academic_years", query)
        years = [
            y for y in self.data.years
            if y.college_id == query.college_id
            and (query.is_active is None or y.is_active == query.is_active)
        ]
        return sorted(years, key=lambda y: y.label, reverse=query.newest_first)

    async def list_courses(self, query):
        self._record("list_courses", query)
        courses = [
            c for c in self.data.courses
            if c.college_id == query.college_id
            and c.department_id == query.department_id
            and (query.course_type is None or c.type == query.course_type.value)
        ]
        return sorted(courses, key=lambda c: c.code)

    async def list_offerings(self, query):
        self._record("list_offerings", query)
        if not query.course_ids:
            return []
        offerings = [
            o for o in self.data.offerings
            if o.course_id in query.course_ids
            and o.year_id == query.year_id
            and (query.semester is None or o.semester == query.semester)
            and (query.section_id is None or o.section_id == query.section_id)
        ]
        return sorted(offerings, key=lambda o: (o.semester, o.course.code))

    async def list_enrollments(self, query):
        self._record("list_enrollments", query)
        if self.stale_reads:
            return []
        return [
            e for e in self.data.enrollments
            if e.student_id == query.student_id and e.offering_id in query.offering_ids
        ]

    async def list_students(self, query):
        self._record("list_students", query)
        students = [
            s for s in self.data.students.values()
            if s.department_id == query.department_id
            and (query.college_id is None or s.college_id == query.college_id)
            and (query.semester is None or s.semester == query.semester)
        ]
        return sorted(students, key=lambda s: s.usn or "")

    async def add_enrollment(self, enrollment):
        self._record("add_enrollment")
        taken = self.data.is_enrolled(enrollment.student_id, enrollment.offering_id) or any(
            e.student_id == enrollment.student_id and e.offering_id == enrollment.offering_id
            for e in self._pending_enrollments
        )
        if taken:
            return False
        enrollment.id = self.data.next_id("enrollment")
        self._pending_enrollments.append(enrollment)
        return True

    async def advance_student_semester(self, student_id):
        self._record("advance_student_semester")
        student = self.data.students.get(str(student_id))
        if student is None:
            return None
        self._pending_promotions[str(student_id)] += 1
        return (student.semester or 1) + self._pending_promotions[str(student_id)]

    async def commit(self):
        self._record("commit")
        self.data.enrollments.extend(self._pending_enrollments)
        # Increments apply to the committed value, like SET semester = semester + 1
        for student_id, steps in self._pending_promotions.items():
            student = self.data.students[student_id]
            student.semester = (student.semester or 1) + steps
        self._pending_enrollments = []
        self._pending_promotions = Counter()

    async def rollback(self):
        self._pending_enrollments = []
        self._pending_promotions = Counter()
        self._record("rollback")


# =============================================================================
# Campus builder
# =============================================================================


class Campus:
    """Builds colleges, calendars, catalogs and students into CampusData."""

    def __init__(self, data: CampusData):
        self.data = data
        self.college = College(id="college-1", name="Example College of Engineering", code="ECE")

    def department(self, code: str = "CSE", name: str = "Computer Science") -> Department:
        department = Department(
            id=self.data.next_id("department"),
            college_id=self.college.id,
            code=code,
            name=name,
        )
        self.data.departments[department.id] = department
        return department

    def section(self, department: Department, name: str) -> Section:
        return Section(id=self.data.next_id("section"), department_id=department.id, name=name)

    def teacher(self, name: str) -> Teacher:
        return Teacher(id=self.data.next_id("teacher"), college_id=self.college.id, name=name)

    def year(self, label: str, is_active: bool = True) -> AcademicYear:
        year = AcademicYear(
            id=f"year-{label}",
            college_id=self.college.id,
            label=label,
            is_active=is_active,
        )
        self.data.years.append(year)
        return year

    def course(
        self,
        department: Department,
        code: str,
        name: str,
        course_type: CourseType = CourseType.CORE,
        has_lab: bool = False,
    ) -> Course:
        course = Course(
            id=f"course-{code}",
            college_id=self.college.id,
            department_id=department.id,
            code=code,
            name=name,
            type=course_type.value,
            has_theory_component=True,
            has_lab_component=has_lab,
        )
        self.data.courses.append(course)
        return course

    def offering(
        self,
        course: Course,
        year: AcademicYear,
        semester: int,
        section: Section | None = None,
        teacher: Teacher | None = None,
    ) -> CourseOffering:
        offering = CourseOffering(
            id=self.data.next_id("offering"),
            course_id=course.id,
            year_id=year.id,
            semester=semester,
            section_id=section.id if section else None,
            teacher_id=teacher.id if teacher else None,
        )
        offering.course = course
        offering.section = section
        offering.teacher = teacher
        self.data.offerings.append(offering)
        return offering

    def student(
        self,
        department: Department | None,
        semester: int | None = 1,
        section: Section | None = None,
        usn: str | None = None,
    ) -> Student:
        student_id = self.data.next_id("student")
        student = Student(
            id=student_id,
            college_id=self.college.id,
            department_id=department.id if department else None,
            section_id=section.id if section else None,
            name=f"Student {student_id}",
            usn=usn or student_id.upper(),
            semester=semester,
        )
        self.data.students[student.id] = student
        return student

    def enroll(self, student: Student, offering: CourseOffering) -> StudentEnrollment:
        enrollment = StudentEnrollment(
            id=self.data.next_id("enrollment"),
            student_id=student.id,
            offering_id=offering.id,
            year_id=offering.year_id,
            attempt_number=1,
        )
        self.data.enrollments.append(enrollment)
        return enrollment


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def campus_data():
    """Provide empty shared campus data."""
    return CampusData()


@pytest.fixture
def campus(campus_data):
    """Provide a campus builder over the shared data."""
    return Campus(campus_data)


@pytest.fixture
def store(campus_data):
    """Provide an in-memory store over the shared data."""
    return InMemoryAcademicStore(campus_data)


@pytest.fixture
def store_factory(campus_data):
    """Provide a factory opening a fresh in-memory store per unit of work.

    Set failures[n] to make the n-th opening raise instead of yielding.
    """
    opened: list[InMemoryAcademicStore] = []
    usage = {"active": 0, "peak": 0, "openings": 0}
    failures: dict[int, Exception] = {}

    @asynccontextmanager
    async def factory():
        usage["active"] += 1
        usage["peak"] = max(usage["peak"], usage["active"])
        usage["openings"] += 1
        number = usage["openings"]
        try:
            await asyncio.sleep(0)
            if number in failures:
                raise failures[number]
            store = InMemoryAcademicStore(campus_data)
            opened.append(store)
            yield store
        finally:
            usage["active"] -= 1

    factory.opened = opened
    factory.usage = usage
    factory.failures = failures
    return factory


@pytest.fixture
def test_settings():
    """Provide settings with a small bulk concurrency limit."""
    return Settings(enrollment=EnrollmentSettings(bulk_concurrency=2))


@pytest.fixture
def cse(campus):
    """Computer Science department with sections A and B, year 2025-26 and
    a two-course semester 2 core curriculum offered to both sections."""
    department = campus.department("CSE", "Computer Science")
    section_a = campus.section(department, "A")
    section_b = campus.section(department, "B")
    year = campus.year("2025-26")
    ds = campus.course(department, "CS201", "Data Structures", has_lab=True)
    dm = campus.course(department, "CS202", "Discrete Mathematics")
    offerings = {
        "CS201-A": campus.offering(ds, year, 2, section_a, campus.teacher("Dr. Rao")),
        "CS201-B": campus.offering(ds, year, 2, section_b),
        "CS202-A": campus.offering(dm, year, 2, section_a),
        "CS202-B": campus.offering(dm, year, 2, section_b),
    }
    return {
        "department": department,
        "section_a": section_a,
        "section_b": section_b,
        "year": year,
        "courses": [ds, dm],
        "offerings": offerings,
    }
