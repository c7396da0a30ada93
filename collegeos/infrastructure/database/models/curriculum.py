# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog and course offering models."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from collegeos.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from collegeos.infrastructure.database.models.college import (
        AcademicYear,
        Department,
        Section,
        Teacher,
    )


class CourseType(StrEnum):
    """Course type enum.

    Only core courses participate in automatic enrollment.
    """

    CORE = "core"
    DEPARTMENT_ELECTIVE = "department_elective"
    OPEN_ELECTIVE = "open_elective"


class Course(UUIDMixin, TimestampMixin, Base):
    """Course model - a catalog entry of a department."""

    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint("college_id", "code", name="uq_courses_college_code"),
        Index("ix_courses_department_type", "college_id", "department_id", "type"),
    )

    college_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False
    )
    department_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("departments.id", ondelete="CASCADE"), nullable=False
    )
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False, default=CourseType.CORE.value)
    has_theory_component: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    has_lab_component: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    department: Mapped[Department] = relationship("Department", back_populates="courses")
    offerings: Mapped[list[CourseOffering]] = relationship(
        "CourseOffering", back_populates="course", cascade="all, delete-orphan"
    )

    @property
    def course_type(self) -> CourseType:
        """Get type as CourseType enum."""
        return CourseType(self.type)

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, code={self.code!r}, type={self.type!r})>"


class CourseOffering(UUIDMixin, TimestampMixin, Base):
    """Course offering model - the schedulable unit.

    A (course, academic year, semester, section, teacher) tuple. The same
    course may be offered several times per semester for different sections.
    """

    __tablename__ = "course_offerings"
    __table_args__ = (
        Index("ix_course_offerings_year_semester", "year_id", "semester"),
        Index("ix_course_offerings_course", "course_id"),
    )

    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    year_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("academic_years.id", ondelete="CASCADE"), nullable=False
    )
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    section_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("sections.id", ondelete="SET NULL"), nullable=True
    )
    teacher_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True
    )

    course: Mapped[Course] = relationship("Course", back_populates="offerings")
    academic_year: Mapped[AcademicYear] = relationship("AcademicYear")
    section: Mapped[Section | None] = relationship("Section")
    teacher: Mapped[Teacher | None] = relationship("Teacher", back_populates="offerings")

    def describe(self) -> str:
        """Human-readable description used in enrollment reports."""
        return f"{self.course.code} - {self.course.name} (Semester {self.semester})"

    def __repr__(self) -> str:
        return (
            f"<CourseOffering(id={self.id!r}, course_id={self.course_id!r}, "
            f"semester={self.semester!r}, section_id={self.section_id!r})>"
        )
