# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and student enrollment models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from collegeos.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from collegeos.infrastructure.database.models.college import (
        AcademicYear,
        College,
        Department,
        Section,
    )
    from collegeos.infrastructure.database.models.curriculum import CourseOffering


class Student(UUIDMixin, TimestampMixin, Base):
    """Student model.

    The semester counter is only advanced by promotion or an explicit
    administrative edit; it never decreases.
    """

    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("semester >= 1", name="ck_students_semester_positive"),
        Index("ix_students_department_semester", "department_id", "semester"),
    )

    college_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False, index=True
    )
    department_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )
    section_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("sections.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    usn: Mapped[str | None] = mapped_column(String(50), nullable=True, unique=True)
    semester: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    batch_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    college: Mapped[College] = relationship("College")
    department: Mapped[Department | None] = relationship("Department", back_populates="students")
    section: Mapped[Section | None] = relationship("Section")
    enrollments: Mapped[list[StudentEnrollment]] = relationship(
        "StudentEnrollment", back_populates="student"
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id!r}, usn={self.usn!r}, semester={self.semester!r})>"


class StudentEnrollment(UUIDMixin, TimestampMixin, Base):
    """Student enrollment model - links a student to a course offering.

    At most one row exists per (student, offering) pair.
    """

    __tablename__ = "student_enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "offering_id", name="uq_student_enrollments_student_offering"),
        Index("ix_student_enrollments_offering", "offering_id"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    offering_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("course_offerings.id", ondelete="CASCADE"), nullable=False
    )
    year_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("academic_years.id", ondelete="CASCADE"), nullable=False
    )
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    student: Mapped[Student] = relationship("Student", back_populates="enrollments")
    offering: Mapped[CourseOffering] = relationship("CourseOffering")
    academic_year: Mapped[AcademicYear] = relationship("AcademicYear")

    def __repr__(self) -> str:
        return (
            f"<StudentEnrollment(id={self.id!r}, student_id={self.student_id!r}, "
            f"offering_id={self.offering_id!r})>"
        )
