# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""College structure models.

A college is the root tenant scope. It owns departments, sections (through
departments), teachers and academic years.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from collegeos.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from collegeos.infrastructure.database.models.curriculum import Course, CourseOffering
    from collegeos.infrastructure.database.models.student import Student


class College(UUIDMixin, TimestampMixin, Base):
    """College model - root tenant scope."""

    __tablename__ = "colleges"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    departments: Mapped[list[Department]] = relationship(
        "Department", back_populates="college", cascade="all, delete-orphan"
    )
    academic_years: Mapped[list[AcademicYear]] = relationship(
        "AcademicYear", back_populates="college", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<College(id={self.id!r}, code={self.code!r})>"


class Department(UUIDMixin, TimestampMixin, Base):
    """Department model - groups courses, sections and students."""

    __tablename__ = "departments"
    __table_args__ = (UniqueConstraint("college_id", "code", name="uq_departments_college_code"),)

    college_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)

    college: Mapped[College] = relationship("College", back_populates="departments")
    sections: Mapped[list[Section]] = relationship(
        "Section", back_populates="department", cascade="all, delete-orphan"
    )
    courses: Mapped[list[Course]] = relationship("Course", back_populates="department")
    students: Mapped[list[Student]] = relationship("Student", back_populates="department")

    def __repr__(self) -> str:
        return f"<Department(id={self.id!r}, code={self.code!r})>"


class Section(UUIDMixin, TimestampMixin, Base):
    """Section model - a division of a department's students (A, B, ...)."""

    __tablename__ = "sections"

    department_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("departments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)

    department: Mapped[Department] = relationship("Department", back_populates="sections")

    def __repr__(self) -> str:
        return f"<Section(id={self.id!r}, name={self.name!r})>"


class Teacher(UUIDMixin, TimestampMixin, Base):
    """Teacher model - optionally assigned to course offerings."""

    __tablename__ = "teachers"

    college_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    offerings: Mapped[list[CourseOffering]] = relationship(
        "CourseOffering", back_populates="teacher"
    )

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id!r}, name={self.name!r})>"


class AcademicYear(UUIDMixin, TimestampMixin, Base):
    """Academic year model.

    Several academic years of one college may be active at the same time.
    """

    __tablename__ = "academic_years"
    __table_args__ = (
        UniqueConstraint("college_id", "label", name="uq_academic_years_college_label"),
        Index("ix_academic_years_college_active", "college_id", "is_active"),
    )

    college_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("colleges.id", ondelete="CASCADE"), nullable=False
    )
    label: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    college: Mapped[College] = relationship("College", back_populates="academic_years")

    def __repr__(self) -> str:
        return (
            f"<AcademicYear(id={self.id!r}, label={self.label!r}, "
            f"is_active={self.is_active!r})>"
        )
