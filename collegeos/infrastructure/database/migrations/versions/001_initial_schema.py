# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial college database schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-09-01
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _fk(name: str, target: str, nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        name,
        sa.String(36),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    """Create college database tables."""
    # =========================================================================
    # COLLEGE STRUCTURE
    # =========================================================================

    op.create_table(
        "colleges",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "departments",
        _id(),
        _fk("college_id", "colleges.id"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("college_id", "code", name="uq_departments_college_code"),
    )
    op.create_index("ix_departments_college_id", "departments", ["college_id"])

    op.create_table(
        "sections",
        _id(),
        _fk("department_id", "departments.id"),
        sa.Column("name", sa.String(50), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_sections_department_id", "sections", ["department_id"])

    op.create_table(
        "teachers",
        _id(),
        _fk("college_id", "colleges.id"),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_teachers_college_id", "teachers", ["college_id"])

    op.create_table(
        "academic_years",
        _id(),
        _fk("college_id", "colleges.id"),
        sa.Column("label", sa.String(20), nullable=False),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
        sa.UniqueConstraint("college_id", "label", name="uq_academic_years_college_label"),
    )
    op.create_index(
        "ix_academic_years_college_active", "academic_years", ["college_id", "is_active"]
    )

    # =========================================================================
    # CATALOG AND OFFERINGS
    # =========================================================================

    op.create_table(
        "courses",
        _id(),
        _fk("college_id", "colleges.id"),
        _fk("department_id", "departments.id"),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(30), nullable=False, server_default="core"),
        sa.Column("has_theory_component", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("has_lab_component", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
        sa.UniqueConstraint("college_id", "code", name="uq_courses_college_code"),
    )
    op.create_index(
        "ix_courses_department_type", "courses", ["college_id", "department_id", "type"]
    )

    op.create_table(
        "course_offerings",
        _id(),
        _fk("course_id", "courses.id"),
        _fk("year_id", "academic_years.id"),
        sa.Column("semester", sa.Integer, nullable=False),
        _fk("section_id", "sections.id", nullable=True, ondelete="SET NULL"),
        _fk("teacher_id", "teachers.id", nullable=True, ondelete="SET NULL"),
        *_timestamps(),
    )
    op.create_index(
        "ix_course_offerings_year_semester", "course_offerings", ["year_id", "semester"]
    )
    op.create_index("ix_course_offerings_course", "course_offerings", ["course_id"])

    # =========================================================================
    # STUDENTS AND ENROLLMENTS
    # =========================================================================

    op.create_table(
        "students",
        _id(),
        _fk("college_id", "colleges.id"),
        _fk("department_id", "departments.id", nullable=True, ondelete="SET NULL"),
        _fk("section_id", "sections.id", nullable=True, ondelete="SET NULL"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("usn", sa.String(50), nullable=True, unique=True),
        sa.Column("semester", sa.Integer, nullable=False, server_default="1"),
        sa.Column("batch_year", sa.Integer, nullable=True),
        *_timestamps(),
        sa.CheckConstraint("semester >= 1", name="ck_students_semester_positive"),
    )
    op.create_index("ix_students_college_id", "students", ["college_id"])
    op.create_index(
        "ix_students_department_semester", "students", ["department_id", "semester"]
    )

    op.create_table(
        "student_enrollments",
        _id(),
        _fk("student_id", "students.id"),
        _fk("offering_id", "course_offerings.id"),
        _fk("year_id", "academic_years.id"),
        sa.Column("attempt_number", sa.Integer, nullable=False, server_default="1"),
        *_timestamps(),
        sa.UniqueConstraint(
            "student_id", "offering_id", name="uq_student_enrollments_student_offering"
        ),
    )
    op.create_index("ix_student_enrollments_offering", "student_enrollments", ["offering_id"])


def downgrade() -> None:
    """Drop college database tables."""
    op.drop_table("student_enrollments")
    op.drop_table("students")
    op.drop_table("course_offerings")
    op.drop_table("courses")
    op.drop_table("academic_years")
    op.drop_table("teachers")
    op.drop_table("sections")
    op.drop_table("departments")
    op.drop_table("colleges")
