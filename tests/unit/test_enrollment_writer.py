# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the enrollment writer."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from collegeos.domains.enrollment import EnrollmentWriter, already_enrolled_message
from collegeos.infrastructure.database.connection import DatabaseError
from collegeos.infrastructure.database.store import SQLAlchemyAcademicStore


@pytest.fixture
def writer(store):
    """Create enrollment writer over the in-memory store."""
    return EnrollmentWriter(store)


@pytest.fixture
def student(campus, cse):
    """Create a semester 2 student in section A."""
    return campus.student(cse["department"], semester=2, section=cse["section_a"])


@pytest.fixture
def section_a_offerings(cse):
    """Section A offerings of semester 2."""
    return [cse["offerings"]["CS201-A"], cse["offerings"]["CS202-A"]]


class TestReconcile:
    """Tests for writing missing enrollments."""

    @pytest.mark.asyncio
    async def test_enrolls_in_all_offerings(
        self, writer, campus_data, student, section_a_offerings, cse
    ):
        """Test a new student is enrolled in every offering."""
        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is True
        assert result.enrollments_created == 2
        assert result.errors == []
        assert result.academic_year_id == cse["year"].id
        assert result.details.student_id == student.id
        assert result.details.offerings_enrolled == [
            "CS201 - Data Structures (Semester 2)",
            "CS202 - Discrete Mathematics (Semester 2)",
        ]

        assert len(campus_data.enrollments) == 2
        for enrollment in campus_data.enrollments:
            assert enrollment.student_id == student.id
            assert enrollment.year_id == cse["year"].id
            assert enrollment.attempt_number == 1

    @pytest.mark.asyncio
    async def test_second_call_writes_nothing(
        self, writer, campus_data, student, section_a_offerings, cse
    ):
        """Test reconciling twice is idempotent."""
        await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is True
        assert result.enrollments_created == 0
        assert result.errors == [already_enrolled_message(2)]
        assert result.details.offerings_enrolled == []
        assert len(campus_data.enrollments) == 2

    @pytest.mark.asyncio
    async def test_only_missing_offerings_written(
        self, writer, store, campus, student, section_a_offerings, cse
    ):
        """Test existing enrollments are kept and only the gap is filled."""
        campus.enroll(student, cse["offerings"]["CS201-A"])

        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is True
        assert result.enrollments_created == 1
        assert result.details.offerings_enrolled == ["CS202 - Discrete Mathematics (Semester 2)"]
        assert result.errors == ["Student was already enrolled in 1 course(s)"]
        assert store.calls["add_enrollment"] == 1

    @pytest.mark.asyncio
    async def test_lost_race_counts_as_already_enrolled(
        self, writer, store, campus, campus_data, student, section_a_offerings, cse
    ):
        """Test an insert rejected by the unique pair is not an error."""
        campus.enroll(student, cse["offerings"]["CS202-A"])
        store.stale_reads = True

        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is True
        assert result.enrollments_created == 1
        assert result.errors == [already_enrolled_message(1)]
        pairs = [(e.student_id, e.offering_id) for e in campus_data.enrollments]
        assert len(pairs) == len(set(pairs)) == 2

    @pytest.mark.asyncio
    async def test_empty_offerings(self, writer, store, student, cse):
        """Test nothing is written for an empty offering list."""
        result = await writer.reconcile(student.id, [], cse["year"].id)

        assert result.success is True
        assert result.enrollments_created == 0
        assert result.errors == []
        assert store.calls["add_enrollment"] == 0


class TestReconcileFailures:
    """Tests for storage failures while writing enrollments."""

    @pytest.mark.asyncio
    async def test_failed_insert_rolls_back_batch(
        self, writer, store, campus_data, student, section_a_offerings, cse
    ):
        """Test a failure on the second insert keeps nothing from the first."""
        store.fail("add_enrollment", DatabaseError("Failed to insert enrollment"), on_call=2)

        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is False
        assert result.enrollments_created == 0
        assert result.details.offerings_enrolled == []
        assert result.errors == ["Error during auto-enrollment: Failed to insert enrollment"]
        assert store.calls["rollback"] == 1
        assert store.calls["commit"] == 0
        assert campus_data.enrollments == []

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back(
        self, writer, store, campus_data, student, section_a_offerings, cse
    ):
        """Test a commit failure reports an unsuccessful result."""
        store.fail("commit", DatabaseError("Failed to commit transaction", OSError("reset")))

        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is False
        assert result.enrollments_created == 0
        assert result.errors == [
            "Error during auto-enrollment: Failed to commit transaction: reset"
        ]
        assert store.calls["rollback"] == 1
        assert campus_data.enrollments == []

    @pytest.mark.asyncio
    async def test_failed_existing_lookup(self, writer, store, student, section_a_offerings, cse):
        """Test a failing pre-check never inserts."""
        store.fail("list_enrollments")

        result = await writer.reconcile(student.id, section_a_offerings, cse["year"].id)

        assert result.success is False
        assert result.errors == ["Error during auto-enrollment: Connection lost"]
        assert store.calls["add_enrollment"] == 0

    @pytest.mark.asyncio
    async def test_failed_rollback_still_reports_error(self, writer, store, student, cse):
        """Test a rollback failure after a failed commit still returns a result."""
        store.fail("commit")
        store.fail("rollback", DatabaseError("Failed to roll back transaction"))

        result = await writer.reconcile(student.id, [cse["offerings"]["CS201-A"]], cse["year"].id)

        assert result.success is False
        assert result.errors == ["Error during auto-enrollment: Connection lost"]

    @pytest.mark.asyncio
    async def test_lost_connection_on_sqlalchemy_store(self, cse):
        """Test commit and rollback both failing on a real store session."""
        db = AsyncMock()
        db.add = MagicMock()
        no_rows = MagicMock(**{"scalars.return_value.all.return_value": []})
        db.execute = AsyncMock(return_value=no_rows)
        db.begin_nested = MagicMock(return_value=AsyncMock())
        db.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("connection lost"))
        )
        db.rollback = AsyncMock(
            side_effect=OperationalError("ROLLBACK", {}, Exception("connection lost"))
        )
        writer = EnrollmentWriter(SQLAlchemyAcademicStore(db))

        result = await writer.reconcile("s1", [cse["offerings"]["CS201-A"]], "y1")

        assert result.success is False
        assert result.enrollments_created == 0
        assert result.errors[0].startswith(
            "Error during auto-enrollment: Failed to commit transaction"
        )
        db.rollback.assert_awaited_once()
