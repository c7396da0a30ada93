# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the academic calendar resolver."""

import pytest

from collegeos.domains.academic_year import AcademicCalendarResolver
from collegeos.infrastructure.database.store import AcademicYearQuery


@pytest.fixture
def resolver(store):
    """Create resolver over the in-memory store."""
    return AcademicCalendarResolver(store)


class TestActiveYears:
    """Tests for listing active academic years."""

    @pytest.mark.asyncio
    async def test_active_years_newest_first(self, resolver, campus):
        """Test active years are ordered by label descending."""
        campus.year("2024-25")
        campus.year("2025-26")
        campus.year("2023-24", is_active=False)

        years = await resolver.active_years(campus.college.id)

        assert [y.label for y in years] == ["2025-26", "2024-25"]

    @pytest.mark.asyncio
    async def test_active_years_queries_active_newest_first(self, resolver, store, campus):
        """Test the store is asked for active years, newest first."""
        await resolver.active_years(campus.college.id)

        assert store.queries == [
            AcademicYearQuery(college_id=campus.college.id, is_active=True, newest_first=True)
        ]

    @pytest.mark.asyncio
    async def test_no_active_year_returns_empty(self, resolver, campus):
        """Test a college without active years yields an empty list."""
        campus.year("2024-25", is_active=False)

        assert await resolver.active_years(campus.college.id) == []

    @pytest.mark.asyncio
    async def test_other_college_years_ignored(self, resolver, campus):
        """Test years of another college are not returned."""
        campus.year("2025-26")

        assert await resolver.active_years("other-college") == []


class TestCurrentYear:
    """Tests for resolving the current academic year."""

    @pytest.mark.asyncio
    async def test_current_year_is_newest_active(self, resolver, campus):
        """Test current year is the newest active year."""
        campus.year("2024-25")
        newest = campus.year("2025-26")
        campus.year("2026-27", is_active=False)

        assert await resolver.current_year(campus.college.id) is newest

    @pytest.mark.asyncio
    async def test_current_year_none_without_active_year(self, resolver, campus):
        """Test None is returned when no year is active."""
        assert await resolver.current_year(campus.college.id) is None
