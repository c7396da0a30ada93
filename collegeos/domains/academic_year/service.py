# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic calendar resolution.

This module provides the AcademicCalendarResolver class for:
- Listing the active academic years of a college, newest first
- Picking the current academic year for single-term views

A college may have several academic years flagged active at once. Callers
that need offerings try them in the order returned here.
"""

from __future__ import annotations

import logging

from collegeos.infrastructure.database.models import AcademicYear
from collegeos.infrastructure.database.store import AcademicStore, AcademicYearQuery

logger = logging.getLogger(__name__)


class AcademicCalendarResolver:
    """Resolves which academic years are in use for a college.

    Attributes:
        store: Academic data store.
    """

    def __init__(self, store: AcademicStore) -> None:
        """Initialize the resolver.

        Args:
            store: Academic data store.
        """
        self.store = store

    async def active_years(self, college_id: str) -> list[AcademicYear]:
        """Get the active academic years of a college.

        Years are ordered by label descending ("2025-26" before "2024-25"),
        so the newest year is preferred.

        Args:
            college_id: College identifier.

        Returns:
            Active academic years, newest first. Empty if the college has no
            active year; callers treat that as "no calendar available".
        """
        years = await self.store.list_academic_years(
            AcademicYearQuery(college_id=str(college_id), is_active=True, newest_first=True)
        )

        logger.debug(
            "Active academic years for college %s: %s",
            college_id,
            [year.label for year in years],
        )

        return years

    async def current_year(self, college_id: str) -> AcademicYear | None:
        """Get the newest active academic year of a college.

        Args:
            college_id: College identifier.

        Returns:
            Newest active academic year, or None if none is active.
        """
        years = await self.active_years(college_id)
        return years[0] if years else None
