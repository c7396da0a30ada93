# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering location across candidate academic years.

Given the core courses of a department, a semester and the active academic
years (newest first), the locator returns the offerings of the first year
that has any. Years are never merged: a newer year without offerings for
the semester falls through to the next one, and the first year with data
wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from collegeos.infrastructure.database.models import AcademicYear, CourseOffering
from collegeos.infrastructure.database.store import AcademicStore, OfferingQuery, as_id_tuple

logger = logging.getLogger(__name__)


@dataclass
class LocatedOfferings:
    """Offerings found for a semester and the year they belong to.

    Attributes:
        year: Academic year the offerings were taken from, None if not found.
        offerings: Offerings of that year. Empty if not found.
    """

    year: AcademicYear | None = None
    offerings: list[CourseOffering] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """Whether any year yielded offerings."""
        return self.year is not None and bool(self.offerings)


class OfferingLocator:
    """Finds the course offerings a student should be enrolled in.

    Attributes:
        store: Academic data store.
    """

    def __init__(self, store: AcademicStore) -> None:
        """Initialize the locator.

        Args:
            store: Academic data store.
        """
        self.store = store

    async def locate(
        self,
        course_ids: Sequence[str],
        semester: int,
        candidate_years: Sequence[AcademicYear],
        section_id: str | None = None,
    ) -> LocatedOfferings:
        """Locate offerings of the given courses for a semester.

        Args:
            course_ids: Candidate course identifiers.
            semester: Semester number.
            candidate_years: Academic years to try, in order of preference.
            section_id: Student's section. When None no section filter is
                applied, so students without a section see every offering.

        Returns:
            Offerings of the first year that has at least one, or an empty
            LocatedOfferings if no year does.
        """
        ids = as_id_tuple(course_ids)
        if not ids:
            return LocatedOfferings()

        for year in candidate_years:
            offerings = await self.store.list_offerings(
                OfferingQuery(
                    course_ids=ids,
                    year_id=year.id,
                    semester=semester,
                    section_id=section_id,
                )
            )

            logger.debug(
                "Found %d offerings for semester %d in academic year %s",
                len(offerings),
                semester,
                year.label,
            )

            if offerings:
                logger.info(
                    "Using academic year %s with %d offerings for semester %d",
                    year.label,
                    len(offerings),
                    semester,
                )
                return LocatedOfferings(year=year, offerings=offerings)

        return LocatedOfferings()

    async def offerings_in_year(
        self,
        course_ids: Sequence[str],
        year_id: str,
        semester: int | None = None,
    ) -> list[CourseOffering]:
        """List offerings of the given courses in one academic year.

        Args:
            course_ids: Course identifiers.
            year_id: Academic year identifier.
            semester: Only this semester. None returns every semester.

        Returns:
            Offerings ordered by semester, then course code.
        """
        ids = as_id_tuple(course_ids)
        if not ids:
            return []
        return await self.store.list_offerings(
            OfferingQuery(course_ids=ids, year_id=str(year_id), semester=semester)
        )
