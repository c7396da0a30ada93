# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-only catalog views of a department's core course offerings.

Unlike enrollment, these views look at a single academic year: the one
requested explicitly, or else the newest active year. They do not fall back
to older active years when the newest has no offerings, because they show
the current term as configured.
"""

from __future__ import annotations

import logging

from collegeos.domains.academic_year.service import AcademicCalendarResolver
from collegeos.domains.curriculum.lookup import CoreCurriculumLookup
from collegeos.domains.offering.locator import OfferingLocator
from collegeos.infrastructure.database.store import AcademicStore
from collegeos.models.offering import OfferingSummary, SemesterCourseGrouping

logger = logging.getLogger(__name__)

NO_ACTIVE_YEAR_MESSAGE = "No active academic year found"


class SemesterCourseView:
    """Groups a department's core course offerings by semester.

    Attributes:
        store: Academic data store.
    """

    def __init__(self, store: AcademicStore) -> None:
        """Initialize the view.

        Args:
            store: Academic data store.
        """
        self.store = store
        self.calendar = AcademicCalendarResolver(store)
        self.curriculum = CoreCurriculumLookup(store)
        self.locator = OfferingLocator(store)

    async def courses_by_semester(
        self,
        college_id: str,
        department_id: str,
        year_id: str | None = None,
    ) -> SemesterCourseGrouping:
        """Group every core course offering of a department by semester.

        Args:
            college_id: College identifier.
            department_id: Department identifier.
            year_id: Academic year to show. Defaults to the newest active year.

        Returns:
            Grouping keyed by semester ascending, each group ordered by
            course code. Empty, with an error message, when no academic
            year can be resolved.
        """
        grouping = SemesterCourseGrouping(
            college_id=str(college_id),
            department_id=str(department_id),
        )

        target_year_id = await self._target_year_id(college_id, year_id)
        if target_year_id is None:
            grouping.errors.append(NO_ACTIVE_YEAR_MESSAGE)
            return grouping
        grouping.academic_year_id = target_year_id

        courses = await self.curriculum.core_courses(college_id, department_id)
        offerings = await self.locator.offerings_in_year(
            [course.id for course in courses], target_year_id
        )

        by_semester: dict[int, list[OfferingSummary]] = {}
        for offering in offerings:
            by_semester.setdefault(offering.semester, []).append(
                OfferingSummary.from_offering(offering)
            )
        for summaries in by_semester.values():
            summaries.sort(key=lambda s: s.course_code)
        grouping.by_semester = dict(sorted(by_semester.items()))

        logger.debug(
            "Grouped %d offerings into %d semesters: department=%s, year=%s",
            len(offerings),
            grouping.total_semesters,
            department_id,
            target_year_id,
        )

        return grouping

    async def available_courses(
        self,
        college_id: str,
        department_id: str,
        semester: int,
        year_id: str | None = None,
    ) -> list[OfferingSummary]:
        """List the core course offerings of one semester.

        Args:
            college_id: College identifier.
            department_id: Department identifier.
            semester: Semester number.
            year_id: Academic year to show. Defaults to the newest active year.

        Returns:
            Offering summaries ordered by course code. Empty when no academic
            year can be resolved.
        """
        target_year_id = await self._target_year_id(college_id, year_id)
        if target_year_id is None:
            return []

        courses = await self.curriculum.core_courses(college_id, department_id)
        offerings = await self.locator.offerings_in_year(
            [course.id for course in courses], target_year_id, semester=semester
        )
        summaries = [OfferingSummary.from_offering(offering) for offering in offerings]
        return sorted(summaries, key=lambda s: s.course_code)

    async def _target_year_id(self, college_id: str, year_id: str | None) -> str | None:
        if year_id is not None:
            return str(year_id)
        year = await self.calendar.current_year(college_id)
        return year.id if year else None
