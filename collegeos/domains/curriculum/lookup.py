# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core curriculum lookup.

A department's core curriculum is the set of catalog courses of type
``core``: every student of the department must take them, as opposed to
department and open electives. Only core courses are auto-enrolled.

Example:
    >>> lookup = CoreCurriculumLookup(store)
    >>> courses = await lookup.core_courses(college_id, department_id)
    >>> [course.code for course in courses]
    ['CS101', 'CS201']
"""

import logging

from collegeos.infrastructure.database.models import Course, CourseType
from collegeos.infrastructure.database.store import AcademicStore, CourseQuery

logger = logging.getLogger(__name__)


class CoreCurriculumLookup:
    """Looks up the catalog courses a department requires.

    Attributes:
        store: Academic data store.
    """

    def __init__(self, store: AcademicStore) -> None:
        self.store = store

    async def core_courses(self, college_id: str, department_id: str) -> list[Course]:
        """Get the core courses of a department.

        Args:
            college_id: College identifier.
            department_id: Department identifier.

        Returns:
            Core courses ordered by code. Empty if the department has no
            core curriculum defined.
        """
        courses = await self.courses(college_id, department_id, CourseType.CORE)

        if not courses:
            logger.info(
                "No core courses defined: college=%s, department=%s",
                college_id,
                department_id,
            )

        return courses

    async def courses(
        self,
        college_id: str,
        department_id: str,
        course_type: CourseType | None = None,
    ) -> list[Course]:
        """Get the courses of a department, optionally of one type.

        Args:
            college_id: College identifier.
            department_id: Department identifier.
            course_type: Course type filter. None returns every type.

        Returns:
            Matching courses ordered by code.
        """
        return await self.store.list_courses(
            CourseQuery(
                college_id=str(college_id),
                department_id=str(department_id),
                course_type=course_type,
            )
        )
