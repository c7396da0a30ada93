# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

This package provides the SQLAlchemy async connection to the college
database and the AcademicStore used by the enrollment engine.

Example:
    from collegeos.infrastructure.database import init_database, open_store

    await init_database(settings)
    async with open_store() as store:
        years = await store.list_academic_years(AcademicYearQuery(college_id))
"""

from collegeos.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from collegeos.infrastructure.database.store import (
    AcademicStore,
    AcademicYearQuery,
    CourseQuery,
    EnrollmentQuery,
    OfferingQuery,
    SQLAlchemyAcademicStore,
    StudentQuery,
    open_store,
)

__all__ = [
    # Connection
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
    # Store
    "AcademicStore",
    "AcademicYearQuery",
    "CourseQuery",
    "EnrollmentQuery",
    "OfferingQuery",
    "SQLAlchemyAcademicStore",
    "StudentQuery",
    "open_store",
]
