# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Contains the Alembic environment and the schema revisions of the college
database (colleges, academic calendar, catalog, offerings, students and
enrollments).
"""
