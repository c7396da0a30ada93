# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for CollegeOS.

Domains:
    academic_year: Active academic calendar resolution.
    curriculum: Core curriculum lookup per department.
    offering: Offering location and semester catalog views.
    enrollment: Duplicate-free enrollment writing.
    progression: Semester enrollment, promotion and bulk operations.
"""
