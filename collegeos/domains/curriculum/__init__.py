# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum domain package.

This package provides the core curriculum lookup for departments.
"""

from collegeos.domains.curriculum.lookup import CoreCurriculumLookup

__all__ = [
    "CoreCurriculumLookup",
]
