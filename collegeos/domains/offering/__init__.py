# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course offering domain package.

This package provides:
- Offering location across candidate academic years
- Read-only semester groupings of a department's offerings
"""

from collegeos.domains.offering.locator import LocatedOfferings, OfferingLocator
from collegeos.domains.offering.view import SemesterCourseView

__all__ = [
    "LocatedOfferings",
    "OfferingLocator",
    "SemesterCourseView",
]
