"""CollegeOS Enrollment Engine.

Academic enrollment and semester progression for college administration:
resolves the academic calendar, locates core course offerings and keeps
student enrollments free of duplicates.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
