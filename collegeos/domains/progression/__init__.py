# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progression domain package.

This package provides semester enrollment and promotion:
- ProgressionController: per-student enrollment and promotion
- BulkProgressionService: the same operations over many students
"""

from collegeos.domains.progression.bulk import BulkProgressionService
from collegeos.domains.progression.service import (
    ProgressionController,
    no_offerings_message,
    promotion_message,
)

__all__ = [
    "BulkProgressionService",
    "ProgressionController",
    "no_offerings_message",
    "promotion_message",
]
