# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""College database schema revisions, applied in the order listed by runner.MIGRATIONS."""
