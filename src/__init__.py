"""Ehtimami Backend.

School management platform: schools, classes, students, parents, teachers
and the roles that tie them together.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
