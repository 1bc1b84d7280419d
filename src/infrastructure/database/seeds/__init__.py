# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package: built-in roles and the initial admin account."""

from src.infrastructure.database.seeds.roles import (
    DEFAULT_ROLES,
    seed_admin_user,
    seed_database,
    seed_roles,
)

__all__ = ["DEFAULT_ROLES", "seed_admin_user", "seed_database", "seed_roles"]
