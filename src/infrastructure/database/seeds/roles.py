# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role and initial admin seed data.

Seeding is idempotent: existing roles and an existing admin account are left
untouched, so it is safe to run on every startup.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.auth.password import hash_password
from src.infrastructure.database.models import (
    Role,
    RoleName,
    User,
    UserProfile,
    UserRole,
    UserStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_ROLES = [role.value for role in RoleName]


async def seed_roles(session: AsyncSession) -> dict[str, Role]:
    """Ensure every built-in role exists.

    Args:
        session: Database session.

    Returns:
        Mapping of role name to Role row.
    """
    result = await session.execute(select(Role))
    roles = {role.name: role for role in result.scalars().all()}

    created = 0
    for name in DEFAULT_ROLES:
        if name not in roles:
            role = Role(name=name)
            session.add(role)
            roles[name] = role
            created += 1

    await session.flush()
    logger.info("Seeded %d roles (%d already present)", created, len(roles) - created)
    return roles


async def seed_admin_user(
    session: AsyncSession,
    roles: dict[str, Role],
    admin_email: str,
    admin_password: str,
) -> Optional[User]:
    """Create the initial admin account if it does not exist.

    Args:
        session: Database session.
        roles: Seeded roles by name.
        admin_email: Admin email address.
        admin_password: Admin password in plain text.

    Returns:
        The created admin user, or None if it already existed.
    """
    existing = await session.execute(select(User).where(User.email == admin_email))
    if existing.scalar_one_or_none() is not None:
        return None

    user = User(
        first_name="System",
        last_name="Admin",
        email=admin_email,
        password=hash_password(admin_password),
        status=UserStatus.ACTIVE.value,
        is_verified=True,
    )
    session.add(user)
    await session.flush()

    session.add(UserRole(user_id=user.id, role_id=roles[RoleName.ADMIN.value].id))
    session.add(UserProfile(user_id=user.id, bio="System administrator"))
    await session.flush()

    logger.info("Seeded admin user %s", admin_email)
    return user


async def seed_database(
    session: AsyncSession,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> dict:
    """Seed roles and, when a password is given, the admin account.

    Args:
        session: Database session.
        admin_email: Admin email address.
        admin_password: Admin password. No admin is created without it.

    Returns:
        Dictionary with seeded entities.
    """
    logger.info("Seeding database...")

    roles = await seed_roles(session)

    admin = None
    if admin_email and admin_password:
        admin = await seed_admin_user(session, roles, admin_email, admin_password)

    await session.commit()

    logger.info("Database seeding complete")

    return {"roles": roles, "admin": admin}


if __name__ == "__main__":
    from src.core.config import get_settings
    from src.infrastructure.database.connection import (
        build_engine,
        build_sessionmaker,
        create_all_tables,
    )

    async def main():
        settings = get_settings()
        engine = build_engine(settings.database)
        await create_all_tables(engine)
        password = settings.database.admin_password
        async with build_sessionmaker(engine)() as session:
            await seed_database(
                session,
                admin_email=settings.database.admin_email,
                admin_password=password.get_secret_value() if password else None,
            )
        await engine.dispose()

    asyncio.run(main())
