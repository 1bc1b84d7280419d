# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests run services against an in-memory SQLite database
- Integration tests drive the FastAPI application end to end

The environment is prepared before any application module is imported,
since settings and the rate limiter are built at import time.
"""

import os

os.environ.update({
    "ENVIRONMENT": "testing",
    "DEBUG": "true",
    "LOG_LEVEL": "DEBUG",
    "DRAMATIQ_TEST_MODE": "true",
    "BCRYPT_ROUNDS": "4",
    "DB_URL": "sqlite+aiosqlite://",
    "DB_SEED_ON_STARTUP": "true",
    "DB_ADMIN_EMAIL": "admin@ehtimami.com",
    "DB_ADMIN_PASSWORD": "admin-secret-1",
    "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
    "RATE_LIMIT_ENABLED": "false",
    "FRONTEND_BASE_URL": "http://frontend.test",
})

from collections.abc import AsyncGenerator  # noqa: E402
from dataclasses import dataclass, field  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from src.core.config.settings import DatabaseSettings  # noqa: E402
from src.infrastructure.database.connection import (  # noqa: E402
    build_engine,
    build_sessionmaker,
    create_all_tables,
)
from src.infrastructure.database.seeds import seed_roles  # noqa: E402
from src.infrastructure.notifications import NotificationDispatcher  # noqa: E402


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (runs the full app)"
    )


# =============================================================================
# Notification Doubles
# =============================================================================


@dataclass
class SentMessage:
    """A notification captured by RecordingDispatcher."""

    destination: str
    subject: str
    body: str


@dataclass
class RecordingDispatcher(NotificationDispatcher):
    """Dispatcher double that records messages instead of queueing them."""

    emails: list[SentMessage] = field(default_factory=list)
    pushes: list[SentMessage] = field(default_factory=list)

    def send_email(self, destination, subject, body, html=None) -> bool:
        self.emails.append(SentMessage(destination, subject, body))
        return True

    def send_push(self, device_token, title, body, data=None) -> bool:
        self.pushes.append(SentMessage(device_token, title, body))
        return True

    def emails_to(self, destination: str) -> list[SentMessage]:
        return [message for message in self.emails if message.destination == destination]


@pytest.fixture
def notifier() -> RecordingDispatcher:
    """Provide a recording notification dispatcher."""
    return RecordingDispatcher()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with every table."""
    engine = build_engine(DatabaseSettings(url="sqlite+aiosqlite://"))
    await create_all_tables(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on a database seeded with the built-in roles."""
    async with build_sessionmaker(db_engine)() as session:
        await seed_roles(session)
        await session.commit()
        yield session
