# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User, role, profile and membership tables.

Relationships are read-only projections; writes go through the foreign key
columns and the association rows (UserRole, UserSchool) so every link is an
explicit insert or delete inside the owning service transaction.
"""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IntegerIdMixin, TimestampMixin
from src.utils.datetime import utc_now

if TYPE_CHECKING:
    from src.infrastructure.database.models.class_ import Class
    from src.infrastructure.database.models.school import School
    from src.infrastructure.database.models.student import Parent, Student


class UserStatus(str, Enum):
    """Account status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    TERMINATED = "TERMINATED"


class RoleName(str, Enum):
    """Built-in role names."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"
    SCHOOL_MANAGER = "school_manager"
    EMPLOYEE = "employee"


class Role(Base, IntegerIdMixin):
    """Named capability group."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    users: Mapped[list["User"]] = relationship(
        secondary="user_roles",
        viewonly=True,
        order_by="User.id",
    )


class UserRole(Base):
    """Role assignment."""

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"), primary_key=True)


class User(Base, IntegerIdMixin, TimestampMixin):
    """Account of any kind: admin, manager, teacher, student, parent, employee."""

    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), unique=True)
    status: Mapped[str] = mapped_column(
        String(20), default=UserStatus.ACTIVE.value, nullable=False
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    profile: Mapped[Optional["UserProfile"]] = relationship(viewonly=True)
    roles: Mapped[list[Role]] = relationship(
        secondary="user_roles",
        viewonly=True,
        order_by=Role.id,
    )
    schools: Mapped[list["School"]] = relationship(
        secondary="user_schools",
        viewonly=True,
        order_by="School.id",
    )
    teacher_classes: Mapped[list["Class"]] = relationship(
        secondary="class_teachers",
        viewonly=True,
        order_by="Class.id",
    )
    student: Mapped[Optional["Student"]] = relationship(viewonly=True)
    parent: Mapped[Optional["Parent"]] = relationship(viewonly=True)

    @property
    def role_names(self) -> list[str]:
        """Names of the roles held by this user."""
        return [role.name for role in self.roles]

    def has_role(self, name: str) -> bool:
        """Check role membership by name."""
        return name in self.role_names


class UserProfile(Base, IntegerIdMixin, TimestampMixin):
    """Extended personal details owned by exactly one user."""

    __tablename__ = "user_profiles"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text)
    avatar: Mapped[str | None] = mapped_column(String(500))
    middle_name: Mapped[str | None] = mapped_column(String(100))
    nickname: Mapped[str | None] = mapped_column(String(100))
    occupation: Mapped[str | None] = mapped_column(String(100))
    company: Mapped[str | None] = mapped_column(String(100))
    website: Mapped[str | None] = mapped_column(String(500))
    social_links: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    preferences: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    interests: Mapped[list[str] | None] = mapped_column(JSON)
    marital_status: Mapped[str | None] = mapped_column(String(20))
    nationality: Mapped[str | None] = mapped_column(String(100))
    birth_date: Mapped[date | None] = mapped_column(Date)
    join_date: Mapped[date | None] = mapped_column(Date)
    gender: Mapped[int | None] = mapped_column(SmallInteger)
    address: Mapped[str | None] = mapped_column(String(500))
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    emergency_contacts: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON)
    profile_visibility: Mapped[str] = mapped_column(String(20), default="public", nullable=False)
    profile_banner: Mapped[str | None] = mapped_column(String(500))


class UserSchool(Base, IntegerIdMixin):
    """School membership of a user (teacher, manager, staff)."""

    __tablename__ = "user_schools"
    __table_args__ = (UniqueConstraint("user_id", "school_id"),)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id"), nullable=False)
    role: Mapped[str | None] = mapped_column(String(50))


class PasswordResetToken(Base, IntegerIdMixin):
    """Single-use password reset token."""

    __tablename__ = "password_reset_tokens"

    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    user: Mapped[User] = relationship(viewonly=True)


__all__ = [
    "PasswordResetToken",
    "Role",
    "RoleName",
    "User",
    "UserProfile",
    "UserRole",
    "UserSchool",
    "UserStatus",
]
