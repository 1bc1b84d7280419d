# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School, school admin and employee tables."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IntegerIdMixin, TimestampMixin
from src.utils.datetime import utc_now

if TYPE_CHECKING:
    from src.infrastructure.database.models.class_ import Class
    from src.infrastructure.database.models.user import User


class SchoolStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SchoolType(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    INTERNATIONAL = "INTERNATIONAL"
    CHARTER = "CHARTER"


class EducationLevel(str, Enum):
    PRIMARY = "PRIMARY"
    MIDDLE = "MIDDLE"
    SECONDARY = "SECONDARY"
    HIGH_SCHOOL = "HIGH_SCHOOL"
    UNIVERSITY = "UNIVERSITY"


class Curriculum(str, Enum):
    SAUDI_NATIONAL = "SAUDI_NATIONAL"
    BRITISH = "BRITISH"
    AMERICAN = "AMERICAN"
    IB = "IB"
    FRENCH = "FRENCH"
    OTHER = "OTHER"


class School(Base, IntegerIdMixin, TimestampMixin):
    """A school and its single manager."""

    __tablename__ = "schools"

    school_unique_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    school_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    school_address: Mapped[str] = mapped_column(String(500), nullable=False)
    school_email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    school_phone: Mapped[str | None] = mapped_column(String(30))
    school_region: Mapped[str | None] = mapped_column(String(100))
    school_city: Mapped[str | None] = mapped_column(String(100))
    school_district: Mapped[str | None] = mapped_column(String(100))
    school_type: Mapped[str] = mapped_column(String(30), nullable=False)
    education_level: Mapped[str | None] = mapped_column(String(30))
    curriculum: Mapped[str | None] = mapped_column(String(30))
    status: Mapped[str] = mapped_column(
        String(20), default=SchoolStatus.ACTIVE.value, nullable=False
    )
    school_lat: Mapped[float | None] = mapped_column(Float)
    school_long: Mapped[float | None] = mapped_column(Float)
    school_logo: Mapped[str | None] = mapped_column(String(500))
    school_manager_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    manager: Mapped["User"] = relationship(viewonly=True)
    classes: Mapped[list["Class"]] = relationship(viewonly=True, order_by="Class.id")
    members: Mapped[list["User"]] = relationship(
        secondary="user_schools",
        viewonly=True,
        order_by="User.id",
    )


class SchoolAdmin(Base, IntegerIdMixin):
    """Links a manager account to the school it administers."""

    __tablename__ = "school_admins"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id"), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="admin", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    school: Mapped[School] = relationship(viewonly=True)


class Employee(Base, IntegerIdMixin, TimestampMixin):
    """Non-teaching staff member."""

    __tablename__ = "employees"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id"), nullable=False)
    position: Mapped[str] = mapped_column(String(100), nullable=False)

    user: Mapped["User"] = relationship(viewonly=True)


__all__ = [
    "Curriculum",
    "EducationLevel",
    "Employee",
    "School",
    "SchoolAdmin",
    "SchoolStatus",
    "SchoolType",
]
