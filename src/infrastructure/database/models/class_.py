# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class and teacher assignment tables."""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IntegerIdMixin, TimestampMixin

if TYPE_CHECKING:
    from src.infrastructure.database.models.school import School
    from src.infrastructure.database.models.student import Student
    from src.infrastructure.database.models.user import User


class ClassStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Class(Base, IntegerIdMixin, TimestampMixin):
    """A class (course section) taught at one school."""

    __tablename__ = "classes"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    grade_level: Mapped[str] = mapped_column(String(50), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(100))
    semester: Mapped[str | None] = mapped_column(String(50))
    academic_year: Mapped[str | None] = mapped_column(String(20))
    teaching_method: Mapped[str | None] = mapped_column(String(50))
    capacity: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    max_students: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    room_number: Mapped[str | None] = mapped_column(String(50))
    class_logo: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        String(20), default=ClassStatus.ACTIVE.value, nullable=False
    )
    days_of_week: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    schedule: Mapped[dict[str, str] | None] = mapped_column(JSON)
    credits: Mapped[int | None] = mapped_column(Integer)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id"), nullable=False)

    school: Mapped["School"] = relationship(viewonly=True)
    teachers: Mapped[list["User"]] = relationship(
        secondary="class_teachers",
        viewonly=True,
        order_by="User.id",
    )
    students: Mapped[list["Student"]] = relationship(
        secondary="student_classes",
        viewonly=True,
        order_by="Student.id",
    )


class ClassTeacher(Base, IntegerIdMixin):
    """Teacher link between a user and a class."""

    __tablename__ = "class_teachers"
    __table_args__ = (UniqueConstraint("teacher_id", "class_id"),)

    teacher_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id"), nullable=False)


__all__ = ["Class", "ClassStatus", "ClassTeacher"]
