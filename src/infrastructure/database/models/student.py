# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student, enrollment and parent tables."""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, IntegerIdMixin, TimestampMixin

if TYPE_CHECKING:
    from src.infrastructure.database.models.class_ import Class
    from src.infrastructure.database.models.school import School
    from src.infrastructure.database.models.user import User


class Student(Base, IntegerIdMixin, TimestampMixin):
    """Student record attached to a user account."""

    __tablename__ = "students"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id"), nullable=False)
    grade: Mapped[str] = mapped_column(String(50), nullable=False)
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    student_no: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    admission_date: Mapped[date | None] = mapped_column(Date)
    main_class_id: Mapped[int | None] = mapped_column(ForeignKey("classes.id"))
    guardian_name: Mapped[str | None] = mapped_column(String(200))
    guardian_phone: Mapped[str | None] = mapped_column(String(30))
    health_notes: Mapped[str | None] = mapped_column(Text)
    special_needs: Mapped[str | None] = mapped_column(Text)
    allergies: Mapped[str | None] = mapped_column(Text)

    user: Mapped["User"] = relationship(viewonly=True)
    school: Mapped["School"] = relationship(viewonly=True)
    main_class: Mapped[Optional["Class"]] = relationship(viewonly=True)
    classes: Mapped[list["Class"]] = relationship(
        secondary="student_classes",
        viewonly=True,
        order_by="Class.id",
    )
    parents: Mapped[list["Parent"]] = relationship(
        secondary="parent_students",
        viewonly=True,
        order_by="Parent.id",
    )


class StudentClass(Base, IntegerIdMixin):
    """Enrollment of a student in a class."""

    __tablename__ = "student_classes"
    __table_args__ = (UniqueConstraint("student_id", "class_id"),)

    student_id: Mapped[int] = mapped_column(ForeignKey("students.id"), nullable=False)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id"), nullable=False)


class Parent(Base, IntegerIdMixin, TimestampMixin):
    """Parent record attached to a user account."""

    __tablename__ = "parents"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)

    user: Mapped["User"] = relationship(viewonly=True)
    children: Mapped[list[Student]] = relationship(
        secondary="parent_students",
        viewonly=True,
        order_by=Student.id,
    )


class ParentStudent(Base, IntegerIdMixin):
    """Parent to child link."""

    __tablename__ = "parent_students"
    __table_args__ = (UniqueConstraint("parent_id", "student_id"),)

    parent_id: Mapped[int] = mapped_column(ForeignKey("parents.id"), nullable=False)
    student_id: Mapped[int] = mapped_column(ForeignKey("students.id"), nullable=False)


__all__ = ["Parent", "ParentStudent", "Student", "StudentClass"]
