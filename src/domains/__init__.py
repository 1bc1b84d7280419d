# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for Ehtimami.

This package contains domain services that encapsulate business logic.
Each service receives the request's database session and commits its
workflow as a single transaction.

Domains:
    auth: Password hashing, JWT tokens, registration, login and resets.
    school: Schools and their manager accounts.
    class_: Classes, teacher links and enrollments.
    student: Students, enrollments and parent links.
    teacher: Teacher registration, assignment and profile updates.
    role: Role catalogue.
    user: User reads, verification and profile updates.
"""
