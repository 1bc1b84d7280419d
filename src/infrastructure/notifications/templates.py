# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Plain text email bodies sent by the domain services."""

from dataclasses import dataclass

WELCOME_SUBJECT = "Welcome to Ehtimami System"
RESET_SUBJECT = "Reset your password"
RESET_DONE_SUBJECT = "Your password has been successfully reset"


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    body: str


def welcome_email(first_name: str, email: str, password: str, role_label: str) -> EmailMessage:
    """Credentials email for an account created on the user's behalf."""
    body = (
        f"Hello {first_name},\n\n"
        f"An Ehtimami {role_label} account has been created for you.\n\n"
        f"Email: {email}\n"
        f"Password: {password}\n\n"
        "Please sign in and change your password as soon as possible.\n"
    )
    return EmailMessage(subject=WELCOME_SUBJECT, body=body)


def password_reset_email(first_name: str, link: str, expire_minutes: int) -> EmailMessage:
    body = (
        f"Hello {first_name},\n\n"
        "We received a request to reset your password. Open the link below to "
        "choose a new one:\n\n"
        f"{link}\n\n"
        f"The link expires in {expire_minutes} minutes. If you did not ask for "
        "a reset, you can ignore this email.\n"
    )
    return EmailMessage(subject=RESET_SUBJECT, body=body)


def password_reset_done_email(first_name: str, support_email: str) -> EmailMessage:
    body = (
        f"Hello {first_name},\n\n"
        "Your password has been changed. If this was not you, contact "
        f"{support_email} right away.\n"
    )
    return EmailMessage(subject=RESET_DONE_SUBJECT, body=body)
