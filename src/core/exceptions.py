# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error categories shared by all services.

Every service defines its own exception hierarchy. The leaves of those
hierarchies also inherit one of the categories below, which is what the
API layer uses to pick the HTTP status code:

- DomainError: Base for all expected business errors
- ValidationError: Malformed or inconsistent input (400)
- AuthenticationError: Bad credentials (401)
- AuthorizationError: Caller lacks a role or relationship (403)
- NotFoundError: Referenced entity does not exist (404)
- ConflictError: Uniqueness violation (409)
- PreconditionFailedError: A structural invariant blocks the operation (400)
"""

from http import HTTPStatus


class DomainError(Exception):
    """Base exception for expected business errors.

    Attributes:
        message: Human-readable error description, safe to return to callers.
        details: Optional dictionary with additional error context.
    """

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, details: dict | None = None):
        """Initialize domain error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Input failed shape or reference validation.

    Attributes:
        messages: One entry per offending field or reference.
    """

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, messages: str | list[str], details: dict | None = None):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages), details)


class AuthenticationError(DomainError):
    """Credentials are missing or wrong."""

    status_code = HTTPStatus.UNAUTHORIZED


class AuthorizationError(DomainError):
    """Caller is authenticated but not allowed to do this."""

    status_code = HTTPStatus.FORBIDDEN


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class ConflictError(DomainError):
    """An entity with the same unique identity already exists."""

    status_code = HTTPStatus.CONFLICT


class PreconditionFailedError(DomainError):
    """The current state of related entities blocks the operation."""

    status_code = HTTPStatus.BAD_REQUEST
