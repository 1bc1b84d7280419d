# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

This package provides middleware for request processing:
- AuthMiddleware: JWT authentication.
- RequestLoggingMiddleware: request-scoped log context and access logs.
- limiter: slowapi rate limiter for credential endpoints.
"""

from src.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from src.api.middleware.logging import RequestLoggingMiddleware
from src.api.middleware.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "RequestLoggingMiddleware",
    "get_current_user",
    "limiter",
    "rate_limit_exceeded_handler",
]
