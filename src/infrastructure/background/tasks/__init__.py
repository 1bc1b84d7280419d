# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task actors.

Running Workers:
    dramatiq src.infrastructure.background.tasks --processes 2 --threads 4
"""

from src.infrastructure.background.tasks.notifications import (
    get_notification_actors,
    send_email_task,
    send_push_task,
)

__all__ = [
    "get_notification_actors",
    "send_email_task",
    "send_push_task",
]
