# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification delivery tasks.

Messages are delivered at most once: channels report failures as results
instead of raising, and the actors never retry.
"""

import logging
from typing import Any

import dramatiq

from src.infrastructure.background.broker import Priority, Queues, setup_dramatiq
from src.infrastructure.background.tasks.base import run_async

# Setup broker before defining actors
setup_dramatiq()

logger = logging.getLogger(__name__)


@dramatiq.actor(
    queue_name=Queues.NOTIFICATIONS,
    max_retries=0,
    time_limit=60000,  # 1 minute
    priority=Priority.NORMAL,
)
def send_email_task(payload: dict[str, Any]) -> dict[str, Any]:
    """Deliver one email.

    Args:
        payload: Serialized NotificationPayload; destination is the address.

    Returns:
        Delivery outcome.
    """
    from src.core.config import get_settings
    from src.infrastructure.notifications.channels import NotificationPayload
    from src.infrastructure.notifications.service import NotificationService

    service = NotificationService(get_settings())
    result = run_async(service.send_email(NotificationPayload.from_dict(payload)))
    return {"status": result.status.value, "error": result.error_message}


@dramatiq.actor(
    queue_name=Queues.NOTIFICATIONS,
    max_retries=0,
    time_limit=60000,  # 1 minute
    priority=Priority.LOW,
)
def send_push_task(payload: dict[str, Any]) -> dict[str, Any]:
    """Deliver one push notification.

    Args:
        payload: Serialized NotificationPayload; destination is the device token.

    Returns:
        Delivery outcome.
    """
    from src.core.config import get_settings
    from src.infrastructure.notifications.channels import NotificationPayload
    from src.infrastructure.notifications.service import NotificationService

    service = NotificationService(get_settings())
    result = run_async(service.send_push(NotificationPayload.from_dict(payload)))
    return {"status": result.status.value, "error": result.error_message}


def get_notification_actors() -> list[dramatiq.Actor]:
    """Get all notification actors for registration."""
    return [send_email_task, send_push_task]
