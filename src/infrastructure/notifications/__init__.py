# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification infrastructure.

- NotificationDispatcher: queues deliveries after a transaction commits
- NotificationService: performs deliveries inside worker tasks
- channels: email (SMTP) and push (FCM) implementations
- templates: email bodies used by the domain services
"""

from src.infrastructure.notifications.channels import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    NotificationPayload,
    PushChannel,
)
from src.infrastructure.notifications.dispatcher import NotificationDispatcher
from src.infrastructure.notifications.service import NotificationService

__all__ = [
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "EmailChannel",
    "NotificationDispatcher",
    "NotificationPayload",
    "NotificationService",
    "PushChannel",
]
