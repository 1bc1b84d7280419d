# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification channels.

- EmailChannel: Sends email via SMTP (aiosmtplib)
- PushChannel: Sends push notifications via Firebase Cloud Messaging

Usage:
    from src.infrastructure.notifications.channels import EmailChannel, NotificationPayload

    email = EmailChannel(settings.smtp)
    result = await email.send(
        NotificationPayload(destination="parent@example.com", subject="Hi", body="...")
    )
"""

from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    DeliveryStatus,
    NotificationPayload,
)
from src.infrastructure.notifications.channels.email import EmailChannel
from src.infrastructure.notifications.channels.push import PushChannel

__all__ = [
    # Base types
    "BaseChannel",
    "ChannelResult",
    "ChannelType",
    "DeliveryStatus",
    "NotificationPayload",
    # Channels
    "EmailChannel",
    "PushChannel",
]
