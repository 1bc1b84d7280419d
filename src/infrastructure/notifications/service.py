# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Notification service used by worker tasks.

Wraps the email and push channels behind one send contract. Delivery
outcomes are logged here; nothing is raised to the caller.
"""

import logging

from src.core.config.settings import Settings
from src.infrastructure.notifications.channels import (
    ChannelResult,
    DeliveryStatus,
    EmailChannel,
    NotificationPayload,
    PushChannel,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """Delivers notification payloads through the configured channels.

    Attributes:
        _email: Email channel.
        _push: Push channel.
    """

    def __init__(self, settings: Settings) -> None:
        self._email = EmailChannel(settings.smtp)
        self._push = PushChannel(settings.firebase)

    async def send_email(self, payload: NotificationPayload) -> ChannelResult:
        """Send an email and log the outcome."""
        result = await self._email.send(payload)
        self._log_result(result, payload)
        return result

    async def send_push(self, payload: NotificationPayload) -> ChannelResult:
        """Send a push notification and log the outcome."""
        result = await self._push.send(payload)
        self._log_result(result, payload)
        return result

    def _log_result(self, result: ChannelResult, payload: NotificationPayload) -> None:
        if result.status == DeliveryStatus.FAILED:
            logger.error(
                "%s delivery failed for '%s': %s",
                result.channel.value,
                payload.subject,
                result.error_message,
            )
        elif result.status == DeliveryStatus.SKIPPED:
            logger.info(
                "%s delivery skipped for '%s': %s",
                result.channel.value,
                payload.subject,
                result.error_message,
            )
