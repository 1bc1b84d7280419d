# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fire-and-forget notification dispatch.

Services call the dispatcher only after their transaction has committed.
The dispatcher hands a message to the task queue and returns; a failure to
enqueue is logged and swallowed so it can never affect the operation that
triggered it.

Example:
    dispatcher = NotificationDispatcher()
    dispatcher.send_email("parent@example.com", "Welcome", "Your account ...")
"""

import logging

from src.infrastructure.notifications.channels import NotificationPayload

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Enqueues email and push deliveries on the notifications queue."""

    def send_email(
        self,
        destination: str,
        subject: str,
        body: str,
        html: str | None = None,
    ) -> bool:
        """Queue an email.

        Args:
            destination: Recipient address.
            subject: Email subject.
            body: Plain text body.
            html: Optional HTML body.

        Returns:
            True if the message was queued, False if queuing failed.
        """
        from src.infrastructure.background.tasks.notifications import send_email_task

        payload = NotificationPayload(destination=destination, subject=subject, body=body, html=html)
        try:
            send_email_task.send(payload.to_dict())
        except Exception as e:
            logger.error("Failed to queue email '%s' to %s: %s", subject, destination, str(e))
            return False

        logger.debug("Queued email '%s' to %s", subject, destination)
        return True

    def send_push(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict[str, str] | None = None,
    ) -> bool:
        """Queue a push notification.

        Args:
            device_token: FCM device token.
            title: Notification title.
            body: Notification body.
            data: Optional data payload.

        Returns:
            True if the message was queued, False if queuing failed.
        """
        from src.infrastructure.background.tasks.notifications import send_push_task

        payload = NotificationPayload(
            destination=device_token,
            subject=title,
            body=body,
            data=data or {},
        )
        try:
            send_push_task.send(payload.to_dict())
        except Exception as e:
            logger.error("Failed to queue push '%s': %s", title, str(e))
            return False

        logger.debug("Queued push '%s'", title)
        return True
