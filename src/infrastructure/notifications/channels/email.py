# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Email notification channel using async SMTP.

Configuration comes from SMTPSettings (SMTP_HOST, SMTP_PORT, SMTP_USERNAME,
SMTP_PASSWORD, SMTP_USE_TLS, SMTP_FROM_EMAIL, SMTP_FROM_NAME).
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

import aiosmtplib

from src.core.config.settings import SMTPSettings
from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)


class EmailChannel(BaseChannel):
    """Email notification channel using aiosmtplib.

    Attributes:
        _settings: SMTP settings.
    """

    def __init__(self, settings: SMTPSettings) -> None:
        super().__init__()
        self._settings = settings

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.EMAIL

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send an email via SMTP.

        Args:
            payload: The notification payload; destination is the address.

        Returns:
            ChannelResult with delivery status.
        """
        if not self._settings.is_configured:
            self.logger.warning(
                "Email to %s skipped: SMTP_USERNAME or SMTP_PASSWORD not set",
                payload.destination,
            )
            return self.create_skipped_result("Email channel not configured")

        if not payload.destination:
            return self.create_skipped_result("No recipient email address")

        message = self._build_message(payload)

        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.host,
                port=self._settings.port,
                username=self._settings.username,
                password=self._settings.password.get_secret_value(),
                start_tls=self._settings.use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            self.logger.error(
                "Failed to send email to %s: %s",
                payload.destination,
                str(e),
                exc_info=True,
            )
            return self.create_failure_result(f"SMTP error: {str(e)}")

        self.logger.info("Email sent to %s: %s", payload.destination, payload.subject)
        return self.create_success_result(message_id=message["Message-ID"])

    def _build_message(self, payload: NotificationPayload) -> MIMEMultipart:
        """Build a multipart message with plain text and optional HTML."""
        message = MIMEMultipart("alternative")
        message["From"] = f"{self._settings.from_name} <{self._settings.from_email}>"
        message["To"] = payload.destination
        message["Subject"] = payload.subject
        message["Message-ID"] = make_msgid(domain=self._settings.from_email.split("@")[-1])

        message.attach(MIMEText(payload.body, "plain", "utf-8"))
        if payload.html:
            message.attach(MIMEText(payload.html, "html", "utf-8"))

        return message
