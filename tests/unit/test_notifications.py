# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for notification dispatch and delivery channels."""

import importlib
import sys
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest
from pydantic import SecretStr

from src.core.config.settings import FirebaseSettings, SMTPSettings
from src.infrastructure.background.broker import Queues
from src.infrastructure.background.tasks.notifications import send_email_task, send_push_task
from src.infrastructure.notifications import (
    ChannelType,
    DeliveryStatus,
    EmailChannel,
    NotificationDispatcher,
    NotificationPayload,
    PushChannel,
)
from src.infrastructure.notifications.templates import WELCOME_SUBJECT, welcome_email


@pytest.fixture
def payload() -> NotificationPayload:
    return NotificationPayload(
        destination="omar@parents.com",
        subject="Hello",
        body="Plain body",
        html="<p>Plain body</p>",
    )


@pytest.fixture
def smtp_settings() -> SMTPSettings:
    return SMTPSettings(
        host="smtp.ehtimami.com",
        port=587,
        username="mailer",
        password=SecretStr("mailer-pass"),
    )


class TestNotificationDispatcher:
    """Tests for queueing notifications."""

    def test_send_email_enqueues_message(self) -> None:
        broker = send_email_task.broker
        broker.flush_all()

        queued = NotificationDispatcher().send_email("omar@parents.com", "Hello", "Body")

        assert queued is True
        assert broker.queues[Queues.NOTIFICATIONS].qsize() == 1

    def test_send_push_enqueues_message(self) -> None:
        broker = send_push_task.broker
        broker.flush_all()

        queued = NotificationDispatcher().send_push("device-token", "Title", "Body", {"k": "v"})

        assert queued is True
        assert broker.queues[Queues.NOTIFICATIONS].qsize() == 1

    def test_enqueue_failure_returns_false(self) -> None:
        with patch.object(send_email_task, "send", side_effect=ConnectionError("redis down")):
            queued = NotificationDispatcher().send_email("omar@parents.com", "Hello", "Body")

        assert queued is False


class TestPayload:
    """Tests for payload serialization."""

    def test_round_trip_keeps_optional_fields(self, payload: NotificationPayload) -> None:
        restored = NotificationPayload.from_dict(payload.to_dict())

        assert restored == payload

    def test_from_dict_defaults(self) -> None:
        restored = NotificationPayload.from_dict(
            {"destination": "a@ehtimami.com", "subject": "S", "body": "B"}
        )

        assert restored.html is None
        assert restored.data == {}


class TestEmailChannel:
    """Tests for SMTP delivery."""

    @pytest.mark.asyncio
    async def test_skipped_without_credentials(self, payload: NotificationPayload) -> None:
        channel = EmailChannel(SMTPSettings(username=None, password=None))

        result = await channel.send(payload)

        assert result.status == DeliveryStatus.SKIPPED
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_sent_through_smtp(
        self,
        payload: NotificationPayload,
        smtp_settings: SMTPSettings,
    ) -> None:
        with patch("aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            result = await EmailChannel(smtp_settings).send(payload)

        assert result.ok is True
        message = mock_send.call_args.args[0]
        assert message["To"] == "omar@parents.com"
        assert message["Subject"] == "Hello"
        assert mock_send.call_args.kwargs["hostname"] == "smtp.ehtimami.com"
        assert result.message_id == message["Message-ID"]

    @pytest.mark.asyncio
    async def test_smtp_error_is_reported(
        self,
        payload: NotificationPayload,
        smtp_settings: SMTPSettings,
    ) -> None:
        with patch(
            "aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPException("refused"),
        ):
            result = await EmailChannel(smtp_settings).send(payload)

        assert result.status == DeliveryStatus.FAILED
        assert "refused" in result.error_message


class TestPushChannel:
    """Tests for FCM delivery."""

    @pytest.mark.asyncio
    async def test_skipped_without_project(self, payload: NotificationPayload) -> None:
        channel = PushChannel(FirebaseSettings(project_id=None, credentials_path=None))

        result = await channel.send(payload)

        assert result.status == DeliveryStatus.SKIPPED

    def test_module_imports_without_requests_transport(self, monkeypatch) -> None:
        monkeypatch.setitem(sys.modules, "google.auth.transport.requests", None)
        monkeypatch.delitem(sys.modules, "src.infrastructure.notifications.channels.push")

        module = importlib.import_module("src.infrastructure.notifications.channels.push")

        channel = module.PushChannel(FirebaseSettings(project_id=None, credentials_path=None))
        assert channel.channel_type == ChannelType.PUSH


class TestTemplates:
    """Tests for email bodies."""

    def test_welcome_email_contains_credentials(self) -> None:
        message = welcome_email("Omar", "omar@parents.com", "abc123", "parent")

        assert message.subject == WELCOME_SUBJECT
        assert "Hello Omar" in message.body
        assert "Email: omar@parents.com" in message.body
        assert "Password: abc123" in message.body
