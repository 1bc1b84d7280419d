# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Push notification channel using Firebase Cloud Messaging.

Sends to a single device token through the FCM HTTP v1 API. Configuration
comes from FirebaseSettings (FIREBASE_PROJECT_ID, FIREBASE_CREDENTIALS_PATH).
"""

import asyncio
import os
from typing import Any

import httpx
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account

from src.core.config.settings import FirebaseSettings
from src.infrastructure.notifications.channels.base import (
    BaseChannel,
    ChannelResult,
    ChannelType,
    NotificationPayload,
)

FCM_API_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"


class PushChannel(BaseChannel):
    """Push notification channel using FCM.

    Attributes:
        _settings: Firebase settings.
        _credentials: Loaded service account credentials.
    """

    def __init__(self, settings: FirebaseSettings) -> None:
        super().__init__()
        self._settings = settings
        self._credentials: service_account.Credentials | None = None
        self._init_error: str | None = None

    @property
    def channel_type(self) -> ChannelType:
        return ChannelType.PUSH

    def _ensure_credentials(self) -> bool:
        """Load service account credentials once."""
        if self._credentials is not None:
            return True
        if self._init_error:
            return False

        if not self._settings.is_configured:
            self._init_error = "Firebase credentials not configured"
            self.logger.warning(
                "Push notifications disabled: FIREBASE_CREDENTIALS_PATH or "
                "FIREBASE_PROJECT_ID not set"
            )
            return False

        path = self._settings.credentials_path
        if not os.path.exists(path):
            self._init_error = f"Credentials file not found: {path}"
            self.logger.error(self._init_error)
            return False

        try:
            self._credentials = service_account.Credentials.from_service_account_file(
                path,
                scopes=[FCM_SCOPE],
            )
        except (GoogleAuthError, ValueError) as e:
            self._init_error = f"Failed to load credentials: {str(e)}"
            self.logger.error(self._init_error, exc_info=True)
            return False

        self.logger.info("FCM push channel initialized for project %s", self._settings.project_id)
        return True

    def _get_auth_request(self) -> Any:
        """Build the transport used to refresh credentials."""
        from google.auth.transport.requests import Request

        return Request()

    async def _get_access_token(self) -> str | None:
        """Refresh and return the OAuth2 access token."""
        try:
            await asyncio.to_thread(self._credentials.refresh, self._get_auth_request())
        except GoogleAuthError as e:
            self.logger.error("Failed to get FCM access token: %s", str(e))
            return None
        return self._credentials.token

    async def send(self, payload: NotificationPayload) -> ChannelResult:
        """Send a push notification to one device token.

        Args:
            payload: The notification payload; destination is the device token.

        Returns:
            ChannelResult with delivery status.
        """
        if not self._ensure_credentials():
            return self.create_skipped_result(self._init_error or "Push channel not configured")

        if not payload.destination:
            return self.create_skipped_result("No device token")

        access_token = await self._get_access_token()
        if not access_token:
            return self.create_failure_result("Failed to obtain access token")

        url = FCM_API_URL.format(project_id=self._settings.project_id)
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(
                    url,
                    headers=headers,
                    json={"message": self._build_fcm_message(payload)},
                )
        except httpx.HTTPError as e:
            self.logger.error("Failed to send push: %s", str(e))
            return self.create_failure_result(str(e))

        if response.status_code != 200:
            self.logger.warning("FCM request failed (%d): %s", response.status_code, response.text)
            return self.create_failure_result(f"FCM error {response.status_code}")

        message_id = response.json().get("name", "").split("/")[-1]
        self.logger.debug("Push sent to %s...: %s", payload.destination[:20], message_id)
        return self.create_success_result(message_id=message_id)

    def _build_fcm_message(self, payload: NotificationPayload) -> dict[str, Any]:
        """Build the FCM v1 message body."""
        return {
            "token": payload.destination,
            "notification": {
                "title": payload.subject,
                "body": payload.body,
            },
            "data": {key: str(value) for key, value in payload.data.items()},
        }
