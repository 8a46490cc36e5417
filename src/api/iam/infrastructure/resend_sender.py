"""Resend implementation of the notification port.

Posts to the Resend HTTP API with httpx. Delivery problems are reported
as a failed ``NotificationResult``; nothing here raises to the caller.
"""

from __future__ import annotations

import httpx

from iam.infrastructure.email_templates import (
    EmailContent,
    invitation_email,
    welcome_email,
)
from iam.infrastructure.observability import (
    DefaultNotificationProbe,
    NotificationProbe,
)
from iam.ports.notifications import INotificationSender, NotificationResult
from infrastructure.settings import EmailSettings

DISABLED_ERROR = "Email sending is disabled"
NOT_CONFIGURED_ERROR = "Email service not configured"


class ResendNotificationSender(INotificationSender):
    """Sends IAM e-mails through Resend."""

    def __init__(
        self,
        settings: EmailSettings,
        probe: NotificationProbe | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the sender.

        Args:
            settings: E-mail settings (enabled flag, API key, sender)
            probe: Optional domain probe for observability
            transport: Optional httpx transport, used by tests
        """
        self._settings = settings
        self._probe = probe or DefaultNotificationProbe()
        self._transport = transport

    async def send_invitation(
        self,
        to: str,
        inviter_name: str,
        organization_name: str,
        role: str,
        link: str,
        expires_in_days: int,
    ) -> NotificationResult:
        content = invitation_email(
            inviter_name=inviter_name,
            organization_name=organization_name,
            role=role,
            link=link,
            expires_in_days=expires_in_days,
        )
        return await self._send("invitation", to, content)

    async def send_welcome(
        self, to: str, user_name: str, organization_name: str
    ) -> NotificationResult:
        content = welcome_email(user_name=user_name, organization_name=organization_name)
        return await self._send("welcome", to, content)

    async def _send(self, kind: str, to: str, content: EmailContent) -> NotificationResult:
        if not self._settings.enabled:
            self._probe.notification_skipped(kind, DISABLED_ERROR)
            return NotificationResult.failed(DISABLED_ERROR)

        api_key = self._settings.resend_api_key.get_secret_value()
        if not api_key:
            self._probe.notification_skipped(kind, NOT_CONFIGURED_ERROR)
            return NotificationResult.failed(NOT_CONFIGURED_ERROR)

        payload = {
            "from": self._settings.sender,
            "to": [to],
            "subject": content.subject,
            "html": content.html,
            "text": content.text,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self._settings.api_base_url,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post("/emails", json=payload)
        except httpx.HTTPError as e:
            self._probe.notification_failed(kind, str(e))
            return NotificationResult.failed(str(e) or type(e).__name__)

        if response.is_error:
            error = _error_message(response)
            self._probe.notification_failed(kind, error)
            return NotificationResult.failed(error)

        message_id = response.json().get("id")
        self._probe.notification_sent(kind, message_id)
        return NotificationResult.sent(message_id)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Email provider returned {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Email provider returned {response.status_code}"
