"""Notification port for IAM bounded context.

Sending email is fire-and-forget: senders report the outcome as a
``NotificationResult`` and never raise for delivery failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class NotificationResult:
    """Outcome of a notification attempt."""

    success: bool
    error: str | None = None
    message_id: str | None = None

    @classmethod
    def sent(cls, message_id: str | None = None) -> NotificationResult:
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, error: str) -> NotificationResult:
        return cls(success=False, error=error)


@runtime_checkable
class INotificationSender(Protocol):
    """Delivers invitation and welcome emails."""

    async def send_invitation(
        self,
        to: str,
        inviter_name: str,
        organization_name: str,
        role: str,
        link: str,
        expires_in_days: int,
    ) -> NotificationResult:
        ...

    async def send_welcome(
        self, to: str, user_name: str, organization_name: str
    ) -> NotificationResult:
        ...
