"""Invitation aggregate for IAM context."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from iam.domain.aggregates.user import normalize_email
from iam.domain.value_objects import InvitationId, OrganizationId, TenantRole, UserId

DEFAULT_INVITATION_TTL = timedelta(days=7)


def generate_invitation_token() -> str:
    """Return 64 hex characters drawn from 32 random bytes."""
    return secrets.token_hex(32)


class InvitationState(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


@dataclass
class Invitation:
    """An owner's invitation for an email address to join an organization.

    State is derived lazily: an invitation is ``accepted`` once
    ``accepted_at`` is set, ``expired`` once ``expires_at`` has passed,
    and ``pending`` otherwise. Nothing runs in the background to expire it.
    """

    id: InvitationId
    organization_id: OrganizationId
    email: str
    role: TenantRole
    invited_by: UserId | None
    token: str
    expires_at: datetime
    accepted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        organization_id: OrganizationId,
        email: str,
        role: TenantRole,
        invited_by: UserId | None,
        ttl: timedelta = DEFAULT_INVITATION_TTL,
        now: datetime | None = None,
    ) -> Invitation:
        """Factory method for creating a pending invitation.

        Raises:
            ValueError: If the email is blank
        """
        email = normalize_email(email)
        if not email:
            raise ValueError("Email is required")

        created_at = now or datetime.now(UTC)
        return cls(
            id=InvitationId.generate(),
            organization_id=organization_id,
            email=email,
            role=role,
            invited_by=invited_by,
            token=generate_invitation_token(),
            expires_at=created_at + ttl,
            created_at=created_at,
        )

    def state(self, now: datetime | None = None) -> InvitationState:
        if self.accepted_at is not None:
            return InvitationState.ACCEPTED
        if self.is_expired(now):
            return InvitationState.EXPIRED
        return InvitationState.PENDING

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at

    def is_pending(self, now: datetime | None = None) -> bool:
        return self.state(now) == InvitationState.PENDING

    def accept(self, now: datetime | None = None) -> None:
        """Mark the invitation accepted.

        Raises:
            ValueError: If the invitation is no longer pending
        """
        now = now or datetime.now(UTC)
        if not self.is_pending(now):
            raise ValueError("Invitation is no longer pending")
        self.accepted_at = now
