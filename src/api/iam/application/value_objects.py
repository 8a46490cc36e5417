"""Application-layer value objects for IAM bounded context.

Read-only results returned by the application services to the
presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from iam.domain.aggregates import Invitation, Organization, User
from iam.ports.notifications import NotificationResult


@dataclass(frozen=True)
class AuthResult:
    """A signed session token plus the identity it was issued for."""

    token: str
    user: User
    organization: Organization


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated user together with their organization."""

    user: User
    organization: Organization


@dataclass(frozen=True)
class InvitationOutcome:
    """Result of issuing or resending an invitation.

    ``notification`` reports whether the email went out; the invitation
    exists either way and ``link`` can be shared by hand.
    """

    invitation: Invitation
    link: str
    notification: NotificationResult


@dataclass(frozen=True)
class InvitationDetails:
    """Public view of an invitation, looked up by token."""

    email: str
    role: str
    organization_name: str
    inviter_name: str | None
    expires_at: datetime
    is_valid: bool


@dataclass(frozen=True)
class AcceptanceOutcome:
    """Result of redeeming an invitation."""

    user: User
    organization: Organization
    notification: NotificationResult


@dataclass(frozen=True)
class TeamListing:
    """Members of an organization and its open invitations."""

    members: list[User] = field(default_factory=list)
    invitations: list[Invitation] = field(default_factory=list)
