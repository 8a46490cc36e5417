"""Pydantic models for team and invitation management API."""

from __future__ import annotations

from pydantic import EmailStr, Field

from iam.application.value_objects import InvitationOutcome
from iam.domain.aggregates import Invitation, User
from iam.domain.value_objects import TenantRole
from shared_kernel.api_models import (
    CamelModel,
    format_optional_timestamp,
    format_timestamp,
)


class InviteUserRequest(CamelModel):
    """Request model for inviting someone to the organization."""

    email: EmailStr = Field(..., description="Invitee email")
    role: TenantRole = Field(
        default=TenantRole.MEMBER, description="Role granted on acceptance"
    )


class InvitationResponse(CamelModel):
    """Response model for a newly issued or resent invitation."""

    id: str
    email: str
    role: str
    invitation_token: str
    invitation_link: str
    expires_at: str
    created_at: str
    email_sent: bool
    email_error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: InvitationOutcome) -> InvitationResponse:
        invitation = outcome.invitation
        return cls(
            id=invitation.id.value,
            email=invitation.email,
            role=invitation.role.value,
            invitation_token=invitation.token,
            invitation_link=outcome.link,
            expires_at=format_timestamp(invitation.expires_at),
            created_at=format_timestamp(invitation.created_at),
            email_sent=outcome.notification.success,
            email_error=outcome.notification.error,
        )


class TeamMemberResponse(CamelModel):
    """Response model for a member of the organization."""

    id: str
    email: str
    display_name: str
    role: str
    joined_at: str
    last_login_at: str | None = None
    is_owner: bool

    @classmethod
    def from_domain(cls, user: User) -> TeamMemberResponse:
        return cls(
            id=user.id.value,
            email=user.email,
            display_name=user.name,
            role=user.role.value,
            joined_at=format_timestamp(user.created_at),
            last_login_at=format_optional_timestamp(user.last_login_at),
            is_owner=user.is_owner,
        )


class PendingInvitationResponse(CamelModel):
    """Response model for an invitation that has not been accepted."""

    id: str
    email: str
    role: str
    invited_at: str
    expires_at: str
    invited_by_name: str | None = None
    is_expired: bool

    @classmethod
    def from_domain(
        cls, invitation: Invitation, invited_by_name: str | None
    ) -> PendingInvitationResponse:
        return cls(
            id=invitation.id.value,
            email=invitation.email,
            role=invitation.role.value,
            invited_at=format_timestamp(invitation.created_at),
            expires_at=format_timestamp(invitation.expires_at),
            invited_by_name=invited_by_name,
            is_expired=invitation.is_expired(),
        )


class TeamResponse(CamelModel):
    """Response model for the team listing."""

    users: list[TeamMemberResponse]
    pending_invitations: list[PendingInvitationResponse]


class MessageResponse(CamelModel):
    message: str
