"""Pydantic models for the public invitation API."""

from __future__ import annotations

from pydantic import Field

from iam.application.value_objects import InvitationDetails
from iam.presentation.auth.models import OrganizationResponse, UserResponse
from shared_kernel.api_models import CamelModel, format_timestamp


class InvitationDetailsResponse(CamelModel):
    """What the holder of an invitation token may see before accepting."""

    email: str
    role: str
    organization_name: str
    invited_by_name: str | None = None
    expires_at: str
    is_valid: bool

    @classmethod
    def from_details(cls, details: InvitationDetails) -> InvitationDetailsResponse:
        return cls(
            email=details.email,
            role=details.role,
            organization_name=details.organization_name,
            invited_by_name=details.inviter_name,
            expires_at=format_timestamp(details.expires_at),
            is_valid=details.is_valid,
        )


class AcceptInvitationRequest(CamelModel):
    """Request model for redeeming an invitation."""

    display_name: str = Field(
        ..., description="Display name for the new account", min_length=2, max_length=100
    )
    password: str = Field(..., description="Password for the new account", min_length=6)


class AcceptInvitationResponse(CamelModel):
    message: str
    user: UserResponse
    organization: OrganizationResponse
    email_sent: bool
