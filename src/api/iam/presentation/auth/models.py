"""Pydantic models for signup, login and session API."""

from __future__ import annotations

from pydantic import EmailStr, Field

from iam.domain.aggregates import Organization, User
from shared_kernel.api_models import CamelModel


class SignupRequest(CamelModel):
    """Request model for creating an organization with its owner."""

    organization_name: str = Field(
        ..., description="Organization name", min_length=2, max_length=100
    )
    display_name: str = Field(
        ..., description="Owner's display name", min_length=2, max_length=100
    )
    email: EmailStr = Field(..., description="Owner's email")
    password: str = Field(..., description="Owner's password", min_length=6)


class LoginRequest(CamelModel):
    """Request model for password login."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., description="Account password", min_length=1)


class UserResponse(CamelModel):
    """Response model for a user."""

    id: str = Field(..., description="User ID (ULID format)")
    email: str
    display_name: str
    role: str
    avatar_url: str | None = None

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        return cls(
            id=user.id.value,
            email=user.email,
            display_name=user.name,
            role=user.role.value,
            avatar_url=user.avatar_url,
        )


class OrganizationResponse(CamelModel):
    """Response model for an organization, including stored quotas."""

    id: str = Field(..., description="Organization ID (ULID format)")
    name: str
    slug: str
    plan: str
    max_users: int | None = None
    max_shipments_per_month: int | None = None

    @classmethod
    def from_domain(cls, organization: Organization) -> OrganizationResponse:
        return cls(
            id=organization.id.value,
            name=organization.name,
            slug=organization.slug,
            plan=organization.plan.value,
            max_users=organization.max_users,
            max_shipments_per_month=organization.max_shipments_per_month,
        )


class AuthResponse(CamelModel):
    """Response model for signup and login."""

    message: str
    token: str
    user: UserResponse
    organization: OrganizationResponse


class CurrentUserResponse(CamelModel):
    """Response model for the current user."""

    user: UserResponse
    organization: OrganizationResponse
