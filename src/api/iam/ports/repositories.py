"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations only flush; transaction boundaries belong to
the application services.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Invitation, Organization, User
from iam.domain.value_objects import InvitationId, OrganizationId, UserId


@runtime_checkable
class IOrganizationRepository(Protocol):
    """Repository for Organization aggregate persistence."""

    async def add(self, organization: Organization) -> None:
        """Insert a new organization.

        Raises:
            DuplicateSlugError: If the slug is already taken
        """
        ...

    async def save(self, organization: Organization) -> None:
        """Persist changes to an existing organization."""
        ...

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        ...

    async def first_free_slug(self, base: str) -> str:
        """Return the first slug candidate for ``base`` not in use."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        ...

    async def save(self, user: User) -> None:
        """Persist changes to an existing user."""
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def get_in_organization(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> User | None:
        """Fetch a user only if it belongs to the organization."""
        ...

    async def list_by_organization(self, organization_id: OrganizationId) -> list[User]:
        """List users of an organization, earliest joined first."""
        ...

    async def delete(self, user: User) -> None:
        ...


@runtime_checkable
class IInvitationRepository(Protocol):
    """Repository for Invitation aggregate persistence."""

    async def add(self, invitation: Invitation) -> None:
        ...

    async def get_by_token(self, token: str) -> Invitation | None:
        ...

    async def get_in_organization(
        self, invitation_id: InvitationId, organization_id: OrganizationId
    ) -> Invitation | None:
        """Fetch an invitation only if it belongs to the organization."""
        ...

    async def get_by_email(
        self, organization_id: OrganizationId, email: str
    ) -> Invitation | None:
        ...

    async def list_open(self, organization_id: OrganizationId) -> list[Invitation]:
        """List invitations not yet accepted, newest first. Includes expired ones."""
        ...

    async def mark_accepted(self, invitation_id: InvitationId, now: datetime) -> bool:
        """Conditionally mark an invitation accepted.

        Only succeeds if the invitation is still unaccepted and unexpired at
        ``now``. Returns False when no row was updated.
        """
        ...

    async def delete(self, invitation: Invitation) -> None:
        ...

    async def delete_for_email(
        self, organization_id: OrganizationId, email: str
    ) -> int:
        """Delete every invitation for an email in an organization."""
        ...
