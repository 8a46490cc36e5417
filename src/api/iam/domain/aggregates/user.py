"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from iam.domain.value_objects import OrganizationId, TenantRole, UserId


def normalize_email(email: str) -> str:
    """Emails are compared and stored lower-cased without surrounding spaces."""
    return email.strip().lower()


@dataclass
class User:
    """User aggregate representing a person in one organization.

    A user belongs to exactly one organization and carries a role there.
    Users log in with a password hash; ``google_id`` links an external
    identity when present.
    """

    id: UserId
    email: str
    name: str
    organization_id: OrganizationId
    role: TenantRole
    password_hash: str | None = None
    google_id: str | None = None
    avatar_url: str | None = None
    invited_by_user_id: UserId | None = None
    last_login_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        email: str,
        name: str,
        organization_id: OrganizationId,
        role: TenantRole,
        password_hash: str | None = None,
        invited_by_user_id: UserId | None = None,
    ) -> User:
        """Factory method for creating a new user.

        Raises:
            ValueError: If email or name is blank
        """
        email = normalize_email(email)
        name = name.strip()
        if not email:
            raise ValueError("Email is required")
        if not name:
            raise ValueError("Name is required")

        return cls(
            id=UserId.generate(),
            email=email,
            name=name,
            organization_id=organization_id,
            role=role,
            password_hash=password_hash,
            invited_by_user_id=invited_by_user_id,
        )

    @property
    def is_owner(self) -> bool:
        return self.role == TenantRole.OWNER

    def record_login(self, at: datetime | None = None) -> None:
        self.last_login_at = at or datetime.now(UTC)

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.email})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
