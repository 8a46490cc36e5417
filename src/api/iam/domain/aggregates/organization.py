"""Organization aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from iam.domain.value_objects import BillingStatus, OrganizationId, Plan, UserId


@dataclass
class Organization:
    """Organization aggregate, the tenant isolation boundary.

    Every user, shipment and invitation belongs to exactly one organization.
    The slug is globally unique and never changes after creation. Plan and
    quota fields are stored for billing but not enforced.
    """

    id: OrganizationId
    name: str
    slug: str
    plan: Plan = Plan.FREE
    billing_status: BillingStatus = BillingStatus.ACTIVE
    owner_id: UserId | None = None
    max_users: int | None = None
    max_shipments_per_month: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str, slug: str) -> Organization:
        """Factory method for creating a new organization.

        Args:
            name: Display name of the organization
            slug: A slug that the caller has checked is free

        Raises:
            ValueError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("Organization name is required")

        return cls(id=OrganizationId.generate(), name=name, slug=slug)

    @property
    def is_active(self) -> bool:
        """Only organizations in good standing may log in."""
        return self.billing_status == BillingStatus.ACTIVE

    def assign_owner(self, user_id: UserId) -> None:
        self.owner_id = user_id
        self.updated_at = datetime.now(UTC)
