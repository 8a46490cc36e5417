"""PostgreSQL implementation of IOrganizationRepository."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Organization
from iam.domain.slug import slug_candidates
from iam.domain.value_objects import BillingStatus, OrganizationId, Plan, UserId
from iam.infrastructure.models import SLUG_CONSTRAINT, OrganizationModel
from iam.infrastructure.observability import (
    DefaultOrganizationRepositoryProbe,
    OrganizationRepositoryProbe,
)
from iam.ports.exceptions import DuplicateSlugError
from iam.ports.repositories import IOrganizationRepository
from infrastructure.database.exceptions import is_unique_violation


def _from_model(model: OrganizationModel) -> Organization:
    return Organization(
        id=OrganizationId(value=model.id),
        name=model.name,
        slug=model.slug,
        plan=Plan(model.plan),
        billing_status=BillingStatus(model.billing_status),
        owner_id=UserId(value=model.owner_id) if model.owner_id else None,
        max_users=model.max_users,
        max_shipments_per_month=model.max_shipments_per_month,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class OrganizationRepository(IOrganizationRepository):
    """PostgreSQL-backed repository for Organization aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: OrganizationRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultOrganizationRepositoryProbe()

    async def add(self, organization: Organization) -> None:
        """Insert a new organization.

        Raises:
            DuplicateSlugError: If the slug constraint rejects the row
        """
        model = OrganizationModel(
            id=organization.id.value,
            name=organization.name,
            slug=organization.slug,
            plan=organization.plan.value,
            billing_status=organization.billing_status.value,
            owner_id=organization.owner_id.value if organization.owner_id else None,
            max_users=organization.max_users,
            max_shipments_per_month=organization.max_shipments_per_month,
            created_at=organization.created_at,
            updated_at=organization.updated_at,
        )

        self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e, SLUG_CONSTRAINT):
                self._probe.duplicate_slug(organization.slug)
                raise DuplicateSlugError(organization.slug) from e
            raise

        self._probe.organization_saved(organization.id.value, organization.slug)

    async def save(self, organization: Organization) -> None:
        """Persist mutable fields. Name and slug never change."""
        model = await self._session.get(OrganizationModel, organization.id.value)
        if model is None:
            return

        model.plan = organization.plan.value
        model.billing_status = organization.billing_status.value
        model.owner_id = organization.owner_id.value if organization.owner_id else None
        model.max_users = organization.max_users
        model.max_shipments_per_month = organization.max_shipments_per_month
        await self._session.flush()

        self._probe.organization_saved(organization.id.value, organization.slug)

    async def get_by_id(self, organization_id: OrganizationId) -> Organization | None:
        model = await self._session.get(OrganizationModel, organization_id.value)
        return _from_model(model) if model is not None else None

    async def first_free_slug(self, base: str) -> str:
        # Slugs only contain [a-z0-9-], so the LIKE pattern has no wildcards
        stmt = select(OrganizationModel.slug).where(
            or_(
                OrganizationModel.slug == base,
                OrganizationModel.slug.like(f"{base}-%"),
            )
        )
        result = await self._session.execute(stmt)
        taken = set(result.scalars().all())

        return next(c for c in slug_candidates(base) if c not in taken)
