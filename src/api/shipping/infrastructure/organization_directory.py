"""Read-only organization lookup for the Shipping context.

Queries the organizations table through a lightweight table clause instead
of IAM's ORM model, so Shipping does not depend on IAM internals.
"""

from __future__ import annotations

from sqlalchemy import column, select, table
from sqlalchemy.ext.asyncio import AsyncSession

from shipping.ports.repositories import IOrganizationDirectory

_organizations = table(
    "organizations",
    column("id"),
    column("name"),
)


class OrganizationDirectory(IOrganizationDirectory):
    """Resolves organization names for tracking number prefixes."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_name(self, organization_id: str) -> str | None:
        stmt = select(_organizations.c.name).where(
            _organizations.c.id == organization_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
