"""PostgreSQL implementation of IInvitationRepository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import Invitation, normalize_email
from iam.domain.value_objects import InvitationId, OrganizationId, TenantRole, UserId
from iam.infrastructure.models import INVITATION_EMAIL_CONSTRAINT, InvitationModel
from iam.infrastructure.observability import (
    DefaultInvitationRepositoryProbe,
    InvitationRepositoryProbe,
)
from iam.ports.exceptions import DuplicateInvitationError
from iam.ports.repositories import IInvitationRepository
from infrastructure.database.exceptions import is_unique_violation


def _from_model(model: InvitationModel) -> Invitation:
    return Invitation(
        id=InvitationId(value=model.id),
        organization_id=OrganizationId(value=model.organization_id),
        email=model.email,
        role=TenantRole(model.role),
        # Inviter references survive user removal as NULL
        invited_by=UserId(value=model.invited_by) if model.invited_by else None,
        token=model.invitation_token,
        expires_at=model.expires_at,
        accepted_at=model.accepted_at,
        created_at=model.created_at,
    )


class InvitationRepository(IInvitationRepository):
    """PostgreSQL-backed repository for Invitation aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: InvitationRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultInvitationRepositoryProbe()

    async def add(self, invitation: Invitation) -> None:
        """Insert a new invitation.

        Raises:
            DuplicateInvitationError: If the (organization, email) constraint
                rejects the row
        """
        self._session.add(
            InvitationModel(
                id=invitation.id.value,
                organization_id=invitation.organization_id.value,
                email=invitation.email,
                role=invitation.role.value,
                invited_by=invitation.invited_by.value if invitation.invited_by else None,
                invitation_token=invitation.token,
                expires_at=invitation.expires_at,
                accepted_at=invitation.accepted_at,
                created_at=invitation.created_at,
            )
        )

        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e, INVITATION_EMAIL_CONSTRAINT):
                raise DuplicateInvitationError() from e
            raise

        self._probe.invitation_saved(
            invitation.id.value, invitation.organization_id.value
        )

    async def get_by_token(self, token: str) -> Invitation | None:
        stmt = select(InvitationModel).where(InvitationModel.invitation_token == token)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _from_model(model) if model is not None else None

    async def get_in_organization(
        self, invitation_id: InvitationId, organization_id: OrganizationId
    ) -> Invitation | None:
        stmt = select(InvitationModel).where(
            InvitationModel.id == invitation_id.value,
            InvitationModel.organization_id == organization_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _from_model(model) if model is not None else None

    async def get_by_email(
        self, organization_id: OrganizationId, email: str
    ) -> Invitation | None:
        stmt = select(InvitationModel).where(
            InvitationModel.organization_id == organization_id.value,
            InvitationModel.email == normalize_email(email),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _from_model(model) if model is not None else None

    async def list_open(self, organization_id: OrganizationId) -> list[Invitation]:
        stmt = (
            select(InvitationModel)
            .where(
                InvitationModel.organization_id == organization_id.value,
                InvitationModel.accepted_at.is_(None),
            )
            .order_by(InvitationModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [_from_model(model) for model in result.scalars().all()]

    async def mark_accepted(self, invitation_id: InvitationId, now: datetime) -> bool:
        """Set ``accepted_at`` only while the invitation is still pending.

        The WHERE clause makes concurrent accepts of the same token race on
        a single row update; exactly one of them sees a row count of 1.
        """
        stmt = (
            update(InvitationModel)
            .where(
                InvitationModel.id == invitation_id.value,
                InvitationModel.accepted_at.is_(None),
                InvitationModel.expires_at > now,
            )
            .values(accepted_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            self._probe.invitation_accept_conflict(invitation_id.value)
            return False
        return True

    async def delete(self, invitation: Invitation) -> None:
        await self._session.execute(
            delete(InvitationModel).where(InvitationModel.id == invitation.id.value)
        )
        await self._session.flush()

        self._probe.invitations_deleted(invitation.organization_id.value, 1)

    async def delete_for_email(
        self, organization_id: OrganizationId, email: str
    ) -> int:
        result = await self._session.execute(
            delete(InvitationModel).where(
                InvitationModel.organization_id == organization_id.value,
                InvitationModel.email == normalize_email(email),
            )
        )
        await self._session.flush()

        count = result.rowcount or 0
        self._probe.invitations_deleted(organization_id.value, count)
        return count
