"""Integration tests for InvitationRepository.

Covers the conditional accept update and the (organization, email)
constraint translation against PostgreSQL.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.domain.aggregates import Invitation, Organization, User
from iam.domain.value_objects import TenantRole
from iam.infrastructure.invitation_repository import InvitationRepository
from iam.infrastructure.user_repository import UserRepository
from iam.ports.exceptions import DuplicateInvitationError, InvitationNotPendingError

pytestmark = pytest.mark.integration


async def _invite(
    session_factory: async_sessionmaker[AsyncSession],
    organization: Organization,
    email: str = "dock@example.com",
    now: datetime | None = None,
) -> Invitation:
    invitation = Invitation.create(
        organization_id=organization.id,
        email=email,
        role=TenantRole.MEMBER,
        invited_by=None,
        now=now,
    )
    async with session_factory() as session, session.begin():
        await InvitationRepository(session=session).add(invitation)
    return invitation


async def _mark_accepted(
    session_factory: async_sessionmaker[AsyncSession],
    invitation: Invitation,
    now: datetime,
) -> bool:
    async with session_factory() as session, session.begin():
        return await InvitationRepository(session=session).mark_accepted(
            invitation.id, now
        )


class TestMarkAccepted:
    """Tests for the conditional accept update."""

    @pytest.mark.asyncio
    async def test_first_accept_wins(self, session_factory, organization):
        invitation = await _invite(session_factory, organization)
        now = datetime.now(UTC)

        assert await _mark_accepted(session_factory, invitation, now) is True
        assert await _mark_accepted(session_factory, invitation, now) is False

        async with session_factory() as session, session.begin():
            stored = await InvitationRepository(session=session).get_by_token(
                invitation.token
            )
        assert stored is not None
        assert stored.accepted_at == now

    @pytest.mark.asyncio
    async def test_expired_invitation_is_not_accepted(
        self, session_factory, organization
    ):
        invitation = await _invite(
            session_factory,
            organization,
            now=datetime.now(UTC) - timedelta(days=30),
        )

        assert await _mark_accepted(session_factory, invitation, datetime.now(UTC)) is False

    @pytest.mark.asyncio
    async def test_concurrent_accepts_update_exactly_one_row(
        self, session_factory, organization
    ):
        invitation = await _invite(session_factory, organization)
        now = datetime.now(UTC)

        results = await asyncio.gather(
            _mark_accepted(session_factory, invitation, now),
            _mark_accepted(session_factory, invitation, now),
        )

        assert sorted(results) == [False, True]

    @pytest.mark.asyncio
    async def test_lost_accept_rolls_back_the_user_insert(
        self, session_factory, organization
    ):
        invitation = await _invite(session_factory, organization)
        assert await _mark_accepted(session_factory, invitation, datetime.now(UTC))

        user = User.create(
            email=invitation.email,
            name="Dock Worker",
            organization_id=organization.id,
            role=invitation.role,
            password_hash="hash",
        )
        with pytest.raises(InvitationNotPendingError):
            async with session_factory() as session, session.begin():
                await UserRepository(session=session).add(user)
                accepted = await InvitationRepository(session=session).mark_accepted(
                    invitation.id, datetime.now(UTC)
                )
                if not accepted:
                    raise InvitationNotPendingError()

        async with session_factory() as session, session.begin():
            assert await UserRepository(session=session).get_by_email(
                invitation.email
            ) is None


class TestAdd:
    """Tests for constraint translation on insert."""

    @pytest.mark.asyncio
    async def test_second_invitation_for_email_is_duplicate(
        self, session_factory, organization
    ):
        await _invite(session_factory, organization, email="dock@example.com")

        with pytest.raises(DuplicateInvitationError):
            await _invite(session_factory, organization, email="Dock@Example.com")
