"""Unit tests for InvitationService.

Covers the invitation lifecycle (create, details, accept, resend, cancel)
and team management (list, remove member).
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import InvitationServiceProbe
from iam.application.services import InvitationService
from iam.domain.aggregates import Invitation, Organization, User
from iam.domain.value_objects import InvitationId, TenantRole, UserId
from iam.ports.exceptions import (
    CannotRemoveSelfError,
    DuplicateEmailError,
    DuplicateInvitationError,
    InvitationNotFoundError,
    InvitationNotPendingError,
    MemberAlreadyExistsError,
    UserNotFoundError,
)
from iam.ports.notifications import INotificationSender, NotificationResult
from iam.ports.repositories import (
    IInvitationRepository,
    IOrganizationRepository,
    IUserRepository,
)
from shared_kernel.authorization import PermissionDeniedError
from shared_kernel.middleware.tenant_context import TenantContext

FRONTEND_URL = "https://app.example.com/"


@pytest.fixture
def organization() -> Organization:
    return Organization.create(name="Test Corp", slug="test-corp")


@pytest.fixture
def owner(organization) -> User:
    return User.create(
        email="owner@example.com",
        name="Olivia Owner",
        organization_id=organization.id,
        role=TenantRole.OWNER,
    )


@pytest.fixture
def owner_context(owner, organization) -> TenantContext:
    return TenantContext(
        user_id=owner.id.value,
        organization_id=organization.id.value,
        role=TenantRole.OWNER,
    )


@pytest.fixture
def member_context(organization) -> TenantContext:
    return TenantContext(
        user_id=UserId.generate().value,
        organization_id=organization.id.value,
        role=TenantRole.MEMBER,
    )


@pytest.fixture
def pending_invitation(organization, owner) -> Invitation:
    return Invitation.create(
        organization_id=organization.id,
        email="new@example.com",
        role=TenantRole.MEMBER,
        invited_by=owner.id,
    )


@pytest.fixture
def mock_invitation_repo():
    repo = Mock(spec=IInvitationRepository)
    repo.add = AsyncMock()
    repo.get_by_token = AsyncMock(return_value=None)
    repo.get_in_organization = AsyncMock(return_value=None)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.list_open = AsyncMock(return_value=[])
    repo.mark_accepted = AsyncMock(return_value=True)
    repo.delete = AsyncMock()
    repo.delete_for_email = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_user_repo(owner):
    repo = Mock(spec=IUserRepository)
    repo.add = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=owner)
    repo.get_by_email = AsyncMock(return_value=None)
    repo.get_in_organization = AsyncMock(return_value=None)
    repo.list_by_organization = AsyncMock(return_value=[owner])
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def mock_org_repo(organization):
    repo = Mock(spec=IOrganizationRepository)
    repo.get_by_id = AsyncMock(return_value=organization)
    return repo


@pytest.fixture
def mock_notifier():
    notifier = Mock(spec=INotificationSender)
    notifier.send_invitation = AsyncMock(return_value=NotificationResult.sent("msg-1"))
    notifier.send_welcome = AsyncMock(return_value=NotificationResult.sent("msg-2"))
    return notifier


@pytest.fixture
def mock_probe():
    return Mock(spec=InvitationServiceProbe)


@pytest.fixture
def mock_session():
    """Mock AsyncSession."""
    session = Mock(spec=AsyncSession)

    ctx_manager = AsyncMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=None)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    session.begin = Mock(return_value=ctx_manager)
    return session


@pytest.fixture
def service(
    mock_invitation_repo,
    mock_user_repo,
    mock_org_repo,
    mock_session,
    mock_notifier,
    mock_probe,
):
    return InvitationService(
        invitation_repository=mock_invitation_repo,
        user_repository=mock_user_repo,
        organization_repository=mock_org_repo,
        session=mock_session,
        notifier=mock_notifier,
        frontend_url=FRONTEND_URL,
        invitation_ttl=timedelta(days=7),
        bcrypt_rounds=4,
        probe=mock_probe,
    )


class TestCreateInvitation:
    """Tests for InvitationService.create_invitation()."""

    @pytest.mark.asyncio
    async def test_creates_and_emails_link(
        self, service, owner_context, mock_invitation_repo, mock_notifier
    ):
        outcome = await service.create_invitation(owner_context, " New@Example.com ")

        invitation = outcome.invitation
        assert invitation.email == "new@example.com"
        assert invitation.role is TenantRole.MEMBER
        assert invitation.invited_by == UserId(value=owner_context.user_id)
        assert len(invitation.token) == 64
        assert invitation.expires_at - invitation.created_at == timedelta(days=7)
        assert outcome.link == f"https://app.example.com/invite/{invitation.token}"
        assert outcome.notification.success is True
        mock_invitation_repo.add.assert_awaited_once_with(invitation)
        mock_notifier.send_invitation.assert_awaited_once_with(
            to="new@example.com",
            inviter_name="Olivia Owner",
            organization_name="Test Corp",
            role="member",
            link=outcome.link,
            expires_in_days=7,
        )

    @pytest.mark.asyncio
    async def test_member_cannot_invite(
        self, service, member_context, mock_invitation_repo
    ):
        with pytest.raises(PermissionDeniedError) as exc_info:
            await service.create_invitation(member_context, "new@example.com")

        assert str(exc_info.value) == "Organization owner access required"
        mock_invitation_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_member_rejected(
        self, service, owner_context, owner, mock_user_repo, mock_probe
    ):
        mock_user_repo.get_by_email.return_value = owner

        with pytest.raises(MemberAlreadyExistsError):
            await service.create_invitation(owner_context, "owner@example.com")

        mock_probe.invitation_rejected.assert_called_once()

    @pytest.mark.asyncio
    async def test_user_in_other_organization_can_be_invited(
        self, service, owner_context, mock_user_repo
    ):
        other = Organization.create(name="Other", slug="other")
        mock_user_repo.get_by_email.return_value = User.create(
            email="new@example.com",
            name="Someone",
            organization_id=other.id,
            role=TenantRole.OWNER,
        )

        outcome = await service.create_invitation(owner_context, "new@example.com")

        assert outcome.invitation.email == "new@example.com"

    @pytest.mark.asyncio
    async def test_pending_invitation_rejected(
        self, service, owner_context, pending_invitation, mock_invitation_repo
    ):
        mock_invitation_repo.get_by_email.return_value = pending_invitation

        with pytest.raises(DuplicateInvitationError):
            await service.create_invitation(owner_context, "new@example.com")

        mock_invitation_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_invitation_replaced(
        self, service, owner_context, pending_invitation, mock_invitation_repo
    ):
        pending_invitation.expires_at = datetime.now(UTC) - timedelta(minutes=1)
        mock_invitation_repo.get_by_email.return_value = pending_invitation

        outcome = await service.create_invitation(owner_context, "new@example.com")

        mock_invitation_repo.delete.assert_awaited_once_with(pending_invitation)
        assert outcome.invitation.token != pending_invitation.token

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_invitation(
        self, service, owner_context, mock_notifier, mock_probe, mock_invitation_repo
    ):
        mock_notifier.send_invitation.return_value = NotificationResult.failed(
            "Email service not configured"
        )

        outcome = await service.create_invitation(owner_context, "new@example.com")

        assert outcome.notification.success is False
        mock_invitation_repo.add.assert_awaited_once()
        mock_probe.notification_not_delivered.assert_called_once_with(
            kind="invitation", error="Email service not configured"
        )

    @pytest.mark.asyncio
    async def test_unknown_inviter_uses_fallback_name(
        self, service, owner_context, mock_user_repo, mock_notifier
    ):
        mock_user_repo.get_by_id.return_value = None

        await service.create_invitation(owner_context, "new@example.com")

        kwargs = mock_notifier.send_invitation.await_args.kwargs
        assert kwargs["inviter_name"] == "A teammate"


class TestGetInvitationDetails:
    """Tests for InvitationService.get_invitation_details()."""

    @pytest.mark.asyncio
    async def test_pending_details(
        self, service, pending_invitation, mock_invitation_repo
    ):
        mock_invitation_repo.get_by_token.return_value = pending_invitation

        details = await service.get_invitation_details(pending_invitation.token)

        assert details.email == "new@example.com"
        assert details.role == "member"
        assert details.organization_name == "Test Corp"
        assert details.inviter_name == "Olivia Owner"
        assert details.is_valid is True

    @pytest.mark.asyncio
    async def test_expired_is_reported_invalid(
        self, service, pending_invitation, mock_invitation_repo
    ):
        pending_invitation.expires_at = datetime.now(UTC) - timedelta(seconds=1)
        mock_invitation_repo.get_by_token.return_value = pending_invitation

        details = await service.get_invitation_details(pending_invitation.token)

        assert details.is_valid is False

    @pytest.mark.asyncio
    async def test_unknown_token(self, service):
        with pytest.raises(InvitationNotFoundError):
            await service.get_invitation_details("f" * 64)


class TestAcceptInvitation:
    """Tests for InvitationService.accept_invitation()."""

    @pytest.mark.asyncio
    async def test_creates_user_and_marks_accepted(
        self,
        service,
        organization,
        owner,
        pending_invitation,
        mock_invitation_repo,
        mock_user_repo,
        mock_notifier,
    ):
        mock_invitation_repo.get_by_token.return_value = pending_invitation

        outcome = await service.accept_invitation(
            pending_invitation.token, "Nina New", "secret123"
        )

        user = outcome.user
        assert user.email == "new@example.com"
        assert user.name == "Nina New"
        assert user.role is TenantRole.MEMBER
        assert user.organization_id == organization.id
        assert user.invited_by_user_id == owner.id
        assert user.password_hash and user.password_hash != "secret123"
        assert outcome.organization is organization
        mock_user_repo.add.assert_awaited_once_with(user)
        mock_invitation_repo.mark_accepted.assert_awaited_once()
        assert mock_invitation_repo.mark_accepted.await_args.args[0] == (
            pending_invitation.id
        )
        mock_notifier.send_welcome.assert_awaited_once_with(
            to="new@example.com", user_name="Nina New", organization_name="Test Corp"
        )

    @pytest.mark.asyncio
    async def test_aggregate_and_conditional_update_share_acceptance_time(
        self, service, pending_invitation, mock_invitation_repo
    ):
        mock_invitation_repo.get_by_token.return_value = pending_invitation

        await service.accept_invitation(pending_invitation.token, "Nina", "pw")

        assert pending_invitation.accepted_at is not None
        assert mock_invitation_repo.mark_accepted.await_args.args[1] == (
            pending_invitation.accepted_at
        )

    @pytest.mark.asyncio
    async def test_unknown_token(self, service, mock_user_repo):
        with pytest.raises(InvitationNotFoundError):
            await service.accept_invitation("0" * 64, "Nina", "secret123")

        mock_user_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_invitation(
        self, service, pending_invitation, mock_invitation_repo, mock_user_repo
    ):
        pending_invitation.expires_at = datetime.now(UTC) - timedelta(seconds=1)
        mock_invitation_repo.get_by_token.return_value = pending_invitation

        with pytest.raises(InvitationNotPendingError):
            await service.accept_invitation(pending_invitation.token, "Nina", "pw")

        mock_user_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_accepted(
        self, service, pending_invitation, mock_invitation_repo
    ):
        pending_invitation.accept()
        mock_invitation_repo.get_by_token.return_value = pending_invitation

        with pytest.raises(InvitationNotPendingError):
            await service.accept_invitation(pending_invitation.token, "Nina", "pw")

    @pytest.mark.asyncio
    async def test_email_registered_meanwhile(
        self, service, owner, pending_invitation, mock_invitation_repo, mock_user_repo
    ):
        mock_invitation_repo.get_by_token.return_value = pending_invitation
        mock_user_repo.get_by_email.return_value = owner

        with pytest.raises(DuplicateEmailError):
            await service.accept_invitation(pending_invitation.token, "Nina", "pw")

    @pytest.mark.asyncio
    async def test_concurrent_accept_loses(
        self,
        service,
        pending_invitation,
        mock_invitation_repo,
        mock_notifier,
        mock_probe,
    ):
        mock_invitation_repo.get_by_token.return_value = pending_invitation
        mock_invitation_repo.mark_accepted.return_value = False

        with pytest.raises(InvitationNotPendingError):
            await service.accept_invitation(pending_invitation.token, "Nina", "pw")

        mock_notifier.send_welcome.assert_not_awaited()
        mock_probe.acceptance_refused.assert_called_once_with(
            reason="InvitationNotPendingError"
        )


class TestListTeam:
    """Tests for InvitationService.list_team()."""

    @pytest.mark.asyncio
    async def test_members_may_list(
        self,
        service,
        member_context,
        owner,
        pending_invitation,
        mock_invitation_repo,
    ):
        mock_invitation_repo.list_open.return_value = [pending_invitation]

        listing = await service.list_team(member_context)

        assert listing.members == [owner]
        assert listing.invitations == [pending_invitation]


class TestResendInvitation:
    """Tests for InvitationService.resend_invitation()."""

    @pytest.mark.asyncio
    async def test_resends_same_link(
        self,
        service,
        owner_context,
        pending_invitation,
        mock_invitation_repo,
        mock_notifier,
    ):
        mock_invitation_repo.get_in_organization.return_value = pending_invitation

        outcome = await service.resend_invitation(
            owner_context, pending_invitation.id.value
        )

        assert outcome.link.endswith(pending_invitation.token)
        mock_notifier.send_invitation.assert_awaited_once()
        mock_invitation_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_cannot_be_resent(
        self, service, owner_context, pending_invitation, mock_invitation_repo
    ):
        pending_invitation.expires_at = datetime.now(UTC) - timedelta(seconds=1)
        mock_invitation_repo.get_in_organization.return_value = pending_invitation

        with pytest.raises(InvitationNotPendingError):
            await service.resend_invitation(owner_context, pending_invitation.id.value)

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, service, owner_context):
        with pytest.raises(InvitationNotFoundError):
            await service.resend_invitation(owner_context, "not-an-id")

    @pytest.mark.asyncio
    async def test_member_cannot_resend(self, service, member_context):
        with pytest.raises(PermissionDeniedError):
            await service.resend_invitation(
                member_context, InvitationId.generate().value
            )


class TestCancelInvitation:
    """Tests for InvitationService.cancel_invitation()."""

    @pytest.mark.asyncio
    async def test_deletes_pending(
        self, service, owner_context, pending_invitation, mock_invitation_repo
    ):
        mock_invitation_repo.get_in_organization.return_value = pending_invitation

        await service.cancel_invitation(owner_context, pending_invitation.id.value)

        mock_invitation_repo.delete.assert_awaited_once_with(pending_invitation)

    @pytest.mark.asyncio
    async def test_expired_can_be_cancelled(
        self, service, owner_context, pending_invitation, mock_invitation_repo
    ):
        pending_invitation.expires_at = datetime.now(UTC) - timedelta(seconds=1)
        mock_invitation_repo.get_in_organization.return_value = pending_invitation

        await service.cancel_invitation(owner_context, pending_invitation.id.value)

        mock_invitation_repo.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_accepted_is_not_found(
        self, service, owner_context, pending_invitation, mock_invitation_repo
    ):
        pending_invitation.accept()
        mock_invitation_repo.get_in_organization.return_value = pending_invitation

        with pytest.raises(InvitationNotFoundError):
            await service.cancel_invitation(owner_context, pending_invitation.id.value)

        mock_invitation_repo.delete.assert_not_awaited()


class TestRemoveMember:
    """Tests for InvitationService.remove_member()."""

    @pytest.mark.asyncio
    async def test_removes_user_and_their_invitations(
        self,
        service,
        owner_context,
        organization,
        mock_user_repo,
        mock_invitation_repo,
    ):
        member = User.create(
            email="member@example.com",
            name="Max Member",
            organization_id=organization.id,
            role=TenantRole.MEMBER,
        )
        mock_user_repo.get_in_organization.return_value = member

        await service.remove_member(owner_context, member.id.value)

        mock_invitation_repo.delete_for_email.assert_awaited_once_with(
            organization.id, "member@example.com"
        )
        mock_user_repo.delete.assert_awaited_once_with(member)

    @pytest.mark.asyncio
    async def test_cannot_remove_self(self, service, owner_context, mock_user_repo):
        with pytest.raises(CannotRemoveSelfError):
            await service.remove_member(owner_context, owner_context.user_id)

        mock_user_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_from_other_organization(self, service, owner_context):
        with pytest.raises(UserNotFoundError):
            await service.remove_member(owner_context, UserId.generate().value)

    @pytest.mark.asyncio
    async def test_member_cannot_remove(self, service, member_context):
        with pytest.raises(PermissionDeniedError):
            await service.remove_member(member_context, UserId.generate().value)
