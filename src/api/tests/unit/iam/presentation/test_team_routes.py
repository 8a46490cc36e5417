"""Unit tests for team management and invitation routes."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from iam.application.services import InvitationService
from iam.application.value_objects import (
    AcceptanceOutcome,
    InvitationDetails,
    InvitationOutcome,
    TeamListing,
)
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
from iam.ports.notifications import NotificationResult
from shared_kernel.authorization import PermissionDeniedError
from shared_kernel.middleware.tenant_context import TenantContext


@pytest.fixture
def organization() -> Organization:
    return Organization.create(name="Test Corp", slug="test-corp")


@pytest.fixture
def owner(organization) -> User:
    return User.create(
        email="owner@example.com",
        name="Olivia",
        organization_id=organization.id,
        role=TenantRole.OWNER,
    )


@pytest.fixture
def invitation(organization, owner) -> Invitation:
    return Invitation.create(
        organization_id=organization.id,
        email="new@example.com",
        role=TenantRole.MEMBER,
        invited_by=owner.id,
    )


@pytest.fixture
def mock_invitation_service() -> AsyncMock:
    return AsyncMock(spec=InvitationService)


@pytest.fixture
def test_client(mock_invitation_service, owner, organization) -> TestClient:
    """Create TestClient with mocked dependencies."""
    from iam.dependencies.invitation import get_invitation_service
    from iam.dependencies.user import get_tenant_context
    from iam.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_invitation_service] = lambda: mock_invitation_service
    app.dependency_overrides[get_tenant_context] = lambda: TenantContext(
        user_id=owner.id.value,
        organization_id=organization.id.value,
        role=TenantRole.OWNER,
    )
    app.include_router(router)
    return TestClient(app)


class TestInviteUser:
    """Tests for POST /users/invite."""

    def test_returns_201_with_link(
        self, test_client, mock_invitation_service, invitation
    ):
        link = f"https://app.example.com/invite/{invitation.token}"
        mock_invitation_service.create_invitation.return_value = InvitationOutcome(
            invitation=invitation,
            link=link,
            notification=NotificationResult.failed("Email service not configured"),
        )

        response = test_client.post(
            "/users/invite", json={"email": "new@example.com", "role": "member"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["invitationToken"] == invitation.token
        assert body["invitationLink"] == link
        assert body["emailSent"] is False
        assert body["emailError"] == "Email service not configured"
        assert body["expiresAt"].endswith("Z")

    def test_role_defaults_to_member(self, test_client, mock_invitation_service, invitation):
        mock_invitation_service.create_invitation.return_value = InvitationOutcome(
            invitation=invitation,
            link="https://app.example.com/invite/x",
            notification=NotificationResult.sent("m-1"),
        )

        test_client.post("/users/invite", json={"email": "new@example.com"})

        kwargs = mock_invitation_service.create_invitation.await_args.kwargs
        assert kwargs["role"] is TenantRole.MEMBER

    def test_member_gets_403(self, test_client, mock_invitation_service):
        mock_invitation_service.create_invitation.side_effect = PermissionDeniedError(
            "Organization owner access required"
        )

        response = test_client.post("/users/invite", json={"email": "new@example.com"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Organization owner access required"

    @pytest.mark.parametrize(
        "error", [MemberAlreadyExistsError(), DuplicateInvitationError()]
    )
    def test_conflicts_return_400(self, test_client, mock_invitation_service, error):
        mock_invitation_service.create_invitation.side_effect = error

        response = test_client.post("/users/invite", json={"email": "new@example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestListTeam:
    """Tests for GET /users."""

    def test_lists_members_and_invitations(
        self, test_client, mock_invitation_service, owner, invitation
    ):
        mock_invitation_service.list_team.return_value = TeamListing(
            members=[owner], invitations=[invitation]
        )

        response = test_client.get("/users")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["users"][0]["email"] == "owner@example.com"
        assert body["users"][0]["isOwner"] is True
        assert body["users"][0]["lastLoginAt"] is None
        pending = body["pendingInvitations"][0]
        assert pending["email"] == "new@example.com"
        assert pending["invitedByName"] == "Olivia"
        assert pending["isExpired"] is False


class TestRemoveUser:
    """Tests for DELETE /users/{user_id}."""

    def test_removes_member(self, test_client, mock_invitation_service):
        user_id = UserId.generate().value

        response = test_client.delete(f"/users/{user_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "User removed successfully"}

    def test_self_removal_returns_400(self, test_client, mock_invitation_service):
        mock_invitation_service.remove_member.side_effect = CannotRemoveSelfError()

        response = test_client.delete(f"/users/{UserId.generate().value}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_user_returns_404(self, test_client, mock_invitation_service):
        mock_invitation_service.remove_member.side_effect = UserNotFoundError()

        response = test_client.delete(f"/users/{UserId.generate().value}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestResendAndCancel:
    """Tests for invitation resend and cancel routes."""

    def test_resend_not_pending_returns_400(self, test_client, mock_invitation_service):
        mock_invitation_service.resend_invitation.side_effect = (
            InvitationNotPendingError()
        )

        response = test_client.post(
            f"/users/invitations/{InvitationId.generate().value}/resend"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_resend_unknown_returns_404(self, test_client, mock_invitation_service):
        mock_invitation_service.resend_invitation.side_effect = (
            InvitationNotFoundError()
        )

        response = test_client.post("/users/invitations/unknown/resend")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cancel(self, test_client, mock_invitation_service):
        invitation_id = InvitationId.generate().value

        response = test_client.delete(f"/users/invitations/{invitation_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Invitation cancelled successfully"}
        args = mock_invitation_service.cancel_invitation.await_args.args
        assert args[1] == invitation_id


class TestPublicInvitationRoutes:
    """Tests for the unauthenticated /invitations/{token} routes."""

    def test_details(self, test_client, mock_invitation_service):
        mock_invitation_service.get_invitation_details.return_value = InvitationDetails(
            email="new@example.com",
            role="member",
            organization_name="Test Corp",
            inviter_name="Olivia",
            expires_at=datetime(2024, 5, 8, 12, 0, tzinfo=UTC),
            is_valid=True,
        )

        response = test_client.get("/invitations/" + "a" * 64)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "email": "new@example.com",
            "role": "member",
            "organizationName": "Test Corp",
            "invitedByName": "Olivia",
            "expiresAt": "2024-05-08T12:00:00.000Z",
            "isValid": True,
        }

    def test_details_unknown_token(self, test_client, mock_invitation_service):
        mock_invitation_service.get_invitation_details.side_effect = (
            InvitationNotFoundError()
        )

        response = test_client.get("/invitations/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_accept(self, test_client, mock_invitation_service, organization):
        user = User.create(
            email="new@example.com",
            name="Nina",
            organization_id=organization.id,
            role=TenantRole.MEMBER,
        )
        mock_invitation_service.accept_invitation.return_value = AcceptanceOutcome(
            user=user,
            organization=organization,
            notification=NotificationResult.sent("m-2"),
        )

        response = test_client.post(
            "/invitations/tok/accept",
            json={"displayName": "Nina", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Invitation accepted successfully"
        assert body["user"]["role"] == "member"
        assert body["emailSent"] is True
        mock_invitation_service.accept_invitation.assert_awaited_once_with(
            "tok", name="Nina", password="secret123"
        )

    @pytest.mark.parametrize(
        "error",
        [InvitationNotFoundError(), InvitationNotPendingError(), DuplicateEmailError()],
    )
    def test_accept_failures_return_400(
        self, test_client, mock_invitation_service, error
    ):
        mock_invitation_service.accept_invitation.side_effect = error

        response = test_client.post(
            "/invitations/tok/accept",
            json={"displayName": "Nina", "password": "secret123"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
