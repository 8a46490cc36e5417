"""Unit tests for the Invitation aggregate's lazily derived state."""

from datetime import UTC, datetime, timedelta

import pytest

from iam.domain.aggregates import Invitation, InvitationState
from iam.domain.value_objects import OrganizationId, TenantRole, UserId

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def invitation() -> Invitation:
    return Invitation.create(
        organization_id=OrganizationId.generate(),
        email=" New.Hire@Example.com ",
        role=TenantRole.MEMBER,
        invited_by=UserId.generate(),
        now=NOW,
    )


class TestCreate:
    def test_defaults_to_seven_day_expiry(self, invitation):
        assert invitation.expires_at == NOW + timedelta(days=7)
        assert invitation.created_at == NOW

    def test_normalizes_email(self, invitation):
        assert invitation.email == "new.hire@example.com"

    def test_token_is_64_hex_characters(self, invitation):
        assert len(invitation.token) == 64
        int(invitation.token, 16)

    def test_tokens_are_unique(self):
        organization_id = OrganizationId.generate()
        tokens = {
            Invitation.create(
                organization_id=organization_id,
                email="a@example.com",
                role=TenantRole.MEMBER,
                invited_by=None,
            ).token
            for _ in range(20)
        }
        assert len(tokens) == 20

    def test_rejects_blank_email(self):
        with pytest.raises(ValueError):
            Invitation.create(
                organization_id=OrganizationId.generate(),
                email="  ",
                role=TenantRole.MEMBER,
                invited_by=None,
            )


class TestState:
    def test_pending_before_expiry(self, invitation):
        assert invitation.state(NOW + timedelta(days=6)) is InvitationState.PENDING

    def test_expired_at_expiry_instant(self, invitation):
        assert invitation.state(invitation.expires_at) is InvitationState.EXPIRED

    def test_accepted_wins_over_expired(self, invitation):
        invitation.accept(NOW + timedelta(days=1))

        assert invitation.state(NOW + timedelta(days=30)) is InvitationState.ACCEPTED


class TestAccept:
    def test_sets_accepted_at(self, invitation):
        at = NOW + timedelta(hours=1)

        invitation.accept(at)

        assert invitation.accepted_at == at
        assert invitation.is_pending(at) is False

    def test_cannot_accept_twice(self, invitation):
        invitation.accept(NOW + timedelta(hours=1))

        with pytest.raises(ValueError):
            invitation.accept(NOW + timedelta(hours=2))

    def test_cannot_accept_after_expiry(self, invitation):
        with pytest.raises(ValueError):
            invitation.accept(NOW + timedelta(days=8))
        assert invitation.accepted_at is None
