"""Unit tests for UserRepository.

Tests verify user repository behavior with mocked dependencies.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from sqlalchemy.exc import IntegrityError

from iam.domain.aggregates import User
from iam.domain.value_objects import OrganizationId, TenantRole, UserId
from iam.infrastructure.models import EMAIL_CONSTRAINT, UserModel
from iam.infrastructure.observability import UserRepositoryProbe
from iam.infrastructure.user_repository import UserRepository
from iam.ports.exceptions import DuplicateEmailError
from iam.ports.repositories import IUserRepository

ORG_ID = OrganizationId(value="01HZX3K8Q5V0000000000000AA")
STAMP = datetime(2024, 1, 1, tzinfo=UTC)


def _user_model(**overrides) -> UserModel:
    values = dict(
        id=UserId.generate().value,
        email="alice@example.com",
        password_hash="$2b$04$hash",
        google_id=None,
        name="Alice",
        avatar_url=None,
        role="owner",
        organization_id=ORG_ID.value,
        invited_by_user_id=None,
        last_login_at=None,
        created_at=STAMP,
        updated_at=STAMP,
    )
    values.update(overrides)
    return UserModel(**values)


def _result(*models) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = models[0] if models else None
    result.scalars.return_value.all.return_value = list(models)
    return result


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_probe():
    return Mock(spec=UserRepositoryProbe)


@pytest.fixture
def repository(mock_session, mock_probe):
    """Create repository with mock session."""
    return UserRepository(session=mock_session, probe=mock_probe)


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_implements_protocol(self, repository):
        """Repository should implement IUserRepository protocol."""
        assert isinstance(repository, IUserRepository)


class TestAdd:
    """Tests for add method."""

    @pytest.mark.asyncio
    async def test_adds_new_user_to_session(self, repository, mock_session):
        """Should add new user model to session."""
        user = User.create(
            email="alice@example.com",
            name="Alice",
            organization_id=ORG_ID,
            role=TenantRole.MEMBER,
            password_hash="$2b$04$hash",
        )

        await repository.add(user)

        added_model = mock_session.add.call_args[0][0]
        assert isinstance(added_model, UserModel)
        assert added_model.id == user.id.value
        assert added_model.email == "alice@example.com"
        assert added_model.role == "member"
        assert added_model.organization_id == ORG_ID.value
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_email_conflict_raises_duplicate_email(
        self, repository, mock_session, mock_probe
    ):
        mock_session.flush.side_effect = IntegrityError(
            "INSERT INTO users",
            {},
            Exception(f'duplicate key value violates unique constraint "{EMAIL_CONSTRAINT}"'),
        )
        user = User.create(
            email="alice@example.com",
            name="Alice",
            organization_id=ORG_ID,
            role=TenantRole.OWNER,
        )

        with pytest.raises(DuplicateEmailError):
            await repository.add(user)

        mock_probe.duplicate_email.assert_called_once_with("alice@example.com")


class TestSave:
    """Tests for save method."""

    @pytest.mark.asyncio
    async def test_updates_existing_user(self, repository, mock_session):
        """Should copy mutable fields onto the stored model."""
        model = _user_model()
        mock_session.get.return_value = model
        user = User(
            id=UserId(value=model.id),
            email=model.email,
            name="Alice Cooper",
            organization_id=ORG_ID,
            role=TenantRole.OWNER,
            last_login_at=STAMP,
        )

        await repository.save(user)

        mock_session.add.assert_not_called()
        assert model.name == "Alice Cooper"
        assert model.last_login_at == STAMP
        mock_session.flush.assert_awaited_once()


class TestLookups:
    """Tests for read methods."""

    @pytest.mark.asyncio
    async def test_get_by_id_maps_model(self, repository, mock_session):
        inviter = UserId.generate()
        model = _user_model(role="member", invited_by_user_id=inviter.value)
        mock_session.get.return_value = model

        user = await repository.get_by_id(UserId(value=model.id))

        assert user is not None
        assert user.role is TenantRole.MEMBER
        assert user.organization_id == ORG_ID
        assert user.invited_by_user_id == inviter

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(self, repository, mock_session):
        mock_session.get.return_value = None

        assert await repository.get_by_id(UserId.generate()) is None

    @pytest.mark.asyncio
    async def test_get_by_email_normalizes(self, repository, mock_session):
        mock_session.execute.return_value = _result(_user_model())

        user = await repository.get_by_email("  ALICE@example.com")

        assert user is not None
        stmt = mock_session.execute.await_args.args[0]
        assert stmt.compile().params["email_1"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_get_in_organization_not_found(self, repository, mock_session):
        mock_session.execute.return_value = _result()

        assert await repository.get_in_organization(UserId.generate(), ORG_ID) is None

    @pytest.mark.asyncio
    async def test_list_by_organization(self, repository, mock_session):
        first = _user_model(email="a@example.com")
        second = _user_model(email="b@example.com", role="member")
        mock_session.execute.return_value = _result(first, second)

        users = await repository.list_by_organization(ORG_ID)

        assert [u.email for u in users] == ["a@example.com", "b@example.com"]


class TestDelete:
    """Tests for delete method."""

    @pytest.mark.asyncio
    async def test_deletes_row(self, repository, mock_session, mock_probe):
        user = User.create(
            email="bob@example.com",
            name="Bob",
            organization_id=ORG_ID,
            role=TenantRole.MEMBER,
        )

        await repository.delete(user)

        mock_session.execute.assert_awaited_once()
        mock_session.flush.assert_awaited_once()
        mock_probe.user_deleted.assert_called_once_with(user.id.value, ORG_ID.value)
