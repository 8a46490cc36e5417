"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User, normalize_email
from iam.domain.value_objects import OrganizationId, TenantRole, UserId
from iam.infrastructure.models import EMAIL_CONSTRAINT, UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.exceptions import DuplicateEmailError
from iam.ports.repositories import IUserRepository
from infrastructure.database.exceptions import is_unique_violation


def _from_model(model: UserModel) -> User:
    return User(
        id=UserId(value=model.id),
        email=model.email,
        name=model.name,
        organization_id=OrganizationId(value=model.organization_id),
        role=TenantRole(model.role),
        password_hash=model.password_hash,
        google_id=model.google_id,
        avatar_url=model.avatar_url,
        invited_by_user_id=(
            UserId(value=model.invited_by_user_id) if model.invited_by_user_id else None
        ),
        last_login_at=model.last_login_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Emails are looked up lower-cased; the unique index on ``users.email``
    arbitrates concurrent signups.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def add(self, user: User) -> None:
        """Insert a new user.

        Raises:
            DuplicateEmailError: If the email constraint rejects the row
        """
        self._session.add(
            UserModel(
                id=user.id.value,
                email=user.email,
                password_hash=user.password_hash,
                google_id=user.google_id,
                name=user.name,
                avatar_url=user.avatar_url,
                role=user.role.value,
                organization_id=user.organization_id.value,
                invited_by_user_id=(
                    user.invited_by_user_id.value if user.invited_by_user_id else None
                ),
                last_login_at=user.last_login_at,
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
        )

        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e, EMAIL_CONSTRAINT):
                self._probe.duplicate_email(user.email)
                raise DuplicateEmailError() from e
            raise

        self._probe.user_saved(user.id.value, user.organization_id.value)

    async def save(self, user: User) -> None:
        """Persist profile fields, role and last login."""
        model = await self._session.get(UserModel, user.id.value)
        if model is None:
            return

        model.name = user.name
        model.avatar_url = user.avatar_url
        model.role = user.role.value
        model.last_login_at = user.last_login_at
        await self._session.flush()

        self._probe.user_saved(user.id.value, user.organization_id.value)

    async def get_by_id(self, user_id: UserId) -> User | None:
        model = await self._session.get(UserModel, user_id.value)
        return _from_model(model) if model is not None else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == normalize_email(email))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _from_model(model) if model is not None else None

    async def get_in_organization(
        self, user_id: UserId, organization_id: OrganizationId
    ) -> User | None:
        stmt = select(UserModel).where(
            UserModel.id == user_id.value,
            UserModel.organization_id == organization_id.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _from_model(model) if model is not None else None

    async def list_by_organization(self, organization_id: OrganizationId) -> list[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.organization_id == organization_id.value)
            .order_by(UserModel.created_at.asc(), UserModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [_from_model(model) for model in result.scalars().all()]

    async def delete(self, user: User) -> None:
        await self._session.execute(
            delete(UserModel).where(UserModel.id == user.id.value)
        )
        await self._session.flush()

        self._probe.user_deleted(user.id.value, user.organization_id.value)
