from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import AuthenticationProbe
from iam.application.services import AuthService
from iam.dependencies.authentication import (
    get_authentication_probe,
    get_jwt_validator,
)
from iam.infrastructure.organization_repository import OrganizationRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_auth_settings, get_iam_settings
from shared_kernel.auth import JWTValidator


def get_auth_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> AuthService:
    """Get AuthService instance.

    Args:
        session: Async database session
        validator: Issues session tokens
        probe: Authentication probe for observability

    Returns:
        AuthService instance
    """
    return AuthService(
        organization_repository=OrganizationRepository(session=session),
        user_repository=UserRepository(session=session),
        session=session,
        token_issuer=validator,
        bcrypt_rounds=get_auth_settings().bcrypt_rounds,
        slug_max_attempts=get_iam_settings().slug_max_attempts,
        probe=probe,
    )
