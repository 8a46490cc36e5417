"""Request identity dependencies.

Resolves the bearer token on a request into a ``TenantContext``. The token
only names the user; role and organization are re-read from the database
so that removed users and deactivated organizations lose access
immediately.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from iam.dependencies.authentication import bearer_scheme, get_jwt_validator
from iam.domain.value_objects import UserId
from iam.infrastructure.organization_repository import OrganizationRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_read_session
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.authorization import TenantAccessGate
from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext

_WWW_AUTHENTICATE = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_WWW_AUTHENTICATE,
    )


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance for tenant context resolution.

    Returns:
        DefaultTenantContextProbe instance for observability
    """
    return DefaultTenantContextProbe()


def get_access_gate() -> TenantAccessGate:
    """Get TenantAccessGate instance for role checks."""
    return TenantAccessGate()


async def get_tenant_context(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> TenantContext:
    """Resolve the caller of a tenant-scoped request.

    Raises:
        HTTPException 401: If the token is missing or invalid, the user no
            longer exists, or the organization is not active
    """
    if credentials is None or not credentials.credentials:
        probe.credentials_missing()
        raise _unauthorized("Not authenticated")

    try:
        claims = validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        probe.token_rejected(reason=str(e))
        raise _unauthorized("Invalid or expired token") from e

    try:
        user_id = UserId.from_string(claims.user_id)
    except ValueError as e:
        probe.token_rejected(reason=str(e))
        raise _unauthorized("Invalid or expired token") from e

    user = await UserRepository(session=session).get_by_id(user_id)
    organization = (
        await OrganizationRepository(session=session).get_by_id(user.organization_id)
        if user is not None
        else None
    )
    if user is None or organization is None or not organization.is_active:
        probe.principal_inactive(user_id=claims.user_id)
        raise _unauthorized("Invalid or expired token")

    context = TenantContext(
        user_id=user.id.value,
        organization_id=organization.id.value,
        role=user.role,
    )
    probe.tenant_context_resolved(
        user_id=context.user_id,
        organization_id=context.organization_id,
        role=context.role.value,
    )
    return context
