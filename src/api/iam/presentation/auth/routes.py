"""HTTP routes for signup, login and the current session."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services import AuthService
from iam.dependencies.auth import get_auth_service
from iam.dependencies.user import get_tenant_context
from iam.ports.exceptions import (
    DuplicateEmailError,
    DuplicateSlugError,
    InvalidCredentialsError,
    OrganizationNotFoundError,
    UserNotFoundError,
)
from iam.presentation.auth.models import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    OrganizationResponse,
    SignupRequest,
    UserResponse,
)
from shared_kernel.middleware.tenant_context import TenantContext

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    request: SignupRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create an organization and its owner account.

    Returns a session token for the new owner.

    Raises:
        HTTPException: 400 if the email is already registered
        HTTPException: 500 for unexpected errors
    """
    try:
        result = await service.signup(
            organization_name=request.organization_name,
            name=request.display_name,
            email=request.email,
            password=request.password,
        )
    except (DuplicateEmailError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except DuplicateSlugError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate an organization URL, please retry",
        ) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create organization",
        )

    return AuthResponse(
        message="Organization created successfully",
        token=result.token,
        user=UserResponse.from_domain(result.user),
        organization=OrganizationResponse.from_domain(result.organization),
    )


@router.post("/login")
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Log in with email and password.

    Raises:
        HTTPException: 401 for any credential failure
        HTTPException: 500 for unexpected errors
    """
    try:
        result = await service.login(email=request.email, password=request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to log in",
        )

    return AuthResponse(
        message="Login successful",
        token=result.token,
        user=UserResponse.from_domain(result.user),
        organization=OrganizationResponse.from_domain(result.organization),
    )


@router.get("/me")
async def me(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> CurrentUserResponse:
    """Return the authenticated user and their organization.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 404 if the user or organization disappeared
    """
    try:
        current = await service.get_current_user(context.user_id)
    except (UserNotFoundError, OrganizationNotFoundError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return CurrentUserResponse(
        user=UserResponse.from_domain(current.user),
        organization=OrganizationResponse.from_domain(current.organization),
    )
