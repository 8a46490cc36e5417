"""Public HTTP routes for invitation tokens.

These endpoints are unauthenticated: possession of the token is the
credential.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services import InvitationService
from iam.dependencies.invitation import get_invitation_service
from iam.ports.exceptions import (
    DuplicateEmailError,
    InvitationNotFoundError,
    InvitationNotPendingError,
)
from iam.presentation.auth.models import OrganizationResponse, UserResponse
from iam.presentation.invitations.models import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    InvitationDetailsResponse,
)

router = APIRouter(
    prefix="/invitations",
    tags=["invitations"],
)


@router.get("/{token}")
async def get_invitation(
    token: str,
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> InvitationDetailsResponse:
    """Describe an invitation by its token.

    Raises:
        HTTPException: 404 if the token is unknown
    """
    try:
        details = await service.get_invitation_details(token)
    except InvitationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return InvitationDetailsResponse.from_details(details)


@router.post("/{token}/accept")
async def accept_invitation(
    token: str,
    request: AcceptInvitationRequest,
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> AcceptInvitationResponse:
    """Redeem an invitation and create the invitee's account.

    Raises:
        HTTPException: 400 if the token is unknown, used, expired, or the
            email is already registered
    """
    try:
        outcome = await service.accept_invitation(
            token, name=request.display_name, password=request.password
        )
    except (
        InvitationNotFoundError,
        InvitationNotPendingError,
        DuplicateEmailError,
        ValueError,
    ) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return AcceptInvitationResponse(
        message="Invitation accepted successfully",
        user=UserResponse.from_domain(outcome.user),
        organization=OrganizationResponse.from_domain(outcome.organization),
        email_sent=outcome.notification.success,
    )
