"""HTTP routes for team membership and invitation management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from iam.application.services import InvitationService
from iam.dependencies.invitation import get_invitation_service
from iam.dependencies.user import get_tenant_context
from iam.ports.exceptions import (
    CannotRemoveSelfError,
    DuplicateInvitationError,
    InvitationNotFoundError,
    InvitationNotPendingError,
    MemberAlreadyExistsError,
    UserNotFoundError,
)
from iam.presentation.users.models import (
    InvitationResponse,
    InviteUserRequest,
    MessageResponse,
    PendingInvitationResponse,
    TeamMemberResponse,
    TeamResponse,
)
from shared_kernel.authorization import PermissionDeniedError
from shared_kernel.middleware.tenant_context import TenantContext

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


def _forbidden(e: PermissionDeniedError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.post(
    "/invite",
    status_code=status.HTTP_201_CREATED,
)
async def invite_user(
    request: InviteUserRequest,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> InvitationResponse:
    """Invite an email address to the caller's organization.

    Owner only. The invitation is created even if the email cannot be
    delivered; ``emailSent`` reports the delivery outcome.

    Raises:
        HTTPException: 400 if already a member or already invited
        HTTPException: 403 if the caller is not an owner
    """
    try:
        outcome = await service.create_invitation(
            context, email=request.email, role=request.role
        )
    except PermissionDeniedError as e:
        raise _forbidden(e) from e
    except (MemberAlreadyExistsError, DuplicateInvitationError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return InvitationResponse.from_outcome(outcome)


@router.get("")
async def list_team(
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> TeamResponse:
    """List organization members and invitations awaiting acceptance."""
    try:
        team = await service.list_team(context)
    except PermissionDeniedError as e:
        raise _forbidden(e) from e

    names = {member.id: member.name for member in team.members}
    return TeamResponse(
        users=[TeamMemberResponse.from_domain(member) for member in team.members],
        pending_invitations=[
            PendingInvitationResponse.from_domain(
                invitation,
                invited_by_name=names.get(invitation.invited_by)
                if invitation.invited_by is not None
                else None,
            )
            for invitation in team.invitations
        ],
    )


@router.delete("/{user_id}")
async def remove_user(
    user_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> MessageResponse:
    """Remove a member from the organization.

    Raises:
        HTTPException: 400 if the caller targets themselves
        HTTPException: 403 if the caller is not an owner
        HTTPException: 404 if the user is not in the organization
    """
    try:
        await service.remove_member(context, user_id)
    except PermissionDeniedError as e:
        raise _forbidden(e) from e
    except CannotRemoveSelfError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return MessageResponse(message="User removed successfully")


@router.post("/invitations/{invitation_id}/resend")
async def resend_invitation(
    invitation_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> InvitationResponse:
    """Send a pending invitation's email again.

    Raises:
        HTTPException: 400 if the invitation was accepted or has expired
        HTTPException: 403 if the caller is not an owner
        HTTPException: 404 if the invitation is unknown
    """
    try:
        outcome = await service.resend_invitation(context, invitation_id)
    except PermissionDeniedError as e:
        raise _forbidden(e) from e
    except InvitationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except InvitationNotPendingError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    return InvitationResponse.from_outcome(outcome)


@router.delete("/invitations/{invitation_id}")
async def cancel_invitation(
    invitation_id: str,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[InvitationService, Depends(get_invitation_service)],
) -> MessageResponse:
    """Withdraw an invitation that has not been accepted.

    Raises:
        HTTPException: 403 if the caller is not an owner
        HTTPException: 404 if the invitation is unknown or already accepted
    """
    try:
        await service.cancel_invitation(context, invitation_id)
    except PermissionDeniedError as e:
        raise _forbidden(e) from e
    except InvitationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return MessageResponse(message="Invitation cancelled successfully")
