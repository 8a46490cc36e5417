from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultInvitationServiceProbe,
    InvitationServiceProbe,
)
from iam.application.services import InvitationService
from iam.dependencies.user import get_access_gate
from iam.infrastructure.invitation_repository import InvitationRepository
from iam.infrastructure.organization_repository import OrganizationRepository
from iam.infrastructure.resend_sender import ResendNotificationSender
from iam.infrastructure.user_repository import UserRepository
from iam.ports.notifications import INotificationSender
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import (
    get_auth_settings,
    get_email_settings,
    get_iam_settings,
)
from shared_kernel.authorization import TenantAccessGate


def get_invitation_service_probe() -> InvitationServiceProbe:
    """Get InvitationServiceProbe instance.

    Returns:
        DefaultInvitationServiceProbe instance for observability
    """
    return DefaultInvitationServiceProbe()


def get_notification_sender() -> INotificationSender:
    """Get the email sender configured from email settings."""
    return ResendNotificationSender(settings=get_email_settings())


def get_invitation_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    notifier: Annotated[INotificationSender, Depends(get_notification_sender)],
    gate: Annotated[TenantAccessGate, Depends(get_access_gate)],
    probe: Annotated[InvitationServiceProbe, Depends(get_invitation_service_probe)],
) -> InvitationService:
    """Get InvitationService instance.

    Args:
        session: Async database session
        notifier: Email sender for invitation and welcome emails
        gate: Tenant access gate
        probe: Invitation service probe for observability

    Returns:
        InvitationService instance
    """
    iam_settings = get_iam_settings()
    return InvitationService(
        invitation_repository=InvitationRepository(session=session),
        user_repository=UserRepository(session=session),
        organization_repository=OrganizationRepository(session=session),
        session=session,
        notifier=notifier,
        frontend_url=iam_settings.frontend_url,
        invitation_ttl=timedelta(days=iam_settings.invitation_ttl_days),
        bcrypt_rounds=get_auth_settings().bcrypt_rounds,
        gate=gate,
        probe=probe,
    )
