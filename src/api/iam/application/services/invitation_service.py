"""Invitation workflow and team management for IAM bounded context.

Owners invite people by email; the invitee redeems the emailed token to
create their account. Owners can also list, resend and withdraw
invitations and remove members.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultInvitationServiceProbe,
    InvitationServiceProbe,
)
from iam.application.security import hash_password
from iam.application.value_objects import (
    AcceptanceOutcome,
    InvitationDetails,
    InvitationOutcome,
    TeamListing,
)
from iam.domain.aggregates import Invitation, Organization, User, normalize_email
from iam.domain.value_objects import InvitationId, OrganizationId, TenantRole, UserId
from iam.ports.exceptions import (
    CannotRemoveSelfError,
    DuplicateEmailError,
    DuplicateInvitationError,
    InvitationNotFoundError,
    InvitationNotPendingError,
    MemberAlreadyExistsError,
    OrganizationNotFoundError,
    UserNotFoundError,
)
from iam.ports.notifications import INotificationSender, NotificationResult
from iam.ports.repositories import (
    IInvitationRepository,
    IOrganizationRepository,
    IUserRepository,
)
from shared_kernel.authorization import Permission, TenantAccessGate
from shared_kernel.middleware.tenant_context import TenantContext

DEFAULT_INVITER_NAME = "A teammate"


def _parse_invitation_id(value: str) -> InvitationId:
    try:
        return InvitationId.from_string(value)
    except ValueError as e:
        raise InvitationNotFoundError() from e


def _parse_user_id(value: str) -> UserId:
    try:
        return UserId.from_string(value)
    except ValueError as e:
        raise UserNotFoundError() from e


class InvitationService:
    """Application service for invitations and organization membership.

    Invitation states are derived lazily from ``accepted_at`` and
    ``expires_at``. Accepting an invitation creates the user and marks the
    invitation accepted in one transaction; the accepted mark is a
    conditional update, so of two concurrent accepts exactly one commits.

    Email delivery never fails an operation: its outcome is returned as a
    ``NotificationResult`` alongside the result.
    """

    def __init__(
        self,
        invitation_repository: IInvitationRepository,
        user_repository: IUserRepository,
        organization_repository: IOrganizationRepository,
        session: AsyncSession,
        notifier: INotificationSender,
        frontend_url: str,
        invitation_ttl: timedelta = timedelta(days=7),
        bcrypt_rounds: int = 12,
        gate: TenantAccessGate | None = None,
        probe: InvitationServiceProbe | None = None,
    ):
        """Initialize InvitationService with dependencies.

        Args:
            invitation_repository: Repository for invitations
            user_repository: Repository for users
            organization_repository: Repository for organizations
            session: Database session for transaction management
            notifier: Sends invitation and welcome emails
            frontend_url: Base URL invitation links point at
            invitation_ttl: How long a new invitation stays redeemable
            bcrypt_rounds: Work factor for new password hashes
            gate: Tenant access gate for role checks
            probe: Optional domain probe for observability
        """
        self._invitations = invitation_repository
        self._users = user_repository
        self._organizations = organization_repository
        self._session = session
        self._notifier = notifier
        self._frontend_url = frontend_url.rstrip("/")
        self._ttl = invitation_ttl
        self._bcrypt_rounds = bcrypt_rounds
        self._gate = gate or TenantAccessGate()
        self._probe = probe or DefaultInvitationServiceProbe()

    def invitation_link(self, token: str) -> str:
        return f"{self._frontend_url}/invite/{token}"

    async def create_invitation(
        self,
        context: TenantContext,
        email: str,
        role: TenantRole = TenantRole.MEMBER,
    ) -> InvitationOutcome:
        """Invite an email address to the caller's organization.

        Accepted or expired invitations left over for the same address are
        removed first, since only one invitation row may exist per
        organization and email.

        Raises:
            PermissionDeniedError: If the caller is not an owner
            MemberAlreadyExistsError: If the email already belongs to a member
            DuplicateInvitationError: If a pending invitation exists
        """
        self._gate.require(context, Permission.MANAGE_INVITATIONS)
        organization_id = OrganizationId(value=context.organization_id)
        email = normalize_email(email)
        now = datetime.now(UTC)

        try:
            async with self._session.begin():
                user = await self._users.get_by_email(email)
                if user is not None and user.organization_id == organization_id:
                    raise MemberAlreadyExistsError()

                existing = await self._invitations.get_by_email(organization_id, email)
                if existing is not None:
                    if existing.is_pending(now):
                        raise DuplicateInvitationError()
                    await self._invitations.delete(existing)

                organization = await self._require_organization(organization_id)
                inviter = await self._users.get_by_id(UserId(value=context.user_id))

                invitation = Invitation.create(
                    organization_id=organization_id,
                    email=email,
                    role=role,
                    invited_by=UserId(value=context.user_id),
                    ttl=self._ttl,
                    now=now,
                )
                await self._invitations.add(invitation)
        except (MemberAlreadyExistsError, DuplicateInvitationError) as e:
            self._probe.invitation_rejected(
                organization_id=organization_id.value,
                email=email,
                reason=type(e).__name__,
            )
            raise

        self._probe.invitation_created(
            invitation_id=invitation.id.value,
            organization_id=organization_id.value,
            email=email,
        )
        return await self._deliver(invitation, organization, inviter)

    async def get_invitation_details(self, token: str) -> InvitationDetails:
        """Describe an invitation to the person holding its token.

        Raises:
            InvitationNotFoundError: If the token is unknown
        """
        async with self._session.begin():
            invitation = await self._invitations.get_by_token(token)
            if invitation is None:
                raise InvitationNotFoundError()

            organization = await self._organizations.get_by_id(invitation.organization_id)
            if organization is None:
                raise InvitationNotFoundError()

            inviter = (
                await self._users.get_by_id(invitation.invited_by)
                if invitation.invited_by is not None
                else None
            )

        return InvitationDetails(
            email=invitation.email,
            role=invitation.role.value,
            organization_name=organization.name,
            inviter_name=inviter.name if inviter is not None else None,
            expires_at=invitation.expires_at,
            is_valid=invitation.is_pending(),
        )

    async def accept_invitation(
        self, token: str, name: str, password: str
    ) -> AcceptanceOutcome:
        """Redeem an invitation and create the invitee's account.

        Raises:
            InvitationNotFoundError: If the token is unknown
            InvitationNotPendingError: If the invitation was already accepted
                or has expired, including when a concurrent accept wins
            DuplicateEmailError: If the email was registered in the meantime
        """
        password_hash = hash_password(password, rounds=self._bcrypt_rounds)
        now = datetime.now(UTC)

        try:
            async with self._session.begin():
                invitation = await self._invitations.get_by_token(token)
                if invitation is None:
                    raise InvitationNotFoundError()
                try:
                    invitation.accept(now)
                except ValueError as e:
                    raise InvitationNotPendingError() from e

                if await self._users.get_by_email(invitation.email) is not None:
                    raise DuplicateEmailError()

                organization = await self._organizations.get_by_id(
                    invitation.organization_id
                )
                if organization is None:
                    raise InvitationNotFoundError()

                user = User.create(
                    email=invitation.email,
                    name=name,
                    organization_id=invitation.organization_id,
                    role=invitation.role,
                    password_hash=password_hash,
                    invited_by_user_id=invitation.invited_by,
                )
                await self._users.add(user)

                # Rolls back the user insert as well when another accept won
                if not await self._invitations.mark_accepted(invitation.id, now):
                    raise InvitationNotPendingError()
        except (
            InvitationNotFoundError,
            InvitationNotPendingError,
            DuplicateEmailError,
        ) as e:
            self._probe.acceptance_refused(reason=type(e).__name__)
            raise

        self._probe.invitation_accepted(
            invitation_id=invitation.id.value,
            user_id=user.id.value,
            organization_id=organization.id.value,
        )

        notification = await self._notifier.send_welcome(
            to=user.email, user_name=user.name, organization_name=organization.name
        )
        self._record_notification("welcome", notification)
        return AcceptanceOutcome(
            user=user, organization=organization, notification=notification
        )

    async def list_team(self, context: TenantContext) -> TeamListing:
        """List members, earliest joined first, and unaccepted invitations.

        Raises:
            PermissionDeniedError: If the caller may not view members
        """
        self._gate.require(context, Permission.VIEW_MEMBERS)
        organization_id = OrganizationId(value=context.organization_id)

        async with self._session.begin():
            members = await self._users.list_by_organization(organization_id)
            invitations = await self._invitations.list_open(organization_id)

        return TeamListing(members=members, invitations=invitations)

    async def resend_invitation(
        self, context: TenantContext, invitation_id: str
    ) -> InvitationOutcome:
        """Send a pending invitation's email again with the same link.

        Raises:
            PermissionDeniedError: If the caller is not an owner
            InvitationNotFoundError: If unknown in the caller's organization
            InvitationNotPendingError: If accepted or expired
        """
        self._gate.require(context, Permission.MANAGE_INVITATIONS)
        organization_id = OrganizationId(value=context.organization_id)
        parsed_id = _parse_invitation_id(invitation_id)

        async with self._session.begin():
            invitation = await self._invitations.get_in_organization(
                parsed_id, organization_id
            )
            if invitation is None:
                raise InvitationNotFoundError()
            if not invitation.is_pending():
                raise InvitationNotPendingError()

            organization = await self._require_organization(organization_id)
            inviter = await self._users.get_by_id(UserId(value=context.user_id))

        self._probe.invitation_resent(
            invitation_id=invitation.id.value, organization_id=organization_id.value
        )
        return await self._deliver(invitation, organization, inviter)

    async def cancel_invitation(self, context: TenantContext, invitation_id: str) -> None:
        """Withdraw an invitation that has not been accepted.

        Raises:
            PermissionDeniedError: If the caller is not an owner
            InvitationNotFoundError: If unknown in the caller's organization
                or already accepted
        """
        self._gate.require(context, Permission.MANAGE_INVITATIONS)
        organization_id = OrganizationId(value=context.organization_id)
        parsed_id = _parse_invitation_id(invitation_id)

        async with self._session.begin():
            invitation = await self._invitations.get_in_organization(
                parsed_id, organization_id
            )
            if invitation is None or invitation.accepted_at is not None:
                raise InvitationNotFoundError()
            await self._invitations.delete(invitation)

        self._probe.invitation_cancelled(
            invitation_id=invitation.id.value, organization_id=organization_id.value
        )

    async def remove_member(self, context: TenantContext, user_id: str) -> None:
        """Remove a member and every invitation issued to their email.

        Shipments and events the member created are kept; their creator
        references become NULL.

        Raises:
            PermissionDeniedError: If the caller is not an owner
            CannotRemoveSelfError: If the caller targets themselves
            UserNotFoundError: If the user is not in the caller's organization
        """
        self._gate.require(context, Permission.MANAGE_MEMBERS)
        if user_id == context.user_id:
            raise CannotRemoveSelfError()

        organization_id = OrganizationId(value=context.organization_id)
        parsed_id = _parse_user_id(user_id)

        async with self._session.begin():
            user = await self._users.get_in_organization(parsed_id, organization_id)
            if user is None:
                raise UserNotFoundError()

            await self._invitations.delete_for_email(organization_id, user.email)
            await self._users.delete(user)

        self._probe.member_removed(
            user_id=user.id.value, organization_id=organization_id.value
        )

    async def _require_organization(self, organization_id: OrganizationId) -> Organization:
        organization = await self._organizations.get_by_id(organization_id)
        if organization is None:
            raise OrganizationNotFoundError()
        return organization

    async def _deliver(
        self,
        invitation: Invitation,
        organization: Organization,
        inviter: User | None,
    ) -> InvitationOutcome:
        link = self.invitation_link(invitation.token)
        notification = await self._notifier.send_invitation(
            to=invitation.email,
            inviter_name=inviter.name if inviter is not None else DEFAULT_INVITER_NAME,
            organization_name=organization.name,
            role=invitation.role.value,
            link=link,
            expires_in_days=self._ttl.days,
        )
        self._record_notification("invitation", notification)
        return InvitationOutcome(
            invitation=invitation, link=link, notification=notification
        )

    def _record_notification(self, kind: str, result: NotificationResult) -> None:
        if not result.success:
            self._probe.notification_not_delivered(kind=kind, error=result.error)
