"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories and outbound services without
specifying implementation details. This allows for dependency inversion
and makes the domain layer independent of infrastructure.
"""

from iam.ports.exceptions import (
    CannotRemoveSelfError,
    DuplicateEmailError,
    DuplicateInvitationError,
    DuplicateSlugError,
    InvalidCredentialsError,
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

__all__ = [
    "CannotRemoveSelfError",
    "DuplicateEmailError",
    "DuplicateInvitationError",
    "DuplicateSlugError",
    "IInvitationRepository",
    "INotificationSender",
    "IOrganizationRepository",
    "IUserRepository",
    "InvalidCredentialsError",
    "InvitationNotFoundError",
    "InvitationNotPendingError",
    "MemberAlreadyExistsError",
    "NotificationResult",
    "OrganizationNotFoundError",
    "UserNotFoundError",
]
