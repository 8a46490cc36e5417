"""Application services for IAM bounded context.

Application services orchestrate domain operations and manage transactions.
"""

from iam.application.services.auth_service import AuthService
from iam.application.services.invitation_service import InvitationService

__all__ = [
    "AuthService",
    "InvitationService",
]
