"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.invitation import (
    INVITATION_EMAIL_CONSTRAINT,
    InvitationModel,
)
from iam.infrastructure.models.organization import SLUG_CONSTRAINT, OrganizationModel
from iam.infrastructure.models.user import EMAIL_CONSTRAINT, UserModel

__all__ = [
    "EMAIL_CONSTRAINT",
    "INVITATION_EMAIL_CONSTRAINT",
    "InvitationModel",
    "OrganizationModel",
    "SLUG_CONSTRAINT",
    "UserModel",
]
