"""Domain aggregates for IAM context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from iam.domain.aggregates.invitation import (
    Invitation,
    InvitationState,
    generate_invitation_token,
)
from iam.domain.aggregates.organization import Organization
from iam.domain.aggregates.user import User, normalize_email

__all__ = [
    "Invitation",
    "InvitationState",
    "Organization",
    "User",
    "generate_invitation_token",
    "normalize_email",
]
