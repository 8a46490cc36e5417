"""Domain-Oriented Observability for IAM infrastructure.

Probes for repository and notification operations following
Domain-Oriented Observability patterns.
"""

from iam.infrastructure.observability.notification_probe import (
    DefaultNotificationProbe,
    NotificationProbe,
)
from iam.infrastructure.observability.repository_probe import (
    DefaultInvitationRepositoryProbe,
    DefaultOrganizationRepositoryProbe,
    DefaultUserRepositoryProbe,
    InvitationRepositoryProbe,
    OrganizationRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultInvitationRepositoryProbe",
    "DefaultNotificationProbe",
    "DefaultOrganizationRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "InvitationRepositoryProbe",
    "NotificationProbe",
    "OrganizationRepositoryProbe",
    "UserRepositoryProbe",
]
