"""Port exceptions for IAM bounded context.

These exceptions represent errors raised by repositories and application
services. The presentation layer translates them to HTTP responses.
"""


class DuplicateEmailError(Exception):
    """Raised when an email is already registered.

    Emails are globally unique across organizations.
    """

    def __init__(self, message: str = "User with this email already exists"):
        super().__init__(message)


class DuplicateSlugError(Exception):
    """Raised when an organization slug collides at insert time.

    Signup retries with the next slug candidate when it sees this.
    """

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Organization slug already exists: {slug}")


class InvalidCredentialsError(Exception):
    """Raised for any login failure.

    Unknown email, wrong password, a user without a password and an
    inactive organization all produce the same message.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class MemberAlreadyExistsError(Exception):
    """Raised when inviting an email that already belongs to a member."""

    def __init__(self, message: str = "User is already a member of this organization"):
        super().__init__(message)


class DuplicateInvitationError(Exception):
    """Raised when a pending invitation already exists for the email."""

    def __init__(self, message: str = "An invitation is already pending for this email"):
        super().__init__(message)


class InvitationNotFoundError(Exception):
    """Raised when an invitation token or id is unknown to the caller."""

    def __init__(self, message: str = "Invitation not found"):
        super().__init__(message)


class InvitationNotPendingError(Exception):
    """Raised when an invitation was already accepted or has expired."""

    def __init__(self, message: str = "Invitation is invalid or has expired"):
        super().__init__(message)


class UserNotFoundError(Exception):
    """Raised when a user is missing or belongs to another organization."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class OrganizationNotFoundError(Exception):
    """Raised when a user's organization no longer exists."""

    def __init__(self, message: str = "Organization not found"):
        super().__init__(message)


class CannotRemoveSelfError(Exception):
    """Raised when an owner tries to remove their own account."""

    def __init__(self, message: str = "You cannot remove yourself"):
        super().__init__(message)
