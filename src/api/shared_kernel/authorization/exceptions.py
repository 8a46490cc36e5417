"""Authorization exceptions shared across bounded contexts."""


class PermissionDeniedError(Exception):
    """Raised when the caller's role does not grant the requested permission.

    Presentation layers translate this to HTTP 403. Cross-tenant lookups
    never raise this; they surface as the resource's not-found error.
    """

    def __init__(self, message: str, permission: str | None = None):
        super().__init__(message)
        self.permission = permission
