"""Port exceptions for the Shipping bounded context.

Raised by repositories and application services and translated to HTTP
responses by the presentation layer.
"""


class DuplicateTrackingNumberError(Exception):
    """Raised when a tracking number already exists in the caller's organization.

    Uniqueness is per organization; the same number in another
    organization is allowed.
    """

    def __init__(self, message: str = "Tracking number already exists in your organization"):
        super().__init__(message)


class ShipmentNotFoundError(Exception):
    """Raised when a shipment is missing or belongs to another organization.

    Both cases are reported identically so callers cannot probe for
    shipments outside their tenant.
    """

    def __init__(self, message: str = "Shipment not found"):
        super().__init__(message)


class EventNotFoundError(Exception):
    """Raised when a travel event is missing or belongs to another organization."""

    def __init__(self, message: str = "Event not found"):
        super().__init__(message)


class EventFileNotFoundError(Exception):
    """Raised when an attachment is missing or belongs to another organization."""

    def __init__(self, message: str = "File not found"):
        super().__init__(message)


class OrganizationNotFoundError(Exception):
    """Raised when the caller's organization no longer exists."""

    def __init__(self, message: str = "Organization not found"):
        super().__init__(message)


class StorageUnavailableError(Exception):
    """Raised when attachment storage is not configured."""

    def __init__(self, message: str = "File storage is not configured"):
        super().__init__(message)


class StorageOperationError(Exception):
    """Raised when the blob store rejects an upload or URL request."""

    pass


class FileTooLargeError(Exception):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, limit: int):
        super().__init__(f"File exceeds the maximum size of {limit} bytes")
        self.limit = limit
