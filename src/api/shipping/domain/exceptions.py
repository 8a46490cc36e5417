"""Domain exceptions for the Shipping bounded context.

These represent violations of aggregate invariants and are raised before
anything touches storage.
"""


class InvalidShipmentError(ValueError):
    """Raised when shipment attributes violate a domain rule.

    Examples: negative weight, zero pieces, blank status.
    """

    pass


class InvalidTravelEventError(ValueError):
    """Raised when travel event attributes violate a domain rule."""

    pass
