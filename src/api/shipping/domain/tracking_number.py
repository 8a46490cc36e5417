"""Organization-prefixed tracking numbers.

A tracking number is ``INITIALS-SUFFIX`` where the initials are derived from
the owning organization's name and the suffix is supplied by the caller.
Uniqueness is per organization and enforced by storage, not here.
"""

from __future__ import annotations

import re

_NON_LETTERS = re.compile(r"[^A-Z\s]")

MAX_INITIALS = 4
SINGLE_WORD_INITIALS = 3


class TrackingNumberError(ValueError):
    """Base class for tracking number allocation failures."""


class InvalidOrganizationNameError(TrackingNumberError):
    """Raised when an organization name yields no letters to derive initials from."""


class EmptyTrackingInputError(TrackingNumberError):
    """Raised when the caller-supplied suffix is blank."""


class MalformedTrackingNumberError(TrackingNumberError):
    """Raised when a tracking number has no ``-`` separator."""


def derive_initials(organization_name: str) -> str:
    """Derive the 1-4 letter prefix for an organization.

    One word contributes its first three letters, two words their first
    letters, three or more words their first letters capped at four.

    Examples:
        >>> derive_initials("Reus Logistics")
        'RL'
        >>> derive_initials("Acme")
        'ACM'
        >>> derive_initials("Global Fast Freight Services Ltd")
        'GFFS'

    Raises:
        InvalidOrganizationNameError: If no letters remain after cleaning
    """
    cleaned = _NON_LETTERS.sub("", organization_name.upper())
    words = cleaned.split()

    if not words:
        raise InvalidOrganizationNameError(
            f"Cannot derive initials from organization name {organization_name!r}"
        )

    if len(words) == 1:
        return words[0][:SINGLE_WORD_INITIALS]

    return "".join(word[0] for word in words)[:MAX_INITIALS]


def compose(organization_name: str, suffix: str) -> str:
    """Build the full tracking number for ``suffix`` within an organization.

    Raises:
        EmptyTrackingInputError: If ``suffix`` is blank
        InvalidOrganizationNameError: If the name yields no initials
    """
    trimmed = suffix.strip()
    if not trimmed:
        raise EmptyTrackingInputError("Tracking number suffix must not be empty")

    return f"{derive_initials(organization_name)}-{trimmed}"


def parse(tracking_number: str) -> tuple[str, str]:
    """Split a tracking number at its first hyphen.

    Examples:
        >>> parse("RL-001")
        ('RL', '001')
        >>> parse("RL-2024-01")
        ('RL', '2024-01')

    Raises:
        MalformedTrackingNumberError: If there is no hyphen
    """
    initials, separator, suffix = tracking_number.partition("-")
    if not separator:
        raise MalformedTrackingNumberError(
            f"Tracking number {tracking_number!r} has no organization prefix"
        )
    return initials, suffix


def belongs_to(tracking_number: str, organization_name: str) -> bool:
    """Check whether a tracking number carries an organization's prefix."""
    try:
        initials, _ = parse(tracking_number)
        return initials == derive_initials(organization_name)
    except TrackingNumberError:
        return False
