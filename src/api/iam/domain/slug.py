"""URL slugs for organizations.

Slugs are globally unique and immutable. Collisions are resolved by
appending ``-1``, ``-2``, ... to the base slug.
"""

from __future__ import annotations

import re
from typing import Iterator

MAX_SLUG_LENGTH = 50

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Derive the base slug for an organization name.

    Lower-cases, collapses every run of non-alphanumerics to ``-``, trims
    leading/trailing ``-`` and caps the length.

    Examples:
        >>> slugify("Acme Freight, Inc.")
        'acme-freight-inc'
        >>> slugify("!!!")
        'organization'
    """
    slug = _NON_ALNUM.sub("-", name.lower()).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or "organization"


def slug_candidates(base: str) -> Iterator[str]:
    """Yield ``base``, ``base-1``, ``base-2``, ... without end."""
    yield base
    counter = 1
    while True:
        yield f"{base}-{counter}"
        counter += 1
