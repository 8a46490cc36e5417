"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    is_unique_violation,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "is_unique_violation",
]
