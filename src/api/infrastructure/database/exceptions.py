"""Database-specific exceptions shared by all bounded contexts."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be reached."""

    pass


def is_unique_violation(error: Exception, constraint_name: str) -> bool:
    """Check whether an IntegrityError was raised by the named constraint.

    asyncpg reports the violated constraint in the error text, which
    SQLAlchemy carries through in ``str(error)``.
    """
    return constraint_name in str(error)
