"""Password hashing for user accounts.

Uses bcrypt with a configurable work factor. bcrypt only looks at the first
72 bytes of its input, so longer passwords are truncated explicitly and the
same truncation is applied on verification.
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a plaintext password.

    Args:
        password: The plaintext password
        rounds: bcrypt work factor

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison.

    Returns:
        True if the password matches the hash, False otherwise
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False
