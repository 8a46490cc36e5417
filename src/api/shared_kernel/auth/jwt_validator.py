"""Session token issuing and validation.

Session tokens are HMAC-signed JWTs carrying the caller's identity and
organization. They are issued on signup and login and verified on every
authenticated request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

_REQUIRED_CLAIMS = ("userId", "organizationId", "organizationSlug", "role", "email")


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a session token."""

    user_id: str
    organization_id: str
    organization_slug: str
    role: str
    email: str

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JWT payload field names."""
        return {
            "userId": self.user_id,
            "organizationId": self.organization_id,
            "organizationSlug": self.organization_slug,
            "role": self.role,
            "email": self.email,
        }


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


class JWTValidator:
    """Issues and validates HS256 session tokens.

    Validates token signature, expiry, issuer, and audience.
    """

    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        probe: JWTValidatorProbe,
        ttl: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ):
        """Initialize the JWT validator.

        Args:
            secret: HMAC signing secret.
            issuer: Value for the ``iss`` claim.
            audience: Value for the ``aud`` claim.
            probe: Observability probe for logging events.
            ttl: Lifetime of issued tokens (default: 7 days).
            algorithm: Signing algorithm (default: HS256).
        """
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._probe = probe
        self._ttl = ttl
        self._algorithm = algorithm

    def issue(self, claims: TokenClaims, now: datetime | None = None) -> str:
        """Sign a new session token for ``claims``."""
        issued_at = now or datetime.now(UTC)
        payload = {
            **claims.to_payload(),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        self._probe.token_issued(user_id=claims.user_id)
        return token

    def validate_token(self, token: str) -> TokenClaims:
        """Validate JWT and return claims.

        Args:
            token: The JWT token string.

        Returns:
            TokenClaims containing the validated claims.

        Raises:
            InvalidTokenError: If token is invalid, expired, or verification fails.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        missing = [name for name in _REQUIRED_CLAIMS if not payload.get(name)]
        if missing:
            self._probe.token_validation_failed(
                reason=f"Missing claims: {', '.join(missing)}"
            )
            raise InvalidTokenError(f"Missing required claims: {', '.join(missing)}")

        self._probe.token_validated(user_id=str(payload["userId"]))

        return TokenClaims(
            user_id=str(payload["userId"]),
            organization_id=str(payload["organizationId"]),
            organization_slug=str(payload["organizationSlug"]),
            role=str(payload["role"]),
            email=str(payload["email"]),
        )
