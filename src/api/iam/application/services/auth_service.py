"""Authentication application service for IAM bounded context.

Handles organization signup, password login and current-user lookup.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.security import hash_password, verify_password
from iam.application.value_objects import AuthResult, CurrentUser
from iam.domain.aggregates import Organization, User, normalize_email
from iam.domain.slug import slugify
from iam.domain.value_objects import TenantRole, UserId
from iam.ports.exceptions import (
    DuplicateEmailError,
    DuplicateSlugError,
    InvalidCredentialsError,
    OrganizationNotFoundError,
    UserNotFoundError,
)
from iam.ports.repositories import IOrganizationRepository, IUserRepository
from shared_kernel.auth import JWTValidator, TokenClaims


class AuthService:
    """Application service for signup, login and session identity.

    Signup creates an organization and its owner in one transaction. The
    organization slug is the first free candidate for the name; when a
    concurrent signup takes the same slug first the whole transaction is
    retried with a fresh lookup.
    """

    def __init__(
        self,
        organization_repository: IOrganizationRepository,
        user_repository: IUserRepository,
        session: AsyncSession,
        token_issuer: JWTValidator,
        bcrypt_rounds: int = 12,
        slug_max_attempts: int = 10,
        probe: AuthenticationProbe | None = None,
    ):
        """Initialize AuthService with dependencies.

        Args:
            organization_repository: Repository for organizations
            user_repository: Repository for users
            session: Database session for transaction management
            token_issuer: Signs session tokens
            bcrypt_rounds: Work factor for new password hashes
            slug_max_attempts: Signup attempts before giving up on slug races
            probe: Optional domain probe for observability
        """
        self._organizations = organization_repository
        self._users = user_repository
        self._session = session
        self._tokens = token_issuer
        self._bcrypt_rounds = bcrypt_rounds
        self._slug_max_attempts = slug_max_attempts
        self._probe = probe or DefaultAuthenticationProbe()

    def _issue_token(self, user: User, organization: Organization) -> str:
        return self._tokens.issue(
            TokenClaims(
                user_id=user.id.value,
                organization_id=organization.id.value,
                organization_slug=organization.slug,
                role=user.role.value,
                email=user.email,
            )
        )

    async def signup(
        self,
        organization_name: str,
        name: str,
        email: str,
        password: str,
    ) -> AuthResult:
        """Create an organization with its owner and sign the owner in.

        Raises:
            DuplicateEmailError: If the email is already registered
            DuplicateSlugError: If every slug attempt lost a race
            ValueError: If a name or the email is blank
        """
        email = normalize_email(email)
        password_hash = hash_password(password, rounds=self._bcrypt_rounds)
        base_slug = slugify(organization_name)

        for attempt in range(1, self._slug_max_attempts + 1):
            try:
                async with self._session.begin():
                    if await self._users.get_by_email(email) is not None:
                        raise DuplicateEmailError()

                    slug = await self._organizations.first_free_slug(base_slug)
                    organization = Organization.create(name=organization_name, slug=slug)
                    await self._organizations.add(organization)

                    user = User.create(
                        email=email,
                        name=name,
                        organization_id=organization.id,
                        role=TenantRole.OWNER,
                        password_hash=password_hash,
                    )
                    await self._users.add(user)

                    organization.assign_owner(user.id)
                    await self._organizations.save(organization)
            except DuplicateSlugError as e:
                self._probe.slug_collision(slug=e.slug, attempt=attempt)
                continue
            except DuplicateEmailError:
                self._probe.signup_rejected(email=email, reason="duplicate_email")
                raise

            self._probe.organization_signed_up(
                organization_id=organization.id.value,
                user_id=user.id.value,
                slug=organization.slug,
            )
            return AuthResult(
                token=self._issue_token(user, organization),
                user=user,
                organization=organization,
            )

        raise DuplicateSlugError(base_slug)

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify a password and issue a session token.

        Every failure raises the same error so callers cannot tell which
        check failed.

        Raises:
            InvalidCredentialsError: On any failure
        """
        email = normalize_email(email)

        async with self._session.begin():
            user = await self._users.get_by_email(email)
            failure = _credential_failure(user, password)

            organization = None
            if user is not None and failure is None:
                organization = await self._organizations.get_by_id(user.organization_id)
                if organization is None or not organization.is_active:
                    failure = "organization_inactive"

            if user is None or organization is None or failure is not None:
                self._probe.login_failed(email=email, reason=failure or "unknown")
                raise InvalidCredentialsError()

            user.record_login()
            await self._users.save(user)

        self._probe.login_succeeded(
            user_id=user.id.value, organization_id=organization.id.value
        )
        return AuthResult(
            token=self._issue_token(user, organization),
            user=user,
            organization=organization,
        )

    async def get_current_user(self, user_id: str) -> CurrentUser:
        """Load the caller and their organization.

        Raises:
            UserNotFoundError: If the user was removed
            OrganizationNotFoundError: If the organization was removed
        """
        async with self._session.begin():
            user = await self._users.get_by_id(UserId(value=user_id))
            if user is None:
                raise UserNotFoundError()

            organization = await self._organizations.get_by_id(user.organization_id)
            if organization is None:
                raise OrganizationNotFoundError()

        return CurrentUser(user=user, organization=organization)


def _credential_failure(user: User | None, password: str) -> str | None:
    """Return why a password login must fail, or None if it may proceed."""
    if user is None:
        return "unknown_email"
    if not user.password_hash:
        return "no_password"
    if not verify_password(password, user.password_hash):
        return "wrong_password"
    return None
