import logging
from dataclasses import dataclass
from typing import Optional

from app.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from app.db.models.users import User
from app.db.repositories.users import UserRepository
from app.security.password import dummy_verify, hash_password, verify_password
from app.security.tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
SIGNUP_FAILED = "Account could not be created"


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class AuthService:
    """
    Service d'identité : transforme signup / login / callback OAuth
    en un couple (utilisateur vérifié, token).

    Les erreurs de login sont volontairement indistinctes
    (email inconnu et mauvais mot de passe donnent la même réponse).
    """

    def __init__(self, *, user_repo: UserRepository, tokens: TokenService):
        self.user_repo = user_repo
        self.tokens = tokens

    def _result(self, user: User) -> AuthResult:
        return AuthResult(user=user, token=self.tokens.issue(user.id))

    # ---------- Sign up ----------
    def sign_up(self, *, username: str, email: str, password: str) -> AuthResult:
        username = (username or "").strip()
        email = _normalize_email(email)
        if not username or not email or not password:
            raise ValidationError("username, email and password are required")

        if self.user_repo.get_by_email(email):
            raise ConflictError(SIGNUP_FAILED)
        try:
            user = self.user_repo.create(
                username=username,
                email=email,
                hashed_password=hash_password(password),
            )
        except ConflictError:
            # Course entre deux inscriptions : la contrainte unique tranche
            raise ConflictError(SIGNUP_FAILED)

        logger.info("User %s signed up", user.id)
        return self._result(user)

    # ---------- Log in ----------
    def log_in(self, *, email: str, password: str) -> AuthResult:
        email = _normalize_email(email)
        if not email or not password:
            raise ValidationError("email and password are required")

        user = self.user_repo.get_by_email(email)
        if user is None:
            dummy_verify()
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not verify_password(password, user.hashed_password):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info("User %s logged in", user.id)
        return self._result(user)

    # ---------- OAuth ----------
    def oauth_log_in(
        self,
        *,
        provider: str,
        provider_user_id: str,
        email: str,
        display_name: Optional[str] = None,
    ) -> AuthResult:
        """
        Résolution dans l'ordre :
          1) identité OAuth déjà connue (provider, provider_user_id),
          2) compte existant avec le même email → on y attache l'identité OAuth,
          3) sinon création d'un compte sans mot de passe.
        """
        provider = (provider or "").strip().lower()
        provider_user_id = (provider_user_id or "").strip()
        email = _normalize_email(email)
        if not provider or not provider_user_id:
            raise ValidationError("provider identity is required")
        if not email:
            raise ValidationError("provider did not return an email")

        user = self.user_repo.get_by_oauth_identity(provider, provider_user_id)
        if user:
            return self._result(user)

        user = self.user_repo.get_by_email(email)
        if user:
            user = self.user_repo.update(
                user,
                oauth_provider=provider,
                oauth_provider_id=provider_user_id,
            )
            logger.info("Linked %s identity to user %s", provider, user.id)
            return self._result(user)

        username = (display_name or "").strip() or email.split("@", 1)[0]
        user = self.user_repo.create(
            username=username,
            email=email,
            hashed_password="",
            oauth_provider=provider,
            oauth_provider_id=provider_user_id,
        )
        logger.info("Created user %s from %s login", user.id, provider)
        return self._result(user)

    # ---------- Lookup ----------
    def get_user(self, user_id: int) -> User:
        user = self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
