from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as ClaimsValidationError

from app.core.errors import InternalError, UnauthorizedError

# Seule la famille HMAC est acceptée (clé symétrique partagée)
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

# ==========================================================
# 🔧 Configuration : paramètres de génération/validation JWT
# ==========================================================

@dataclass(frozen=True)
class JWTSettings:
    """
    Configuration des tokens JWT.

    - `secret` : clé secrète pour signer/valider les tokens
    - `algorithm` : algo de signature HMAC (HS256 par défaut)
    - `ttl` : durée de vie d’un token (24h)
    """
    secret: str
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=24)


# ==========================================================
# 🧱 Types
# ==========================================================

class TokenClaims(BaseModel):
    """
    Claims décodés d'un token. Tout champ inconnu est refusé,
    `user_id` doit être un identifiant entier positif (transmis en str).
    """
    model_config = ConfigDict(extra="forbid")

    user_id: int = Field(gt=0)
    exp: int
    iat: Optional[int] = None


# ==========================================================
# 🧩 Fonctions utilitaires
# ==========================================================

def _now() -> datetime:
    """Renvoie l'heure UTC actuelle."""
    return datetime.now(timezone.utc)


def strip_bearer(raw: str) -> str:
    """Retire le préfixe `Bearer ` (insensible à la casse) s'il est présent."""
    raw = raw.strip()
    scheme, _, rest = raw.partition(" ")
    if scheme.lower() == "bearer" and rest:
        return rest.strip()
    return raw


# ==========================================================
# 🎟️ Service de tokens
# ==========================================================

class TokenService:
    """
    Émet et valide des tokens d'identité signés, sans état côté serveur.
    La validité dépend uniquement de la signature et de l'expiration.
    """

    def __init__(self, settings: JWTSettings, *, now_fn: Callable[[], datetime] = _now):
        if settings.algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {settings.algorithm}")
        self.settings = settings
        self.now_fn = now_fn

    def issue(self, user_id: int) -> str:
        now = self.now_fn()
        payload = {
            "user_id": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self.settings.ttl).timestamp()),
        }
        try:
            return jwt.encode(payload, self.settings.secret, algorithm=self.settings.algorithm)
        except JWTError as e:
            raise InternalError("Failed to sign token") from e

    def decode(self, token: str) -> TokenClaims:
        """
        Vérifie signature + algorithme + expiration, puis décode les claims typés.
        Lève UnauthorizedError dans tous les cas d'échec.
        """
        if not token:
            raise UnauthorizedError("Missing token")
        try:
            raw = jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                options={"verify_aud": False, "require_exp": True},
            )
        except JWTError as e:
            raise UnauthorizedError("Invalid token") from e

        try:
            return TokenClaims.model_validate(raw)
        except ClaimsValidationError as e:
            raise UnauthorizedError("Invalid token claims") from e

    def validate(self, token: str) -> int:
        """Retourne l'identifiant utilisateur porté par un token valide."""
        return self.decode(token).user_id
