"""
➡️ But : lire la configuration depuis l'environnement (ou un fichier .env) avec pydantic-settings.

Regroupe base de données, secret JWT, CORS, stockage des images et identifiants Google.
Les autres modules importent l'instance unique :

from app.core.config import settings

La durée de vie des tokens est fixe (24h), elle ne se configure pas.
"""

from datetime import timedelta
from typing import List, Optional

from pydantic_settings import BaseSettings
from app.security.tokens import JWTSettings

# Durée de vie fixe des tokens (non configurable)
TOKEN_TTL = timedelta(hours=24)


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "MyList-Back"
    ENV: str = "dev"  # dev | prod | test
    API_PREFIX: str = ""  # ex: "/api/v1" ; vide = routes à la racine
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "app.db"  # fichier SQLite
    # Si tu veux forcer une URL différente (ex: Postgres), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # JWT / Auth
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ALGORITHM: str = "HS256"

    # -----------------------------
    # CORS
    # -----------------------------
    FRONTEND_URL: str = "http://localhost:3000"
    ALLOWED_ORIGINS: str = ""  # liste séparée par des virgules ; vide = FRONTEND_URL

    # -----------------------------
    # Images
    # -----------------------------
    IMAGE_STORAGE: str = "database"  # database | file
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_MB: int = 10

    # -----------------------------
    # OAuth (Google)
    # -----------------------------
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    OAUTH_CALLBACK_URL: str = "http://localhost:8080/auth/google/callback"
    SESSION_SECRET: str = "CHANGE_ME_TOO"  # signe le cookie de session du flux OAuth

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

    @property
    def allowed_origins(self) -> List[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or [self.FRONTEND_URL]

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)


# Instance globale importable partout
settings = Settings()

# Objet JWT prêt à l'emploi pour les services
jwt_settings = JWTSettings(
    secret=settings.JWT_SECRET_KEY,
    algorithm=settings.JWT_ALGORITHM,
    ttl=TOKEN_TTL,
)
