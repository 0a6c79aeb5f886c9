"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_todo_service() : crée un TodoService à partir d’une session DB et du store d'images.

require_user_id() : le "gate" d'accès ; valide le token et expose l'id utilisateur.

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à injecter dans plusieurs endpoints (Depends()), et à surcharger en test
(app.dependency_overrides).
"""

from functools import lru_cache
from typing import Optional

from authlib.integrations.starlette_client import OAuth
from fastapi import Depends, Header, Request
from sqlmodel import Session

from app.db.session import get_session
from app.core.config import settings, jwt_settings
from app.core.errors import UnauthorizedError

from app.db.repositories.users import UserRepository
from app.db.repositories.todos import TodoRepository
from app.db.repositories.images import ImageRepository

from app.features.authentication.services import AuthService
from app.features.authentication.oauth import build_oauth
from app.features.media.stores import DatabaseImageStore, FileImageStore, ImageStore
from app.features.todos.services import TodoService

from app.security.tokens import TokenService, strip_bearer


# -----------------------------
# Tokens / OAuth
# -----------------------------
@lru_cache
def get_token_service() -> TokenService:
    return TokenService(jwt_settings)

@lru_cache
def get_oauth() -> OAuth:
    return build_oauth(settings)


# -----------------------------
# Auth
# -----------------------------
def get_auth_service(
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(user_repo=UserRepository(session), tokens=tokens)


# -----------------------------
# Images
# -----------------------------
@lru_cache
def get_file_image_store() -> FileImageStore:
    return FileImageStore(settings.UPLOAD_DIR, max_mb=settings.MAX_UPLOAD_MB)

def get_image_store(session: Session = Depends(get_session)) -> ImageStore:
    if settings.IMAGE_STORAGE == "file":
        return get_file_image_store()
    return DatabaseImageStore(ImageRepository(session), max_mb=settings.MAX_UPLOAD_MB)


# -----------------------------
# Todos
# -----------------------------
def get_todo_service(
    session: Session = Depends(get_session),
    images: ImageStore = Depends(get_image_store),
) -> TodoService:
    return TodoService(repo=TodoRepository(session), images=images)


# -----------------------------
# Access gate
# -----------------------------
def require_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> int:
    """
    Extrait le token de l'en-tête Authorization (préfixe `Bearer ` optionnel),
    le valide et place l'id utilisateur dans request.state.user_id.
    L'id n'est jamais lu depuis le corps de la requête.
    """
    if not authorization or not authorization.strip():
        raise UnauthorizedError("Missing token")
    token = strip_bearer(authorization)
    user_id = tokens.validate(token)
    request.state.user_id = user_id
    return user_id


def current_user_id(request: Request) -> int:
    """Lit l'id injecté par require_user_id (routeurs protégés uniquement)."""
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise UnauthorizedError("Missing token")
    return user_id
