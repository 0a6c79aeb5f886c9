"""
➡️ But : Définir la taxonomie d'erreurs métier, indépendante du web.

Les services (auth, todos, stockage d'images) lèvent ces exceptions ;
app/main.py les convertit en réponses JSON {"detail": ...}.

AppError           → classe de base (status_code + detail)
ValidationError    → 400 : champ requis manquant / mal formé
UnauthorizedError  → 401 : token absent, invalide, expiré ou mauvais identifiants
ForbiddenError     → authentifié mais pas propriétaire (rendu comme un 404)
NotFoundError      → 404 : entité inexistante
ConflictError      → 409 : violation d'unicité
InternalError      → 500 : échec du stockage ou de la signature

🔹 Avantages :

Les services restent testables sans FastAPI.

Un seul endroit décide du code HTTP de chaque erreur.
"""

from typing import Optional


class AppError(Exception):
    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = 400
    default_detail = "Invalid request"


class UnauthorizedError(AppError):
    status_code = 401
    default_detail = "Unauthorized"


class ForbiddenError(AppError):
    # Même rendu qu'un NotFoundError : on ne révèle pas l'existence d'une ressource d'autrui
    status_code = 404
    default_detail = "Not found"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_detail = "Conflict"


class InternalError(AppError):
    status_code = 500
    default_detail = "Internal server error"
