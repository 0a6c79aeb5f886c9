"""
➡️ But : requêtes sur la table User utilisées par l'authentification.

Recherche par email (connexion locale, liaison OAuth) et par identité OAuth (fournisseur + sujet).
Le CRUD générique vient de BaseRepository.
"""

from __future__ import annotations

from typing import Optional
from sqlmodel import select

from app.db.repositories.base import BaseRepository
from app.db.models.users import User

class UserRepository(BaseRepository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        """Retourne un utilisateur par son email."""
        return self.session.exec(
            select(self.model).where(self.model.email == email)
        ).first()

    def get_by_oauth_identity(self, provider: str, provider_user_id: str) -> Optional[User]:
        """Retourne l'utilisateur lié au couple (fournisseur, identifiant chez le fournisseur)."""
        return self.session.exec(
            select(self.model)
            .where(self.model.oauth_provider == provider)
            .where(self.model.oauth_provider_id == provider_user_id)
        ).first()
