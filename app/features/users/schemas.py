"""
➡️ But : Définir le format de sortie d'un utilisateur.

UserOut → réponse de l’API (signup, login, /me)

Empêche d’exposer par erreur des infos sensibles (le hash de mot de passe n'y figure pas).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

class UserOut(BaseModel):
    id: int
    username: str
    email: str
    oauth_provider: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
