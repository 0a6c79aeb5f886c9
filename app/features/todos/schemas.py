"""
➡️ But : Définir les formats d’entrée/sortie de l’API pour les todos.

TodoIn  → corps de requête POST / PUT (JSON ou champs de formulaire multipart)

TodoOut → réponse de l’API

🔹 Avantages :

Validation automatique.

Documente les champs dans Swagger (types, exemples...).
"""

from datetime import datetime
from pydantic import BaseModel, Field

class TodoIn(BaseModel):
    # Pas de mise à jour partielle : un champ absent devient vide
    title: str = Field("", examples=["Acheter du lait"])
    description: str = Field("", examples=["Demi-écrémé"])
    status: str = Field("", max_length=32, examples=["pending"])

class TodoOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    status: str
    image_reference: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
