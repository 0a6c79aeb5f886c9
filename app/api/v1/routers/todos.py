"""
➡️ But : Définir les endpoints de l’API des todos.

C’est la couche la plus proche du web :

Réceptionne les requêtes HTTP (GET, POST, PUT, DELETE)

Appelle le service correspondant

Retourne les schémas de sortie (response_model)

Toutes les routes passent par le gate d'accès (require_user_id) :
l'id utilisateur vient du token, jamais du corps.

Corps accepté en JSON ou en multipart/form-data (champ fichier `image` optionnel).
"""

from dataclasses import dataclass
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError as BodyValidationError
from starlette.datastructures import UploadFile

from app.api.v1.dependencies import current_user_id, get_todo_service, require_user_id
from app.core.errors import ValidationError
from app.features.media.stores import ImageUpload
from app.features.todos.schemas import TodoIn, TodoOut
from app.features.todos.services import TodoService

INVALID_FORMAT = "Invalid request format"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
    dependencies=[Depends(require_user_id)],
    responses={
        401: {"description": "Token absent, invalide ou expiré"},
        404: {"description": "Not Found"},
    },
)

# Documentation du corps, lu manuellement (JSON ou formulaire)
TODO_BODY_DOC = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {"schema": TodoIn.model_json_schema()},
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "status": {"type": "string"},
                        "image": {"type": "string", "format": "binary"},
                    },
                    "required": ["title"],
                }
            },
        },
    }
}


@dataclass
class TodoBody:
    """Corps brut d'une requête todo ; `fields` vaut None si le corps est illisible."""
    fields: Optional[dict]
    image: Optional[ImageUpload] = None

    def to_todo_in(self) -> TodoIn:
        if self.fields is None:
            raise ValidationError(INVALID_FORMAT)
        try:
            return TodoIn.model_validate(self.fields)
        except BodyValidationError as e:
            raise ValidationError(INVALID_FORMAT) from e


async def read_todo_body(request: Request) -> TodoBody:
    """
    Lit le corps d'une requête todo, sans le valider.
    - multipart / form : champs texte + fichier `image` optionnel
    - sinon : JSON {title, description, status}
    La validation (TodoBody.to_todo_in) est faite par la route, après le contrôle de propriété.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        fields = {name: str(form.get(name) or "") for name in ("title", "description", "status")}
        image = None
        upload = form.get("image")
        if isinstance(upload, UploadFile) and upload.filename:
            image = ImageUpload(
                filename=upload.filename,
                content=await upload.read(),
                content_type=upload.content_type,
            )
        return TodoBody(fields=fields, image=image)

    try:
        data = await request.json()
    except ValueError:
        # JSONDecodeError / UnicodeDecodeError héritent de ValueError
        return TodoBody(fields=None)
    return TodoBody(fields=data if isinstance(data, dict) else None)


@router.get(
    "",
    summary="Lister mes todos",
    description="Retourne les tâches de l'utilisateur courant, de la plus récente à la plus ancienne.",
    response_model=List[TodoOut],
)
def list_todos(user_id: int = Depends(current_user_id), svc: TodoService = Depends(get_todo_service)):
    return svc.list(user_id)

@router.post(
    "",
    summary="Créer un todo",
    description="`status` vide → \"pending\". Une image peut être jointe en multipart (champ `image`).",
    status_code=status.HTTP_201_CREATED,
    response_model=TodoOut,
    responses={400: {"description": "Titre manquant ou image invalide"}},
    openapi_extra=TODO_BODY_DOC,
)
def create_todo(
    body: TodoBody = Depends(read_todo_body),
    user_id: int = Depends(current_user_id),
    svc: TodoService = Depends(get_todo_service),
):
    return svc.create(body.to_todo_in(), user_id=user_id, image=body.image)

@router.get(
    "/{todo_id}",
    summary="Récupérer un todo",
    response_model=TodoOut,
)
def get_todo(todo_id: int, user_id: int = Depends(current_user_id), svc: TodoService = Depends(get_todo_service)):
    return svc.get(todo_id, user_id)

@router.put(
    "/{todo_id}",
    summary="Remplacer un todo",
    description="Titre, description et statut sont écrasés (champ absent = vide). Une nouvelle image remplace l'ancienne.",
    response_model=TodoOut,
    responses={400: {"description": "Titre manquant ou image invalide"}},
    openapi_extra=TODO_BODY_DOC,
)
def update_todo(
    todo_id: int,
    body: TodoBody = Depends(read_todo_body),
    user_id: int = Depends(current_user_id),
    svc: TodoService = Depends(get_todo_service),
):
    # Propriété vérifiée avant toute validation du corps
    svc.get(todo_id, user_id)
    return svc.update(todo_id, body.to_todo_in(), user_id=user_id, image=body.image)

@router.delete(
    "/{todo_id}",
    summary="Supprimer un todo",
    description="Supprime le todo et, au mieux, son image.",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_todo(todo_id: int, user_id: int = Depends(current_user_id), svc: TodoService = Depends(get_todo_service)):
    svc.delete(todo_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
