from fastapi import APIRouter, Depends

from app.api.v1.dependencies import current_user_id, get_auth_service, require_user_id
from app.features.authentication.services import AuthService
from app.features.users.schemas import UserOut

router = APIRouter(
    tags=["users"],
    dependencies=[Depends(require_user_id)],
    responses={401: {"description": "Token absent, invalide ou expiré"}},
)

@router.get(
    "/me",
    summary="Récupérer l'utilisateur courant",
    response_model=UserOut,
    responses={404: {"description": "Utilisateur introuvable"}},
)
def me(user_id: int = Depends(current_user_id), svc: AuthService = Depends(get_auth_service)):
    return svc.get_user(user_id)
