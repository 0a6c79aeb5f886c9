import logging
from urllib.parse import urlencode

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from app.api.v1.dependencies import get_auth_service, get_oauth
from app.core.config import settings
from app.core.errors import AppError, NotFoundError
from app.features.authentication.oauth import profile_from_userinfo
from app.features.authentication.schemas import AuthOut, LogInIn, SignUpIn
from app.features.authentication.services import AuthService
from app.features.users.schemas import UserOut

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["auth"],
    responses={401: {"description": "Invalid credentials"}},
)

# -----------------------------
# Sign-up
# -----------------------------
@router.post(
    "/signup",
    summary="Créer un compte",
    description="Crée un compte local et retourne un token valable 24h.",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthOut,
    responses={
        400: {"description": "Champ manquant"},
        409: {"description": "Compte impossible à créer (email déjà utilisé)"},
    },
)
def sign_up(payload: SignUpIn, svc: AuthService = Depends(get_auth_service)):
    result = svc.sign_up(username=payload.username, email=payload.email, password=payload.password)
    return AuthOut(token=result.token, user=UserOut.model_validate(result.user))

# -----------------------------
# Log-in
# -----------------------------
@router.post(
    "/login",
    summary="Se connecter",
    description="Vérifie email + mot de passe. Email inconnu et mauvais mot de passe renvoient la même erreur.",
    response_model=AuthOut,
    responses={400: {"description": "Champ manquant"}},
)
def log_in(payload: LogInIn, svc: AuthService = Depends(get_auth_service)):
    result = svc.log_in(email=payload.email, password=payload.password)
    return AuthOut(token=result.token, user=UserOut.model_validate(result.user))

# -----------------------------
# OAuth
# -----------------------------
def _frontend_redirect(path: str, **params) -> RedirectResponse:
    url = settings.FRONTEND_URL.rstrip("/") + path
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)

def _client_or_404(oauth: OAuth, provider: str):
    client = oauth.create_client(provider)
    if client is None:
        raise NotFoundError("Unknown OAuth provider")
    return client

@router.get(
    "/auth/{provider}",
    summary="Démarrer une connexion OAuth",
    description="Redirige vers la page de consentement du fournisseur (ex: google).",
    status_code=status.HTTP_302_FOUND,
    responses={404: {"description": "Fournisseur inconnu ou non configuré"}},
)
async def oauth_begin(provider: str, request: Request, oauth: OAuth = Depends(get_oauth)):
    client = _client_or_404(oauth, provider)
    redirect_uri = settings.OAUTH_CALLBACK_URL or str(request.url_for("oauth_callback", provider=provider))
    return await client.authorize_redirect(request, redirect_uri)

@router.get(
    "/auth/{provider}/callback",
    name="oauth_callback",
    summary="Retour du fournisseur OAuth",
    description="Résout (ou crée) l'utilisateur puis redirige vers le frontend avec le token.",
    status_code=status.HTTP_302_FOUND,
)
async def oauth_callback(
    provider: str,
    request: Request,
    oauth: OAuth = Depends(get_oauth),
    svc: AuthService = Depends(get_auth_service),
):
    client = _client_or_404(oauth, provider)
    try:
        token = await client.authorize_access_token(request)
        userinfo = token.get("userinfo") or await client.userinfo(token=token)
        profile = profile_from_userinfo(provider, userinfo)
        # Accès base synchrone : exécuté hors de la boucle d'événements
        result = await run_in_threadpool(
            svc.oauth_log_in,
            provider=profile.provider,
            provider_user_id=profile.subject,
            email=profile.email,
            display_name=profile.name,
        )
    except (OAuthError, ValueError, AppError) as e:
        logger.warning("OAuth callback failed for %s: %s", provider, e)
        return _frontend_redirect("/login", error="oauth_failed")

    return _frontend_redirect("/callback", token=result.token)
