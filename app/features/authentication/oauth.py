"""
➡️ But : Déclarer les fournisseurs OAuth (Authlib, client Starlette).

Le registre est construit explicitement à partir des settings puis injecté
(Depends(get_oauth)) ; aucun fournisseur n'est enregistré si ses identifiants manquent.

Le flux OAuth stocke son `state` dans la session Starlette :
SessionMiddleware (signée avec SESSION_SECRET) doit être installé (voir app/main.py).
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from authlib.integrations.starlette_client import OAuth

from app.core.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"


@dataclass(frozen=True)
class OAuthProfile:
    """Identité renvoyée par un fournisseur, normalisée."""
    provider: str
    subject: str
    email: str
    name: Optional[str] = None


def build_oauth(settings: Settings) -> OAuth:
    oauth = OAuth()
    if settings.google_oauth_enabled:
        oauth.register(
            name="google",
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            server_metadata_url=GOOGLE_METADATA_URL,
            client_kwargs={"scope": "openid email profile"},
        )
        logger.info("Google OAuth enabled")
    else:
        logger.warning("Google OAuth disabled (missing GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET)")
    return oauth


def profile_from_userinfo(provider: str, userinfo: Mapping[str, Any]) -> OAuthProfile:
    """
    Convertit les claims OpenID Connect (`sub`, `email`, `name`) en OAuthProfile.
    Lève ValueError si l'identifiant du sujet manque.
    """
    subject = str(userinfo.get("sub") or userinfo.get("id") or "")
    if not subject:
        raise ValueError("userinfo without subject")
    return OAuthProfile(
        provider=provider,
        subject=subject,
        email=str(userinfo.get("email") or ""),
        name=userinfo.get("name"),
    )
