"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l’instance FastAPI (app).

Configure :

le logging,

CORS (autorisations de qui peut appeler ces API : FRONTEND_URL / ALLOWED_ORIGINS),

la session signée utilisée par le flux OAuth,

la conversion des erreurs métier (app.core.errors) en réponses JSON,

schéma OpenAPI personnalisé.

Inclut les routers (auth, todos, images, users).

Initialise la base au démarrage (@app.on_event("startup")).

🔹 Point unique d’exécution : uvicorn app.main:app --reload.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from app.core.config import settings
from app.core.errors import AppError
from app.core.logging import configure_logging
from app.core.openapi import custom_openapi
from app.db.session import init_db

from app.api.v1.routers import authentication, images, todos, users

import uvicorn

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    openapi_tags=[
        {"name": "auth", "description": "Inscription, connexion locale et OAuth"},
        {"name": "users", "description": "Utilisateur courant"},
        {"name": "todos", "description": "Tâches de l'utilisateur (propriétaire uniquement)"},
        {"name": "images", "description": "Lecture des images jointes aux todos"},
    ],
)

# Session signée : stocke le `state` OAuth entre la redirection et le callback
app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET, https_only=(settings.ENV == "prod"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Accept", "Authorization", "Content-Type", "If-None-Match"],
    expose_headers=["Link", "ETag"],
    max_age=300,
)

# -----------------------------
# Erreurs
# -----------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail, exc_info=exc.__cause__)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Corps illisible, champ trop long, id non entier : même réponse 400 que ValidationError
    logger.info("Invalid request on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Invalid request format"})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# -----------------------------
# Routers
# -----------------------------
app.include_router(authentication.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)
app.include_router(todos.router, prefix=settings.API_PREFIX)
app.include_router(images.router, prefix=settings.API_PREFIX)

@app.get("/health", tags=["health"], summary="Vérification de vie")
def health():
    return {"status": "ok"}

# Génération du schéma OpenAPI custom (facultatif, mais propre)
app.openapi = lambda: custom_openapi(app)

# Démarrage
@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s started (env=%s, image storage=%s)", settings.APP_NAME, settings.ENV, settings.IMAGE_STORAGE)

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=(settings.ENV == "dev")) # http://localhost:8080
