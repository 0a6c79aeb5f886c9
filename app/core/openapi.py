"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) modifie le schéma généré par FastAPI pour :

ajouter une description détaillée (conventions d'authentification, d'erreurs, d'images),

déclarer le schéma d'authentification Bearer utilisé par les routes protégées.
"""

from fastapi.openapi.utils import get_openapi

def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API de gestion de todos multi-utilisateurs (FastAPI + SQLModel).\n\n"
            "### Conventions\n"
            "- Authentification : en-tête `Authorization: Bearer <token>` (préfixe optionnel), token valable 24h.\n"
            "- Un todo d'un autre utilisateur est indiscernable d'un todo inexistant (404).\n"
            "- Erreurs : corps `{\"detail\": \"...\"}`.\n"
            "- Todos : corps JSON ou multipart (champ fichier `image`).\n"
            "- Toutes les heures sont en UTC.\n"
        ),
        routes=app.routes,
        tags=app.openapi_tags,
    )
    components = openapi_schema.setdefault("components", {})
    components.setdefault("securitySchemes", {})["bearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    app.openapi_schema = openapi_schema
    return app.openapi_schema
