"""
Routes simples (hors routers).
- /: liveness en texte brut (utilisé par l'hébergeur et pour vérifier le déploiement).
- /favicon.ico: pas de contenu (204) pour éviter des 404 dans les logs.
"""
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from starlette.status import HTTP_204_NO_CONTENT

LIVENESS_TEXT = "🚀 GoPay API is Running!"

def register_routes(app: FastAPI) -> None:
    """
    Enregistre les routes racine.
    - Laisse l’OpenAPI propre (include_in_schema=False).
    """
    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    def liveness():
        return LIVENESS_TEXT

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
