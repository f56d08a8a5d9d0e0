"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS pour le front de la boutique.
- register_request_logging_middleware: trace méthode, chemin, statut et durée de chaque requête.
"""
import logging
import time
from fastapi import Request, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from backend.config import CORS_ORIGINS

logger = logging.getLogger(__name__)

def register_basic_middlewares(app: FastAPI) -> None:
    """
    CORSMiddleware: autorise les origines définies (CORS_ORIGINS, "*" par défaut).
    Les webhooks GoPay sont des appels serveur à serveur, non concernés par CORS.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

def register_request_logging_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s -> %s (%.0f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
