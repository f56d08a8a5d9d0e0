"""
Gestionnaires d’exceptions (utilisés par la factory).
- Toute erreur est rendue en JSON {"error": ...}: aucune trace de pile côté appelant.
- RelayError (ValidationError, GatewayError, PersistenceError): statut porté par l'exception.
- HTTPException / corps invalide: même format pour les clients du relais (front, GoPay).
"""
import logging
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from backend.errors import RelayError, PersistenceError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers d'erreurs applicatives.
    - PersistenceError: le détail reste dans les logs, l'appelant reçoit un message générique.
    - Exception non gérée: 500 générique, loggée avec la trace.
    """
    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        if isinstance(exc, PersistenceError):
            logger.error("Persistence error on %s: %s", request.url.path, exc.message)
        elif exc.status_code >= 500:
            logger.error("Upstream error on %s: status=%s %s", request.url.path, exc.status_code, exc.to_content())
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
