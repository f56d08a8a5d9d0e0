# module backend.app
"""
Application FastAPI du relais GoPay.
Toute la configuration (CORS, handlers d'erreurs, routers, lifespan) est centralisée dans
backend.app_setup.factory.create_app(); ce module expose l'instance globale `app`.
"""
from backend.app_setup.factory import create_app

# App globale
app = create_app()
