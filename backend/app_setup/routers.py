"""
Registre central des routers.
- API: invoices (création de facture GoPay), notifications (webhooks GoPay)
- Health: health_router
"""
from fastapi import FastAPI
from backend.invoices import views as invoices_views
from backend.notifications import views as notifications_views
from backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l’application.
    - L’ordre n’a pas d’impact sauf conflits de chemins (évités par préfixes).
    """
    # API
    app.include_router(invoices_views.router)
    app.include_router(notifications_views.router)
    # Health & monitoring
    app.include_router(health_router)
