"""API routes."""

from fastapi import APIRouter

from foodtrace.api.routes import (
    cleaning,
    dashboard,
    exports,
    notifications,
    production,
    reminders,
    settings,
    stock,
    temperatures,
)

api_router = APIRouter()

api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(stock.router, prefix="/stock", tags=["stock", "inbound"])
api_router.include_router(production.router, prefix="/production", tags=["production", "lots"])
api_router.include_router(temperatures.router, prefix="/temperatures", tags=["temperatures"])
api_router.include_router(cleaning.router, prefix="/cleaning", tags=["cleaning"])
api_router.include_router(exports.router, prefix="/exports", tags=["exports"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])
