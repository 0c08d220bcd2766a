"""API routers."""
from dokumenta.routers.health import router as health_router
from dokumenta.routers.auth import router as auth_router
from dokumenta.routers.documents import router as documents_router
from dokumenta.routers.notifications import router as notifications_router
from dokumenta.routers.admin import router as admin_router

__all__ = [
    "health_router",
    "auth_router",
    "documents_router",
    "notifications_router",
    "admin_router",
]
