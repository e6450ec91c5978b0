# Routes module
from .admin import router as admin_router
from .notifications import router as notifications_router

__all__ = ["admin_router", "notifications_router"]
