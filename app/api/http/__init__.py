from app.api.http.health import router as health_router
from app.api.http.users import router as users_router
from app.api.http.documents import router as documents_router
from app.api.http.sharing import router as sharing_router
from app.api.http.collaboration import router as collaboration_router
from app.api.http.admin import router as admin_router

__all__ = [
    "health_router",
    "users_router",
    "documents_router",
    "sharing_router",
    "collaboration_router",
    "admin_router"
]
