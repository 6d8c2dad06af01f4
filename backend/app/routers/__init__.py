"""API routers."""
from app.routers.health import router as health_router
from app.routers.auth import router as auth_router
from app.routers.projects import router as projects_router
from app.routers.tasks import router as tasks_router
from app.routers.tenants import router as tenants_router
from app.routers.users import router as users_router
from app.routers.superadmin import router as superadmin_router

__all__ = [
    "health_router",
    "auth_router",
    "projects_router",
    "tasks_router",
    "tenants_router",
    "users_router",
    "superadmin_router",
]
