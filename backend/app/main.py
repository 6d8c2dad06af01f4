"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, get_settings
from app.database import create_db_engine, create_session_factory, init_db
from app.exception_handlers import register_exception_handlers
from app.services.audit import AuditRecorder
from app.routers import (
    health_router,
    auth_router,
    projects_router,
    tasks_router,
    tenants_router,
    users_router,
    superadmin_router,
)

logger = logging.getLogger(__name__)

# Mount routers under /api
API_PREFIX = "/api"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one engine and session factory."""
    settings = settings or get_settings()
    configure_logging(settings)

    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        init_db(engine)
        logger.info(f"{settings.app_name} started ({settings.environment})")
        yield
        # Shutdown
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant project and task management",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.audit_recorder = AuditRecorder(session_factory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(projects_router, prefix=API_PREFIX)
    app.include_router(tasks_router, prefix=API_PREFIX)
    app.include_router(tenants_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(superadmin_router, prefix=API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "app": settings.app_name,
            "docs": "/docs",
            "health": f"{API_PREFIX}/health"
        }

    return app


app = create_app()
