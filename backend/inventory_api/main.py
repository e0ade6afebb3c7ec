"""FastAPI application bootstrap and router wiring."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_api.api.errors import register_exception_handlers
from inventory_api.api.middleware import RequestLoggingMiddleware
from inventory_api.api.routers import health, products
from inventory_api.api.schemas.envelope import create_response
from inventory_api.core.config import get_settings
from inventory_api.core.logging import configure_logging
from inventory_api.db.base import Base
from inventory_api.db.session import dispose_engine, engine
from inventory_api.utils.redis_client import close_redis_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    logger.info(
        f"Starting {settings.app_name} v{settings.api_version} "
        f"({settings.environment})"
    )
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables verified")
    try:
        yield
    finally:
        logger.info("Shutting down, releasing connections")
        dispose_engine()
        close_redis_client()


def create_app() -> FastAPI:
    """Instantiate the FastAPI app and include top-level routers."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        lifespan=lifespan,
    )

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        expose_headers=["X-API-Version"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router, prefix="/api/products", tags=["products"])

    @app.get("/", summary="API information", include_in_schema=False)
    def root() -> dict:
        return create_response(
            f"Welcome to the {settings.app_name}",
            {
                "api_name": settings.app_name,
                "version": settings.api_version,
                "environment": settings.environment,
                "endpoints": {
                    "products": "/api/products",
                    "health": "/health",
                    "documentation": app.docs_url,
                },
            },
        ).model_dump(exclude_unset=True)

    return app


app = create_app()
