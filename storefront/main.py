from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.error_handlers import setup_error_handlers, add_request_id_middleware
from .logging import configure_logging
from .cart.controller import router as cart_router
from .orders.controller import router as orders_router
from .catalogue.controller import router as catalogue_router

# Import models to ensure they are registered with SQLAlchemy
from .database.models import Base
from .database.core import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    configure_logging()
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")

    yield

    engine.dispose()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )

    setup_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID for error tracking
    app.middleware("http")(add_request_id_middleware)

    # Routers define their own prefixes ('/cart', '/orders'), mounted under '/api'
    app.include_router(cart_router, prefix="/api", tags=["Cart"])
    app.include_router(orders_router, prefix="/api", tags=["Orders"])
    app.include_router(catalogue_router, prefix="/api", tags=["Catalogue"])

    @app.get("/health")
    async def health_check():
        """Simple health check endpoint"""
        return {"status": "ok"}

    return app


app = create_app()
