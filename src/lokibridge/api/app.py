"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lokibridge import __version__
from lokibridge.clients.factory import close_clients
from lokibridge.config import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    yield
    # Shutdown
    await close_clients()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Loki Bridge API",
        description="Swap validation and deposit lookup for the BNB <-> LOKI bridge",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from lokibridge.api.routes import deposits, health, swaps

    app.include_router(health.router, tags=["Health"])
    app.include_router(swaps.router, prefix="/api/v1", tags=["Swaps"])
    app.include_router(deposits.router, prefix="/api/v1", tags=["Deposits"])

    return app


# Default app instance
app = create_app()
