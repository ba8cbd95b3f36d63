"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from engage_dashboard import __version__
from engage_dashboard.api.routes import (
    ai,
    analytics,
    dashboard,
    engage_activities,
    health,
    insights,
    monetization,
    posts,
    preferences,
    social_accounts,
)
from engage_dashboard.config import settings
from engage_dashboard.errors import DuplicateRecordError, SchemaValidationError
from engage_dashboard.logging import get_logger, setup_logging
from engage_dashboard.services.storage import build_store

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    store = app.state.store
    logger.info(
        "application_starting",
        version=__version__,
        seeded=settings.seed_demo_data,
        users=len(store.users),
        posts=len(store.posts),
    )

    yield

    # Shutdown
    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title="Engage Dashboard",
    description="Social media dashboard API with content scheduling and engagement insights",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)
app.state.store = build_store(seed=settings.seed_demo_data)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchemaValidationError)
async def schema_validation_error_handler(
    request: Request, exc: SchemaValidationError
) -> JSONResponse:
    """Reject invalid input field by field; nothing was saved."""
    logger.info(
        "request_validation_failed",
        method=request.method,
        path=request.url.path,
        fields=exc.paths,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())


@app.exception_handler(DuplicateRecordError)
async def duplicate_record_error_handler(
    request: Request, exc: DuplicateRecordError
) -> JSONResponse:
    logger.info("duplicate_record_rejected", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": str(exc)})


# Register routers
app.include_router(health.router)
app.include_router(posts.router, prefix="/api")
app.include_router(social_accounts.router, prefix="/api")
app.include_router(analytics.router, prefix="/api")
app.include_router(engage_activities.router, prefix="/api")
app.include_router(insights.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(monetization.router, prefix="/api")
app.include_router(preferences.router, prefix="/api")
app.include_router(ai.router, prefix="/api")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint redirect to docs."""
    return {
        "name": "Engage Dashboard",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "engage_dashboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
