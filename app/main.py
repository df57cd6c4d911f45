"""FastAPI Application Entry Point.

Configures the app, lifespan, CORS, and includes all route modules.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from design2api import __version__, config
from design2api.logging_config import get_app_logger

from .database import close_db, init_db

logger = get_app_logger().getChild("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage database lifecycle."""
    await init_db()

    # Warn about missing fallback credentials
    if not (config.FIGMA_ACCESS_TOKEN and config.FIGMA_FILE_ID):
        logger.warning(
            "FIGMA_ACCESS_TOKEN / FIGMA_FILE_ID not set - design endpoints need "
            "settings saved via POST /api/settings."
        )

    yield
    await close_db()


app = FastAPI(title="Design2API", version=__version__, lifespan=lifespan)

# CORS configuration - configurable via CORS_ORIGINS env var (comma-separated)
CORS_ORIGINS = [o.strip() for o in config.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
from .routes.settings import router as settings_router  # noqa: E402
from .routes.schema import router as schema_router  # noqa: E402
from .routes.design import router as design_router  # noqa: E402

app.include_router(settings_router)
app.include_router(schema_router)
app.include_router(design_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok"}
