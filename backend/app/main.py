"""
Bandhan FastAPI Application
Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.database import init_db, close_db
from app.api.errors import register_exception_handlers, rate_limit_exceeded_handler

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and cleanup on shutdown.
    """
    # Startup
    from app.logging_config import setup_logging
    setup_logging(log_dir=settings.log_dir, log_level=settings.log_level)

    logger.info("Starting Bandhan backend...")

    # Create tables directly in debug mode.
    # In production, use Alembic migrations instead
    if settings.debug:
        await init_db()
        logger.info("Database initialized (debug mode)")

    if not settings.media_store_configured:
        logger.warning("Cloudinary credentials are not set; uploads and media deletes will fail")
    if not settings.admin_registration_key:
        logger.info("ADMIN_REGISTRATION_KEY is empty; admin self-registration is disabled")

    logger.info("Bandhan backend ready!")

    yield

    # Shutdown
    logger.info("Shutting down Bandhan backend...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title="Bandhan",
    description="""
    ## Matrimony Matching API

    ### Features
    - **Accounts**: Member and administrator registration and login with bearer tokens
    - **Profiles**: Profile details, profile picture, additional pictures and a photo gallery
    - **Matching**: Filtered candidate browsing and reciprocal likes that turn into matches
    - **Admin**: Member statistics, search, editing and removal behind permission checks
    """,
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Configure rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Bandhan API",
        "version": "0.1.0",
        "docs": "/api/docs",
        "status": "running"
    }


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "service": "bandhan-backend",
        "version": "0.1.0"
    }


@app.get("/api/health/db", tags=["Health"])
async def database_health():
    """Database connectivity check."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError
    from app.database import AsyncSessionLocal

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.fetchone()

        return {
            "status": "healthy",
            "database": "connected",
        }
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
        }


from app.api import auth, admin_auth, admin, profile, matches


# =============================================
# API Routers
# =============================================

app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
app.include_router(admin_auth.router, prefix=f"{settings.api_prefix}/admin-auth", tags=["Admin Auth"])
app.include_router(admin.router, prefix=f"{settings.api_prefix}/admin", tags=["Admin"])
app.include_router(profile.router, prefix=f"{settings.api_prefix}/profile", tags=["Profile"])
app.include_router(matches.router, prefix=f"{settings.api_prefix}/matches", tags=["Matches"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
