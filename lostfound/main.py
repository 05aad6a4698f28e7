import logging

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from lostfound.config import get_settings, Settings
from lostfound.db.session import get_db
from lostfound.api.v1.router import api_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Campus lost-and-found service with automatic lost/found item matching",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint with database connectivity test."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "components": {
            "api": "healthy",
            "database": db_status,
            "similarity_service": "configured" if settings.scorer_config().is_configured else "fallback_only",
        },
        "version": settings.app_version,
    }


@app.get("/config")
async def get_config(settings: Settings = Depends(get_settings)):
    """Get application configuration (non-sensitive values)."""
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "app_env": settings.app_env,
        "matching": {
            "suggestion_threshold": settings.suggestion_threshold,
            "auto_match_threshold": settings.auto_match_threshold,
            "auto_match_limit": settings.auto_match_limit,
            "auto_match_on_create": settings.auto_match_on_create,
            "confidence": {
                "high": settings.high_confidence_threshold,
                "medium": settings.medium_confidence_threshold,
            },
            "weights": settings.weights,
        },
        "similarity_service": {
            "enabled": settings.llm_enabled,
            "configured": settings.scorer_config().is_configured,
            "model": settings.llm_model,
            "timeout_seconds": settings.llm_timeout_seconds,
        },
    }
