# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Vinyl Tracker API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    VinylTrackerException,
    vinyl_tracker_exception_handler,
)
from app.routers import albums, artists, health, profile, search
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration and shutdown.
    """
    logger.info(f"Starting Vinyl Tracker API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Buckets: album art={settings.ALBUM_ART_BUCKET}, "
        f"profile photos={settings.PROFILE_PHOTO_BUCKET}"
    )

    yield

    logger.info("Shutting down Vinyl Tracker API")


# Create FastAPI application
app = FastAPI(
    title="Vinyl Tracker API",
    description="""
## Personal Vinyl Collection API

Track the records you own. Sign in with Supabase Auth; the session cookie
set by `/api/auth/callback` authenticates every collection request.

### How It Works

1. **Search** - Look up a release on MusicBrainz to prefill the details
2. **Add** - Save the album, optionally with a photo of the cover
3. **Browse** - List, edit and remove albums; see collection stats

### Quick Start

```bash
# Search MusicBrainz
curl "http://localhost:8000/api/search-albums?q=kind+of+blue"

# Add an album
curl -X POST http://localhost:8000/api/albums \\
  -H "Authorization: Bearer $TOKEN" \\
  -F artist="Miles Davis" -F album_title="Kind of Blue" \\
  -F release_year=1959 -F condition="Near Mint" \\
  -F cover_image=@cover.jpg
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Auth callback, logout and current user",
        },
        {
            "name": "Albums",
            "description": "Add, list, edit and delete albums",
        },
        {
            "name": "Artists",
            "description": "Artist autocomplete",
        },
        {
            "name": "Profile",
            "description": "Display name and profile photo",
        },
        {
            "name": "Search",
            "description": "MusicBrainz release search and cover art lookup",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests with the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(VinylTrackerException)
async def handle_vinyl_tracker_exception(request: Request, exc: VinylTrackerException):
    """Handle custom Vinyl Tracker exceptions."""
    return await vinyl_tracker_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Album endpoints
app.include_router(
    albums.router,
    prefix="/api/albums",
    tags=["Albums"]
)

# Artist autocomplete
app.include_router(
    artists.router,
    prefix="/api",
    tags=["Artists"]
)

# Profile endpoints
app.include_router(
    profile.router,
    prefix="/api/profile",
    tags=["Profile"]
)

# Metadata search endpoints
app.include_router(
    search.router,
    prefix="/api",
    tags=["Search"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Vinyl Tracker API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health",
    }
