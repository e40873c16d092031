"""FastAPI application for the Gospel Era safeguards API.

Provides REST API endpoints wrapping the gospelera package for:
- Password policy checks and account signup/login
- Prayer commitments gated by the spam detector
- Moderator spam statistics
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gospelera import __version__
from gospelera.logging_config import setup_logger
from web.backend.app.routers import auth, prayer

setup_logger()

app = FastAPI(
    title="Gospel Era API",
    description=(
        "REST API for Gospel Era account safeguards. "
        "Provides endpoints for password policy checks, signup and login, "
        "spam-checked prayer commitments, and moderator statistics."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(prayer.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "Gospel Era API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
