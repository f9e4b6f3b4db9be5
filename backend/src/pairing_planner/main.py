"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pairing_planner.config import settings
from pairing_planner.api.routes.sessions import router as sessions_router
from pairing_planner.services.session_service import PairingSessionService

logging.basicConfig(level="DEBUG" if settings.debug else settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    if not hasattr(app.state, "session_service"):
        app.state.session_service = PairingSessionService(
            max_players=settings.exhaustive_max_players,
            default_rating=settings.default_rating,
            default_method=settings.default_solver_method,
        )
    yield


app = FastAPI(
    title="Pairing Planner",
    description="Team pairing assistant - matchup optimization and step-by-step recommendations",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "pairing-planner"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Pairing Planner API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(sessions_router)
