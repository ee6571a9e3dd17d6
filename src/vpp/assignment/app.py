"""FastAPI application for App Store license assignment.

This is the main entry point for the API server.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import close_fleet_client, init_fleet_client
from .api.router import router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    - Startup: Initialize the Fleet client
    - Shutdown: Close the Fleet client
    """
    logger.info("Starting App Store VPP API...")

    try:
        await init_fleet_client()
    except Exception as e:
        # Keep serving /health so the misconfiguration is visible
        logger.error(f"Failed to initialize Fleet client: {e}")

    yield

    logger.info("Shutting down App Store VPP API...")
    await close_fleet_client()


app = FastAPI(
    title="App Store VPP License API",
    description="""
    API for adding Volume Purchasing Program (VPP) App Store apps to teams.

    ## Workflow

    1. Fetch the view for a team: VPP status, then the purchasable apps
    2. Pick an app
    3. Assign it; the response carries the notifications and the redirect
    """,
    version="1.0.0",
    lifespan=lifespan,
)

cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-API-Key"],
)

app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "App Store VPP License API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/app-store-vpp/health",
    }


@app.get("/health")
async def health():
    """Global health check."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.vpp.assignment.app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
