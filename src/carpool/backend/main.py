"""
Carpool Datasource Backend

Serves metric queries against the Carpool metrics API as column frames,
one result per sub-query.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from carpool.backend.config import load_settings
from carpool.backend.models import HealthResponse, QueryDataRequest, QueryDataResponse
from carpool.backend.services import QueryController

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global instances
controller: QueryController | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global controller

    logger.info("Starting Carpool datasource backend")

    settings = load_settings()
    controller = QueryController(settings)
    logger.info(f"Upstream host: {settings.url}, max buckets: {settings.max_buckets}")

    yield

    logger.info("Shutting down Carpool datasource backend")

    if controller:
        await controller.dispose()

    logger.info("Shutdown complete")


app = FastAPI(
    title="Carpool Datasource API",
    description="Metrics query adapter for the Carpool Solana metrics API",
    version="0.1.0",
    lifespan=lifespan,
)


# ============================================================================
# Health & Status Routes
# ============================================================================


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "Carpool Datasource API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """
    Datasource health check.

    Verifies that an upstream host and an API key are configured.
    """
    if not controller:
        raise HTTPException(status_code=503, detail="Service not initialized")

    return await controller.check_health()


# ============================================================================
# Query Routes
# ============================================================================


@app.post("/query", response_model=QueryDataResponse)
async def query_data(request: QueryDataRequest):
    """
    Run one or more metric sub-queries.

    Every sub-query gets a result keyed by its refId. A failing sub-query
    carries an error message and a 400 status without affecting the others.
    """
    if not controller:
        raise HTTPException(status_code=503, detail="Service not initialized")

    try:
        return await controller.query_data(request)
    except Exception as e:
        logger.error(f"Error running queries: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e


# ============================================================================
# Main Entry Point
# ============================================================================


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "carpool.backend.main:app",
        host="0.0.0.0",
        port=8000,
    )
