#!/usr/bin/env python3
"""
TankScout API - FastAPI Application

Scores, ranks and compares WoT Blitz vehicles.

Usage:
    python main.py serve

Then open:
    - http://localhost:3001/api/tanks - Vehicle list (default port, configurable in config.yaml)
    - http://localhost:3001/docs - API Documentation (Swagger UI)
    - http://localhost:3001/redoc - Alternative API Documentation
"""

import sys
import logging
from contextlib import asynccontextmanager
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.cache import get_score_cache, init_score_cache
from core.config_loader import get_config
from core.scorer import get_weight_store, initial_weights
from .exceptions import register_exception_handlers
from .rate_limit import add_rate_limit_handlers
from .routers import scoring_router, vehicles_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Load configuration
config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_score_cache(
        config.cache.redis_url,
        password=config.cache.password,
        default_ttl_seconds=config.cache.default_ttl_seconds
    )
    weights = initial_weights(config.scoring.default_weights.model_dump(by_alias=True))
    get_weight_store().reset(weights)
    logger.info(f"Scoring weights initialized: {weights.to_dict()}")
    yield


# Create FastAPI app
app = FastAPI(
    title="TankScout API",
    description="API for scoring and ranking WoT Blitz vehicles",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.web.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure rate limiting
add_rate_limit_handlers(app)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(scoring_router)
app.include_router(vehicles_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    cache = get_score_cache()
    return {
        "status": "healthy",
        "service": "tankscout-api",
        "cache": cache.get_cache_stats() if cache else {"available": False}
    }


def main():
    """Run the web server."""
    import uvicorn

    logger.info(f"Starting TankScout API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
