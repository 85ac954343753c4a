"""FastAPI application factory."""

import os
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bdscore.web.state import WeightingStore, create_store

logger = logging.getLogger(__name__)


def create_app(store: Optional[WeightingStore] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    from bdscore import __version__

    app = FastAPI(
        title="BD Opportunity Scorer",
        description="Tag-weighted scoring and CHASE/SHAPE/MONITOR/AVOID classification",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware for production
    origins = os.environ.get("ALLOWED_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",")]
    else:
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.weightings = store or create_store()
    logger.info("Scoring API ready with %d tag weightings", len(app.state.weightings.weighting))

    # API v1 routes
    from bdscore.web.api.v1 import router as api_router
    app.include_router(api_router)

    return app


# Create default app instance
app = create_app()
