"""API v1 router."""

from fastapi import APIRouter

from bdscore.web.api.v1 import score, config

router = APIRouter(prefix="/api/v1")

router.include_router(score.router, tags=["score"])
router.include_router(config.router, tags=["config"])
