"""Configuration endpoints."""

import math
import time

from fastapi import APIRouter, Depends, HTTPException

from bdscore.web.api.v1.models import HealthResponse, WeightingsResponse, WeightingsUpdate
from bdscore.web.api.v1.score import get_store
from bdscore.web.state import WeightingStore

router = APIRouter()

_start_time = time.time()


@router.get("/weightings", response_model=WeightingsResponse)
async def get_weightings(store: WeightingStore = Depends(get_store)):
    """Get the active tag weighting table."""
    table = store.weighting.to_dict()
    return WeightingsResponse(count=len(table), tag_weightings=table)


@router.put("/weightings", response_model=WeightingsResponse)
async def replace_weightings(update: WeightingsUpdate, store: WeightingStore = Depends(get_store)):
    """
    Replace the tag weighting table.

    The new table replaces the old one wholesale; tags not in the payload
    become neutral. Changes are not persisted across restarts.
    """
    for tag, multiplier in update.tag_weightings.items():
        if not tag.strip():
            raise HTTPException(status_code=400, detail="Tag names must not be empty")
        if not math.isfinite(multiplier):
            raise HTTPException(status_code=400, detail=f"Multiplier for '{tag}' must be finite")

    store.replace(update.tag_weightings)
    return await get_weightings(store)


@router.get("/health", response_model=HealthResponse)
async def health_check(store: WeightingStore = Depends(get_store)):
    """Health check endpoint."""
    from bdscore import __version__

    return HealthResponse(
        status="ok",
        version=__version__,
        weighting_tags=len(store.weighting),
        uptime_seconds=int(time.time() - _start_time),
    )
