from __future__ import annotations

from fastapi import APIRouter

from btsearch.api.routes.health import router as health_router
from btsearch.api.routes.searches import router as searches_router

# Top-level API router
router = APIRouter()

router.include_router(health_router)
router.include_router(searches_router)
