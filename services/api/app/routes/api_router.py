"""Central JSON API router composition.

This module is responsible for mounting individual JSON route modules on the
versioned router and providing a single import point for
`FastAPI.include_router(...)`.
"""

from fastapi import APIRouter

from .api_questions import router as questions_router

router = APIRouter(prefix="/api/v1", tags=["v1"])

router.include_router(questions_router)
