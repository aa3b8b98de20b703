"""Top-level API router — includes versioned sub-routers."""

from fastapi import APIRouter

from timeledger.presentation.api.v1.router import router as v1_router

router = APIRouter(
    prefix="/api",
    responses={401: {"description": "X-User-Id header missing"}},
)
router.include_router(v1_router)
