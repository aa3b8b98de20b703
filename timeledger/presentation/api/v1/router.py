"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from timeledger.presentation.api.v1.endpoints.health import router as health_router
from timeledger.presentation.api.v1.endpoints.clients import router as clients_router
from timeledger.presentation.api.v1.endpoints.time_entries import router as time_entries_router
from timeledger.presentation.api.v1.endpoints.reports import router as reports_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(clients_router)
router.include_router(time_entries_router)
router.include_router(reports_router)
