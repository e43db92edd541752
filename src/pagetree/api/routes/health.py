from fastapi import APIRouter, Depends, Response, status

from pagetree.api.dependencies import get_store
from pagetree.api.schemas import HealthResponse, ReadinessResponse
from pagetree.core.ports.database import PageStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/ready", response_model=ReadinessResponse)
async def readiness(response: Response, store: PageStore = Depends(get_store)) -> ReadinessResponse:
    """Ready once the database answers and the page tables have been migrated."""
    if not await store.ping():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="degraded", database="down", schema_ready=False)
    if not await store.has_schema():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="degraded", database="up", schema_ready=False)
    return ReadinessResponse()
