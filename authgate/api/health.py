"""Health check endpoint reporting which storage backend is active."""

from typing import Annotated

from fastapi import APIRouter, Depends

from authgate.api.deps import get_identity_store
from authgate.core.config import settings
from authgate.schemas.health import HealthResponse
from authgate.stores.selector import IdentityStore

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> HealthResponse:
    """
    Return service health status and the storage backend in use.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        storage=identity_store.select().backend,
    )
