"""Health check API endpoints"""
from fastapi import APIRouter, Depends, Request

from app.deps.common import get_store
from core.store import Store
from service.dto import HealthResponseDTO
from service.health_service import get_health

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponseDTO)
def health_check(request: Request, store: Store = Depends(get_store)) -> HealthResponseDTO:
    """
    Health check endpoint, including a database ping.

    Returns:
        HealthResponseDTO: Health status with timestamp
    """
    return get_health(store, version=request.app.state.settings.app_version)
