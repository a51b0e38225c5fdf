"""
Health check route.
"""
from fastapi import APIRouter, Depends
from snipbin.models import HealthCheck
from snipbin.database import PasteRepository, get_repository

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
def health_check(repo: PasteRepository = Depends(get_repository)) -> HealthCheck:
    """
    Health check endpoint.
    Returns ok=true if the storage root exists and is writable.
    """
    return HealthCheck(ok=repo.is_healthy())
