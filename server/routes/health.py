"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from server.schemas.responses import CacheStatsDTO, HealthResponseDTO
from tools.web import get_session_cache

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check():
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        version="1.0.0",
        cache=CacheStatsDTO(**get_session_cache().stats()),
    )
