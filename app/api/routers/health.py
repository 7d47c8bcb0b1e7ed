from datetime import datetime, timezone

from fastapi import APIRouter

from app.domain.schemas import ApiResponse, HealthOut
from app.utils.settings import APP_ENV, APP_VERSION

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ApiResponse[HealthOut])
def health():
    return ApiResponse(
        data=HealthOut(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            version=APP_VERSION,
            environment=APP_ENV,
        )
    )
