from fastapi import APIRouter

from app.domain.schemas import ApiResponse, CoordinatesOut, StoreLocationOut
from app.utils.settings import STORE_ADDRESS, STORE_LATITUDE, STORE_LONGITUDE

router = APIRouter(prefix="/store", tags=["store"])


@router.get("/location", response_model=ApiResponse[StoreLocationOut])
def get_location():
    return ApiResponse(
        data=StoreLocationOut(
            latitude=STORE_LATITUDE,
            longitude=STORE_LONGITUDE,
            address=STORE_ADDRESS,
            coordinates=CoordinatesOut(lat=STORE_LATITUDE, lng=STORE_LONGITUDE),
        )
    )
