from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.schemas import ApiResponse, NotificationsOut
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[NotificationsOut])
def get_notifications(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=NotificationService(db).summary(user.id))
