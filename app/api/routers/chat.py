from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.schemas import ApiResponse, MessageIn, MessageOut
from app.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("", response_model=ApiResponse[List[MessageOut]])
def list_messages(
    limit: int = Query(50, ge=1, le=100),
    before: datetime | None = Query(None),
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=ChatService(db).list_messages(user.id, limit, before))


@router.post("", response_model=ApiResponse[MessageOut])
def send_message(
    payload: MessageIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    message = ChatService(db).send_message(user.id, payload.content)
    return ApiResponse(data=message, message="Message sent successfully")
