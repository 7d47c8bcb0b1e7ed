from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.message import MessageModel


class MessageRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_messages(self, user_id: int, limit: int, before: datetime | None = None) -> list[MessageModel]:
        stmt = select(MessageModel).where(MessageModel.user_id == user_id)
        if before is not None:
            stmt = stmt.where(MessageModel.created_at < before)
        stmt = stmt.order_by(MessageModel.created_at.desc(), MessageModel.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def create_message(self, message: MessageModel) -> MessageModel:
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message
