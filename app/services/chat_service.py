from datetime import datetime

from sqlalchemy.orm import Session

from app.data.models.message import MessageModel
from app.domain.schemas import MessageOut
from app.repos.message_repo import MessageRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ChatService:
    def __init__(self, db: Session):
        self.repo = MessageRepo(db)

    def list_messages(self, user_id: int, limit: int = 50, before: datetime | None = None) -> list[MessageOut]:
        # najnowsze `limit` wiadomosci, zwracane chronologicznie
        messages = self.repo.list_messages(user_id, limit, before)
        return [MessageOut.model_validate(m) for m in reversed(messages)]

    def send_message(self, user_id: int, content: str) -> MessageOut:
        message = self.repo.create_message(
            MessageModel(user_id=user_id, content=content, is_from_user=True)
        )
        logger.info(f"Message {message.id} sent by user {user_id}")
        return MessageOut.model_validate(message)
