# app/services/notification_service.py
from sqlalchemy.orm import Session

from app.domain.schemas import NotificationsOut
from app.repos.cart_repo import CartRepo
from app.services.cart_service import cart_total


class NotificationService:
    """Podsumowanie koszyka dla badge'a w aplikacji."""

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    def summary(self, user_id: int) -> NotificationsOut:
        items = self.repo.get_cart_items(user_id)
        count = self.repo.count_items(user_id)
        return NotificationsOut(
            cart_item_count=count,
            total_amount=cart_total(items),
            has_items=count > 0,
        )
