# app/services/order_service.py
from sqlalchemy.orm import Session

from app.domain.errors import NotFound
from app.domain.schemas import OrderOut
from app.repos.order_repo import OrderRepo


class OrderService:
    """Odczyt zamowien usera (Query)."""

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def get_order(self, order_id: int, user_id: int) -> OrderOut:
        # cudze zamowienie wyglada jak nieistniejace
        order = self.repo.get_user_order(order_id, user_id)
        if not order:
            raise NotFound("Order not found")
        return OrderOut.model_validate(order)

    def list_orders(self, user_id: int) -> list[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_user_orders(user_id)]
