# app/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.order import OrderModel, OrderItemModel, PaymentModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        # flush bez commita, id zamowienia potrzebne do payment intentu
        order.items = items
        self.db.add(order)
        self.db.flush()
        return order

    def add_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_for_update(self, order_id: int) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.id == order_id).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items), selectinload(OrderModel.payment))
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items), selectinload(OrderModel.payment))
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_payment(self, order_id: int) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.order_id == order_id)
        ).scalar_one_or_none()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
