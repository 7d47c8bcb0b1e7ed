# app/repos/cart_repo.py
from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Pozycje koszyka per user. Metody add/delete nie commituja,
    o granicy transakcji decyduje serwis (commit / rollback).
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: int) -> list[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().unique().all())

    def get_cart_item(self, user_id: int, product_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalars().unique().one_or_none()

    def get_items_by_ids(self, user_id: int, item_ids: list[int]) -> list[CartItemModel]:
        # tylko pozycje danego usera, obce id odpadaja po cichu
        if not item_ids:
            return []
        stmt = (
            select(CartItemModel)
            .where(
                CartItemModel.id.in_(item_ids),
                CartItemModel.user_id == user_id,
            )
            .order_by(CartItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().unique().all())

    def count_items(self, user_id: int) -> int:
        stmt = select(func.count(CartItemModel.id)).where(CartItemModel.user_id == user_id)
        return self.db.execute(stmt).scalar_one()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def increment_quantity(self, item_id: int, quantity: int) -> None:
        # inkrement w SQL, rownolegle dodania sie nie gubia
        self.db.execute(
            update(CartItemModel)
            .where(CartItemModel.id == item_id)
            .values(quantity=CartItemModel.quantity + quantity)
            .execution_options(synchronize_session=False)
        )

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_items(self, user_id: int, item_ids: list[int]) -> int:
        if not item_ids:
            return 0
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id.in_(item_ids),
                CartItemModel.user_id == user_id,
            )
        )
        return res.rowcount

    def clear(self, user_id: int) -> int:
        res = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return res.rowcount

    def refresh(self, item: CartItemModel) -> None:
        self.db.refresh(item)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
