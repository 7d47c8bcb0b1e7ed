# app/repos/product_repo.py
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel

_ORDERING = {
    "price_asc": (ProductModel.price.asc(),),
    "price_desc": (ProductModel.price.desc(),),
    "name_asc": (ProductModel.name.asc(),),
    "name_desc": (ProductModel.name.desc(),),
    "created_at": (ProductModel.created_at.desc(),),
}


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def _filtered(
        self,
        stmt,
        brand: str | None,
        model: str | None,
        min_price: Decimal | None,
        max_price: Decimal | None,
    ):
        stmt = stmt.where(ProductModel.in_stock.is_(True))
        if brand:
            stmt = stmt.where(ProductModel.brand.ilike(f"%{brand}%"))
        if model:
            stmt = stmt.where(ProductModel.model.ilike(f"%{model}%"))
        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)
        return stmt

    def list_products(
        self,
        offset: int,
        limit: int,
        sort: str | None = None,
        brand: str | None = None,
        model: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[ProductModel]:
        stmt = self._filtered(select(ProductModel), brand, model, min_price, max_price)
        ordering = _ORDERING.get(sort or "created_at", _ORDERING["created_at"])
        stmt = stmt.order_by(*ordering, ProductModel.id.desc()).offset(offset).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_products(
        self,
        brand: str | None = None,
        model: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> int:
        stmt = self._filtered(select(func.count(ProductModel.id)), brand, model, min_price, max_price)
        return self.db.execute(stmt).scalar_one()
