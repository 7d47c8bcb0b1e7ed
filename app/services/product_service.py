# app/services/product_service.py
import math
from decimal import Decimal

from sqlalchemy.orm import Session

from app.domain.errors import NotFound, ValidationError
from app.domain.schemas import PaginationOut, ProductOut, ProductPageOut
from app.repos.product_repo import ProductRepo


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(
        self,
        page: int = 1,
        limit: int = 10,
        sort: str | None = None,
        brand: str | None = None,
        model: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> ProductPageOut:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError(
                "Invalid query parameters",
                details=[{"loc": ["query", "minPrice"], "msg": "minPrice must not exceed maxPrice"}],
            )

        filters = dict(brand=brand, model=model, min_price=min_price, max_price=max_price)
        products = self.repo.list_products(offset=(page - 1) * limit, limit=limit, sort=sort, **filters)
        total_count = self.repo.count_products(**filters)
        total_pages = math.ceil(total_count / limit)

        return ProductPageOut(
            products=[ProductOut.model_validate(p) for p in products],
            pagination=PaginationOut(
                page=page,
                limit=limit,
                total_count=total_count,
                total_pages=total_pages,
                has_next=page < total_pages,
                has_prev=page > 1,
            ),
        )

    def get_product(self, product_id: int) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return ProductOut.model_validate(product)
