from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import ApiResponse, ProductOut, ProductPageOut, ProductSort
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ApiResponse[ProductPageOut])
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: ProductSort | None = Query(None),
    brand: str | None = Query(None),
    model: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    db: Session = Depends(get_db),
):
    result = ProductService(db).list_products(
        page=page,
        limit=limit,
        sort=sort.value if sort else None,
        brand=brand,
        model=model,
        min_price=min_price,
        max_price=max_price,
    )
    return ApiResponse(data=result)


@router.get("/{product_id}", response_model=ApiResponse[ProductOut])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ApiResponse(data=ProductService(db).get_product(product_id))
