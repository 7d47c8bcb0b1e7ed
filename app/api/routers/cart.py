#app/api/routers/cart.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.schemas import (
    AddToCartIn,
    ApiResponse,
    CartItemOut,
    CartOut,
    UpdateCartIn,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=ApiResponse[CartOut])
def get_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=CartService(db).list_cart(user.id))


@router.post("", response_model=ApiResponse[CartItemOut])
def add_item(
    payload: AddToCartIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item, created = CartService(db).add_item(user.id, payload.product_id, payload.quantity)
    message = "Item added to cart successfully" if created else "Cart item updated successfully"
    return ApiResponse(data=item, message=message)


@router.put("", response_model=ApiResponse[CartItemOut])
def update_item(
    payload: UpdateCartIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = CartService(db).update_item(user.id, payload.product_id, payload.quantity)
    if item is None:
        return ApiResponse(message="Item removed from cart")
    return ApiResponse(data=item, message="Cart item updated successfully")


@router.delete("", response_model=ApiResponse)
def delete_items(
    product_id: int | None = Query(None, alias="productId"),
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    if product_id is not None:
        svc.remove_item(user.id, product_id)
        return ApiResponse(message="Item removed from cart")

    svc.clear_cart(user.id)
    return ApiResponse(message="Cart cleared successfully")
