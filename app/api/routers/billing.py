# app/api/routers/billing.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_lock_service, get_payment_gateway
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.schemas import ApiResponse, BillingIn, CheckoutOut
from app.services.checkout_service import CheckoutService

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("", response_model=ApiResponse[CheckoutOut])
def checkout(
    payload: BillingIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    payment_gateway=Depends(get_payment_gateway),
    lock_service=Depends(get_lock_service),
):
    """
    Tworzy zamowienie z wybranych pozycji koszyka i payment intent w Stripe.
    Status zamowienia zmienia potem tylko webhook.
    """
    svc = CheckoutService(db, payment_gateway=payment_gateway, lock_service=lock_service)
    result = svc.checkout(
        user_id=user.id,
        cart_item_ids=payload.cart_item_ids,
        billing_address=payload.billing_address,
        shipping_address=payload.shipping_address,
    )
    return ApiResponse(data=result, message="Order created successfully")
