# app/services/checkout_service.py
import uuid
from decimal import Decimal, ROUND_HALF_UP

from redis import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel, OrderItemModel, PaymentModel, OrderStatus, PaymentStatus
from app.domain.errors import Conflict, NoValidItems
from app.domain.schemas import CheckoutOut
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.services.cart_service import cart_total
from app.services.lock_service import LockService
from app.utils.settings import STRIPE_CURRENCY, CHECKOUT_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CheckoutService:
    """
    Koszyk -> zamowienie + payment intent.

    1. wybrane pozycje koszyka (tylko usera)
    2. total po aktualnych cenach
    3. order + order items (flush, bez commita)
    4. payment intent w Stripe z metadata {orderId, userId}
    5. payment intent id na orderze + rekord Payment, jeden commit
    6. usuniecie zuzytych pozycji koszyka (osobny commit, na koncu)

    Blad w 3-4 -> rollback, nic nie zostaje w bazie.
    Blad commita w 5 -> rollback + anulowanie intentu (kompensacja).
    Blad w 6 -> zamowienie zostaje, tylko log.
    """

    def __init__(
        self,
        db: Session,
        payment_gateway,
        lock_service: LockService,
        currency: str = STRIPE_CURRENCY,
        lock_ttl: int = CHECKOUT_LOCK_TTL_SECONDS,
    ):
        self.carts = CartRepo(db)
        self.orders = OrderRepo(db)
        self.payment_gateway = payment_gateway
        self.lock_service = lock_service
        self.currency = currency
        self.lock_ttl = lock_ttl

    def checkout(
        self,
        user_id: int,
        cart_item_ids: list[int],
        billing_address: str,
        shipping_address: str,
    ) -> CheckoutOut:
        # jeden checkout na usera naraz (double submit)
        key = LockService.checkout_key(user_id)
        owner = str(uuid.uuid4())

        if not self.lock_service.acquire(key, owner, self.lock_ttl):
            logger.warning(f"Checkout already in progress for user {user_id}")
            raise Conflict("Checkout already in progress")

        try:
            return self._checkout(user_id, cart_item_ids, billing_address, shipping_address)
        finally:
            try:
                self.lock_service.release(key, owner)
            except RedisError as e:
                # lock i tak wygasnie po TTL
                logger.warning(f"Failed to release checkout lock for user {user_id}: {e}")

    def _checkout(
        self,
        user_id: int,
        cart_item_ids: list[int],
        billing_address: str,
        shipping_address: str,
    ) -> CheckoutOut:
        requested = list(dict.fromkeys(cart_item_ids))
        items = self.carts.get_items_by_ids(user_id, requested)

        if not items:
            logger.info(f"Checkout for user {user_id}: no valid cart items in {requested}")
            raise NoValidItems()

        total = cart_total(items)

        order = OrderModel(
            user_id=user_id,
            status=OrderStatus.PENDING,
            total_amount=total,
            billing_address=billing_address,
            shipping_address=shipping_address,
        )
        order_items = [
            OrderItemModel(
                product_id=i.product_id,
                quantity=i.quantity,
                price=i.product.price,
            )
            for i in items
        ]

        try:
            self.orders.add_order(order, order_items)
            # id z flusha moze wrocic po rollbacku, klucz musi byc unikalny per proba
            intent = self.payment_gateway.create_payment_intent(
                amount_minor_units=to_minor_units(total),
                currency=self.currency,
                metadata={"orderId": order.id, "userId": user_id},
                idempotency_key=f"order_{order.id}_{uuid.uuid4().hex}",
            )
        except Exception:
            logger.exception(f"Checkout for user {user_id} failed before payment was recorded")
            self.orders.rollback()
            raise

        order.payment_intent_id = intent["id"]
        self.orders.add_payment(
            PaymentModel(
                order_id=order.id,
                payment_intent_id=intent["id"],
                amount=total,
                status=PaymentStatus.PENDING,
            )
        )

        try:
            self.orders.commit()
        except Exception:
            logger.exception(f"Failed to commit order {order.id}, cancelling payment intent {intent['id']}")
            self.orders.rollback()
            self._cancel_intent(intent["id"])
            raise

        logger.info(
            f"Order {order.id} created for user {user_id}: total={total}, "
            f"payment intent {intent['id']}, {len(order_items)} items"
        )

        consumed = [i.id for i in items]
        try:
            removed = self.carts.delete_items(user_id, consumed)
            self.carts.commit()
            logger.info(f"Removed {removed} cart items consumed by order {order.id}")
        except SQLAlchemyError as e:
            self.carts.rollback()
            logger.error(f"Order {order.id} created but cart items {consumed} were not removed: {e}")

        return CheckoutOut(
            order_id=order.id,
            payment_intent_id=intent["id"],
            client_secret=intent["client_secret"],
            total_amount=total,
        )

    def _cancel_intent(self, intent_id: str) -> None:
        try:
            self.payment_gateway.cancel_payment_intent(intent_id)
        except Exception as e:
            logger.error(f"Compensation failed, payment intent {intent_id} left open: {e}")
