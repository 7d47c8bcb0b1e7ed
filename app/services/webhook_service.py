# app/services/webhook_service.py
from sqlalchemy.orm import Session

from app.data.models.order import OrderStatus, PaymentStatus
from app.repos.order_repo import OrderRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

# typ eventu -> (status zamowienia, status platnosci)
TRANSITIONS = {
    "payment_intent.succeeded": (OrderStatus.PAID, PaymentStatus.SUCCEEDED),
    "payment_intent.payment_failed": (OrderStatus.CANCELLED, PaymentStatus.FAILED),
}


class WebhookService:
    """
    Uzgadnianie statusu zamowienia z eventami Stripe.

    PENDING -> PAID | CANCELLED, statusy koncowe sie nie zmieniaja.
    Replay (to samo event id) i eventy starsze niz ostatnio zastosowany
    sa potwierdzane bez zmian w bazie.
    """

    def __init__(self, db: Session, payment_gateway):
        self.repo = OrderRepo(db)
        self.payment_gateway = payment_gateway

    def handle(self, payload: bytes, signature: str | None) -> None:
        # podpis przed czymkolwiek innym, InvalidSignature leci wyzej
        event = self.payment_gateway.verify_webhook(payload, signature)

        event_type = event.get("type")
        transition = TRANSITIONS.get(event_type)
        if not transition:
            logger.info(f"Unhandled event type: {event_type}")
            return

        intent = (event.get("data") or {}).get("object") or {}
        order_id = self._order_id(intent.get("metadata") or {})
        if order_id is None:
            logger.error(f"No valid orderId in payment intent metadata (event {event.get('id')})")
            return

        self.apply(
            order_id=order_id,
            event_id=event.get("id"),
            event_created=event.get("created"),
            payment_intent_id=intent.get("id"),
            order_status=transition[0],
            payment_status=transition[1],
        )

    @staticmethod
    def _order_id(metadata: dict) -> int | None:
        raw = metadata.get("orderId")
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    def apply(
        self,
        order_id: int,
        event_id: str | None,
        event_created: int | None,
        payment_intent_id: str | None,
        order_status: str,
        payment_status: str,
    ) -> bool:
        """Zwraca True jesli event zostal zastosowany."""
        order = self.repo.get_order_for_update(order_id)
        if not order:
            logger.warning(f"Webhook for unknown order {order_id}, ignoring")
            self.repo.rollback()
            return False

        if payment_intent_id and order.payment_intent_id and payment_intent_id != order.payment_intent_id:
            logger.warning(
                f"Payment intent {payment_intent_id} does not match order {order_id} "
                f"({order.payment_intent_id}), ignoring"
            )
            self.repo.rollback()
            return False

        if event_id and event_id == order.last_event_id:
            logger.info(f"Event {event_id} already applied to order {order_id}")
            self.repo.rollback()
            return False

        if (
            event_created is not None
            and order.last_event_created is not None
            and event_created < order.last_event_created
        ):
            logger.info(f"Stale event {event_id} for order {order_id}, ignoring")
            self.repo.rollback()
            return False

        if order.status != OrderStatus.PENDING and order.status != order_status:
            logger.warning(
                f"Order {order_id} is {order.status}, refusing transition to {order_status} (event {event_id})"
            )
            self.repo.rollback()
            return False

        order.status = order_status
        order.last_event_id = event_id
        if event_created is not None:
            order.last_event_created = event_created

        payment = self.repo.get_payment(order_id)
        if payment:
            payment.status = payment_status
        else:
            logger.warning(f"Order {order_id} has no payment record")

        self.repo.commit()
        logger.info(f"Order {order_id} -> {order_status}, payment -> {payment_status}")
        return True
