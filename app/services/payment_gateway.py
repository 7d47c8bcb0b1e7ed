# app/services/payment_gateway.py
import stripe

from app.domain.errors import InvalidSignature
from app.utils.settings import (
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    STRIPE_TIMEOUT_SECONDS,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGateway:
    """
    Cienka warstwa nad Stripe:
    -tworzenie / anulowanie payment intentow
    -weryfikacja podpisu webhooka

    Klient stripe jest wstrzykiwany, w testach podmieniany na fake.
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        stripe_client=stripe,
        tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
    ):
        self._stripe = stripe_client
        self.api_key = api_key if api_key is not None else STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret if webhook_secret is not None else STRIPE_WEBHOOK_SECRET
        self.tolerance = tolerance

        if stripe_client is stripe:
            stripe.max_network_retries = 0
            stripe.default_http_client = stripe.RequestsClient(timeout=STRIPE_TIMEOUT_SECONDS)

    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        metadata: dict,
        idempotency_key: str | None = None,
    ) -> dict:
        logger.info(f"Creating payment intent amount={amount_minor_units} {currency} metadata={metadata}")
        intent = self._stripe.PaymentIntent.create(
            api_key=self.api_key,
            amount=amount_minor_units,
            currency=currency,
            metadata={k: str(v) for k, v in metadata.items()},
            idempotency_key=idempotency_key,
        )
        return {"id": intent["id"], "client_secret": intent["client_secret"]}

    def cancel_payment_intent(self, intent_id: str) -> None:
        logger.info(f"Cancelling payment intent {intent_id}")
        self._stripe.PaymentIntent.cancel(intent_id, api_key=self.api_key)

    def verify_webhook(self, payload: bytes, signature: str | None) -> dict:
        """
        Weryfikuje podpis PRZED parsowaniem, zwraca event jako dict.
        Kazdy problem z podpisem albo payloadem -> InvalidSignature.
        """
        if not signature:
            logger.warning("Webhook without stripe-signature header")
            raise InvalidSignature("Missing stripe signature")

        if not self.webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured")
            raise InvalidSignature()

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret, self.tolerance)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise InvalidSignature()
        except ValueError as e:
            # UnicodeDecodeError i JSONDecodeError to tez ValueError
            logger.warning(f"Webhook payload is not valid JSON: {e}")
            raise InvalidSignature()

        return event.to_dict()
