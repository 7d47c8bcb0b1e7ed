# app/api/routers/webhooks.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_payment_gateway
from app.data.database import get_db
from app.domain.schemas import WebhookAck
from app.services.webhook_service import WebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    payment_gateway=Depends(get_payment_gateway),
):
    """
    Surowe body + naglowek stripe-signature.
    Zly podpis -> 400 bez zmian w bazie, reszta zawsze potwierdzana.
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    svc = WebhookService(db, payment_gateway)
    await run_in_threadpool(svc.handle, payload, signature)
    return WebhookAck(received=True)
