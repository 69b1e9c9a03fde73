"""
Stripe webhook endpoints.

Both endpoints verify the Stripe-Signature header before anything is
applied. A bad or missing signature is a 400 and nothing is written. A
verified event is always acknowledged with 200, whether or not its type is
handled; a failure while applying it is a 500 so Stripe redelivers.
"""
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from sipdepot.core.config import settings
from sipdepot.core.exceptions import WebhookVerificationError
from sipdepot.db.session import get_db
from sipdepot.schemas.stripe import WebhookAck
from sipdepot.services.booking_lifecycle import record_and_process
from sipdepot.services.stripe_gateway import StripeGateway

router = APIRouter()
logger = logging.getLogger(__name__)


async def _handle(request: Request, db: Session, signature: Optional[str], secret: Optional[str], source: str):
    if not signature:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing stripe-signature header")

    if not secret:
        logger.error(f"[WEBHOOK] Signing secret for {source} events is not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook secret not configured")

    body = await request.body()
    try:
        event = StripeGateway.verify_webhook(body, signature, secret, settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS)
    except WebhookVerificationError as e:
        raise e.to_http_exception()

    logger.info(f"[WEBHOOK] Received {event.get('type')} ({event.get('id')}) on {source} endpoint")
    try:
        record_and_process(db, event, source)
    except Exception:
        # Already logged with traceback by record_and_process
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook handler failed")

    return WebhookAck()


@router.post("/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
):
    """Checkout and charge events that drive booking status."""
    return await _handle(request, db, stripe_signature, settings.STRIPE_WEBHOOK_SECRET, "checkout")


@router.post("/stripe-connect", response_model=WebhookAck)
async def stripe_connect_webhook(
    request: Request,
    db: Session = Depends(get_db),
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
):
    """Connected-account events (account.updated, deauthorization)."""
    return await _handle(request, db, stripe_signature, settings.STRIPE_CONNECT_WEBHOOK_SECRET, "connect")
