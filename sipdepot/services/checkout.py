import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from sipdepot.core.config import settings
from sipdepot.core.exceptions import PaymentProviderError
from sipdepot.services.inventory import reserve_booking

logger = logging.getLogger(__name__)


def get_absolute_url(path: str) -> str:
    base = settings.APP_URL.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}{path}"


def _ticket_label(quantity: int) -> str:
    return f"{quantity} ticket{'s' if quantity > 1 else ''}"


def create_checkout(
    db: Session,
    gateway,
    event_id: uuid.UUID,
    quantity: int,
    purchaser_name: str,
    purchaser_email: str,
    now: Optional[datetime] = None,
) -> str:
    """
    Reserve a PENDING booking and open a hosted checkout session for it.

    Returns the checkout URL. Nothing is committed unless Stripe accepted the
    session, so a provider failure leaves no booking behind.
    """
    booking = reserve_booking(db, event_id, quantity, purchaser_name, purchaser_email, now)
    event = booking.event

    try:
        session = gateway.create_checkout_session(
            mode="payment",
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": gateway.currency,
                        "product_data": {
                            "name": event.title,
                            "description": f"{_ticket_label(quantity)} for {event.title}",
                            "images": [event.canvas_image_url] if event.canvas_image_url else [],
                        },
                        "unit_amount": event.ticket_price_cents,
                    },
                    "quantity": quantity,
                }
            ],
            customer_email=purchaser_email,
            metadata={
                "booking_id": str(booking.id),
                "event_id": str(event.id),
                "purchaser_name": purchaser_name,
            },
            success_url=get_absolute_url("/booking/success?session_id={CHECKOUT_SESSION_ID}"),
            cancel_url=get_absolute_url(f"/e/{event.slug}?canceled=true"),
        )
    except PaymentProviderError:
        db.rollback()
        raise

    booking.stripe_checkout_session_id = session.id
    db.commit()

    logger.info(f"[CHECKOUT] Booking {booking.id} -> checkout session {session.id}")
    return session.url
