"""
Ticket inventory and sales-cutoff checks, applied when a checkout starts.

Only PAID bookings hold inventory. A PENDING booking reserves nothing until
its checkout completes, so two guests can both reach checkout for the last
spot; the event row lock in reserve_booking serializes the count-then-create
step per event so the guard itself never sees a stale count.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from sipdepot.core.exceptions import (
    EventNotFound,
    EventNotPublished,
    InsufficientInventory,
    SalesCutoffPassed,
)
from sipdepot.models.booking import Booking, BookingStatus
from sipdepot.models.event import Event, EventStatus

logger = logging.getLogger(__name__)


def sales_cutoff_at(event: Event) -> datetime:
    return event.start_date_time - timedelta(hours=event.sales_cutoff_hours or 0)


def is_sales_cutoff_passed(event: Event, now: Optional[datetime] = None) -> bool:
    """The cutoff instant itself counts as passed."""
    now = now or datetime.utcnow()
    return now >= sales_cutoff_at(event)


def tickets_sold(db: Session, event_id: uuid.UUID) -> int:
    sold = db.query(func.coalesce(func.sum(Booking.quantity), 0)).filter(
        Booking.event_id == event_id,
        Booking.status == BookingStatus.PAID,
    ).scalar()
    return int(sold or 0)


def tickets_remaining(db: Session, event: Event) -> int:
    return max(event.capacity - tickets_sold(db, event.id), 0)


def check_availability(db: Session, event: Event, quantity: int, now: Optional[datetime] = None) -> int:
    """
    Raise a BookingRejected subclass if `quantity` tickets cannot be sold now.

    Returns the number of tickets remaining before this purchase.
    """
    if event.status != EventStatus.PUBLISHED:
        raise EventNotPublished()

    if is_sales_cutoff_passed(event, now):
        raise SalesCutoffPassed()

    remaining = tickets_remaining(db, event)
    if quantity > remaining:
        raise InsufficientInventory(remaining)
    return remaining


def reserve_booking(
    db: Session,
    event_id: uuid.UUID,
    quantity: int,
    purchaser_name: str,
    purchaser_email: str,
    now: Optional[datetime] = None,
) -> Booking:
    """
    Create a PENDING booking for the full quantity or raise.

    The booking is flushed but not committed; the caller commits once the
    checkout session exists, or rolls back if it could not be created.
    """
    event = db.query(Event).filter(Event.id == event_id).with_for_update().first()
    if event is None:
        raise EventNotFound()

    remaining = check_availability(db, event, quantity, now)

    booking = Booking(
        event_id=event.id,
        purchaser_name=purchaser_name,
        purchaser_email=purchaser_email,
        quantity=quantity,
        amount_paid_cents=event.ticket_price_cents * quantity,
        status=BookingStatus.PENDING,
    )
    db.add(booking)
    db.flush()

    logger.info(
        f"[CHECKOUT] Reserved booking {booking.id} for event {event.id}: "
        f"{quantity} of {remaining} remaining"
    )
    return booking
