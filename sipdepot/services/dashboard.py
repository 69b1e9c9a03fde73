import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from sipdepot.models.booking import Booking, BookingStatus
from sipdepot.models.event import Event, EventStatus


def host_summary(db: Session, host_id: uuid.UUID, now: Optional[datetime] = None, upcoming_limit: int = 5) -> Dict[str, Any]:
    """Headline numbers for the host dashboard. Only PAID bookings count as sales."""
    now = now or datetime.utcnow()

    total_events = db.query(func.count(Event.id)).filter(Event.host_id == host_id).scalar() or 0
    published_events = db.query(func.count(Event.id)).filter(
        Event.host_id == host_id,
        Event.status == EventStatus.PUBLISHED,
    ).scalar() or 0

    tickets, revenue = db.query(
        func.coalesce(func.sum(Booking.quantity), 0),
        func.coalesce(func.sum(Booking.amount_paid_cents), 0),
    ).join(Event, Booking.event_id == Event.id).filter(
        Event.host_id == host_id,
        Booking.status == BookingStatus.PAID,
    ).one()

    upcoming = db.query(Event).filter(
        Event.host_id == host_id,
        Event.start_date_time > now,
        Event.status.in_([EventStatus.PUBLISHED, EventStatus.DRAFT]),
    ).order_by(Event.start_date_time.asc()).limit(upcoming_limit).all()

    return {
        "total_events": int(total_events),
        "published_events": int(published_events),
        "tickets_sold": int(tickets or 0),
        "revenue_cents": int(revenue or 0),
        "upcoming_events": upcoming,
    }


def host_bookings(db: Session, host_id: uuid.UUID, status: Optional[BookingStatus] = None) -> List[Booking]:
    query = db.query(Booking).join(Event, Booking.event_id == Event.id).filter(Event.host_id == host_id)
    if status is not None:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.created_at.desc()).all()
