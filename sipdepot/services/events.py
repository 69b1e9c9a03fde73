"""Host event management and the public event catalogue."""
import logging
import re
import time
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from sipdepot.core.exceptions import EventUpdateRejected, NotFoundError
from sipdepot.models.booking import Booking, BookingStatus
from sipdepot.models.canvas import Canvas
from sipdepot.models.event import Event, EventStatus
from sipdepot.services.inventory import tickets_sold

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = [
    "status", "title", "description", "start_date_time", "end_date_time",
    "location_name", "address", "city", "state", "zip", "ticket_price_cents",
    "capacity", "sales_cutoff_hours", "refund_policy_text", "canvas_image_url",
]

# Fields a host may still change once an event reaches each status. Anything
# else in an update is dropped.
ALLOWED_UPDATES = {
    EventStatus.DRAFT: EDITABLE_FIELDS,
    EventStatus.PUBLISHED: ["status", "description", "refund_policy_text"],
    EventStatus.ENDED: [],
    EventStatus.CANCELED: [],
}

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_slug(value: str) -> str:
    slug = value.lower().strip()
    slug = re.sub(r"['’]", "", slug)
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _base36(n: int) -> str:
    out = ""
    while n:
        n, r = divmod(n, 36)
        out = _BASE36[r] + out
    return out or "0"


def _unique_slug(db: Session, title: str) -> str:
    slug = generate_slug(title) or "event"
    if db.query(Event.id).filter(Event.slug == slug).first():
        slug = f"{slug}-{_base36(int(time.time() * 1000))}"
    return slug


def _check_canvas(db: Session, canvas_id: Optional[str]) -> None:
    if canvas_id and db.get(Canvas, canvas_id) is None:
        raise EventUpdateRejected("Canvas not found")


def create_event(db: Session, host_id: uuid.UUID, data: Dict[str, Any]) -> Event:
    _check_canvas(db, data.get("canvas_id"))
    event = Event(
        host_id=host_id,
        slug=_unique_slug(db, data["title"]),
        **data,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(f"[EVENTS] Host {host_id} created event {event.id} ({event.slug})")
    return event


def get_host_event(db: Session, host_id: uuid.UUID, event_id: uuid.UUID) -> Event:
    event = db.query(Event).filter(Event.id == event_id, Event.host_id == host_id).first()
    if event is None:
        raise NotFoundError("Event not found")
    return event


def _sold_by_event(db: Session, event_ids: List[uuid.UUID]) -> Dict[uuid.UUID, int]:
    if not event_ids:
        return {}
    rows = db.query(Booking.event_id, func.sum(Booking.quantity)).filter(
        Booking.event_id.in_(event_ids),
        Booking.status == BookingStatus.PAID,
    ).group_by(Booking.event_id).all()
    return {event_id: int(total or 0) for event_id, total in rows}


def list_host_events(db: Session, host_id: uuid.UUID) -> List[Tuple[Event, int]]:
    """Host's events, newest start first, each with its tickets sold."""
    events = db.query(Event).filter(Event.host_id == host_id).order_by(Event.start_date_time.desc()).all()
    sold = _sold_by_event(db, [e.id for e in events])
    return [(e, sold.get(e.id, 0)) for e in events]


def calendar_events(db: Session, host_id: uuid.UUID) -> List[Dict[str, Any]]:
    events = db.query(Event).filter(Event.host_id == host_id).order_by(Event.start_date_time.asc()).all()
    sold = _sold_by_event(db, [e.id for e in events])
    return [
        {
            "id": e.id,
            "title": e.title,
            "start_date_time": e.start_date_time,
            "status": e.status,
            "city": e.city,
            "tickets_sold": sold.get(e.id, 0),
            "capacity": e.capacity,
        }
        for e in events
    ]


def paid_bookings(db: Session, event_id: uuid.UUID) -> List[Booking]:
    return db.query(Booking).filter(
        Booking.event_id == event_id,
        Booking.status == BookingStatus.PAID,
    ).order_by(Booking.created_at.desc()).all()


def update_event(db: Session, host_id: uuid.UUID, event_id: uuid.UUID, changes: Dict[str, Any]) -> Event:
    event = get_host_event(db, host_id, event_id)
    allowed = ALLOWED_UPDATES.get(event.status, [])
    update_data = {k: v for k, v in changes.items() if k in allowed}

    dropped = set(changes) - set(update_data)
    if dropped:
        logger.info(f"[EVENTS] Ignoring fields {sorted(dropped)} on {event.status.value} event {event.id}")

    if "capacity" in update_data:
        sold = tickets_sold(db, event.id)
        if update_data["capacity"] < sold:
            raise EventUpdateRejected(
                f"Capacity cannot be lower than the {sold} ticket{'' if sold == 1 else 's'} already sold"
            )

    for key, value in update_data.items():
        setattr(event, key, value)
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, host_id: uuid.UUID, event_id: uuid.UUID) -> None:
    event = get_host_event(db, host_id, event_id)
    if tickets_sold(db, event.id) > 0:
        raise EventUpdateRejected("Cannot delete event with paid bookings")
    db.delete(event)
    db.commit()
    logger.info(f"[EVENTS] Host {host_id} deleted event {event_id}")


def list_public_events(db: Session, now: Optional[datetime] = None) -> List[Tuple[Event, int]]:
    """Published events that have not started yet, soonest first, with tickets remaining."""
    now = now or datetime.utcnow()
    events = db.query(Event).filter(
        Event.status == EventStatus.PUBLISHED,
        Event.start_date_time > now,
    ).order_by(Event.start_date_time.asc()).all()
    sold = _sold_by_event(db, [e.id for e in events])
    return [(e, max(e.capacity - sold.get(e.id, 0), 0)) for e in events]


def get_public_event(db: Session, slug: str) -> Tuple[Event, int]:
    event = db.query(Event).filter(Event.slug == slug).first()
    if event is None or event.status == EventStatus.DRAFT:
        raise NotFoundError("Event not found")
    return event, max(event.capacity - tickets_sold(db, event.id), 0)
