from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import uuid

from sipdepot.api.deps import get_current_user
from sipdepot.core.exceptions import DomainError
from sipdepot.db.session import get_db
from sipdepot.models.user import User
from sipdepot.schemas.booking import Booking as BookingSchema
from sipdepot.schemas.event import (
    CalendarEvent,
    Event as EventSchema,
    EventCreate,
    EventDetail,
    EventUpdate,
    EventWithSales,
    PublicEvent,
)
from sipdepot.services import events as event_service
from sipdepot.services.inventory import is_sales_cutoff_passed

router = APIRouter()


def _public(event, remaining: int) -> PublicEvent:
    return PublicEvent.model_validate(event).model_copy(update={
        "tickets_remaining": remaining,
        "sales_open": not is_sales_cutoff_passed(event) and remaining > 0,
    })


# Public routes are declared before /{event_id} so they are matched first.

@router.get("/public", response_model=List[PublicEvent])
def list_public_events(db: Session = Depends(get_db)):
    return [_public(e, remaining) for e, remaining in event_service.list_public_events(db)]


@router.get("/public/{slug}", response_model=PublicEvent)
def get_public_event(slug: str, db: Session = Depends(get_db)):
    try:
        event, remaining = event_service.get_public_event(db, slug)
    except DomainError as e:
        raise e.to_http_exception()
    return _public(event, remaining)


@router.get("/calendar", response_model=List[CalendarEvent])
def calendar(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.calendar_events(db, current_user.id)


@router.get("", response_model=List[EventWithSales])
def list_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [
        EventWithSales.model_validate(e).model_copy(update={"tickets_sold": sold})
        for e, sold in event_service.list_host_events(db, current_user.id)
    ]


@router.post("", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return event_service.create_event(db, current_user.id, event_data.model_dump())
    except DomainError as e:
        raise e.to_http_exception()


@router.get("/{event_id}", response_model=EventDetail)
def get_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        event = event_service.get_host_event(db, current_user.id, event_id)
    except DomainError as e:
        raise e.to_http_exception()
    bookings = event_service.paid_bookings(db, event.id)
    return EventDetail.model_validate(event).model_copy(update={
        "tickets_sold": sum(b.quantity for b in bookings),
        "bookings": [BookingSchema.model_validate(b) for b in bookings],
    })


@router.patch("/{event_id}", response_model=EventSchema)
def update_event(
    event_id: uuid.UUID,
    changes: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return event_service.update_event(db, current_user.id, event_id, changes.model_dump(exclude_unset=True))
    except DomainError as e:
        raise e.to_http_exception()


@router.delete("/{event_id}")
def delete_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        event_service.delete_event(db, current_user.id, event_id)
    except DomainError as e:
        raise e.to_http_exception()
    return {"success": True}
