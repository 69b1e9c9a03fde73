from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime, timezone
from uuid import UUID

from sipdepot.core.config import settings
from sipdepot.models.event import EventStatus
from sipdepot.schemas.booking import Booking

ZIP_PATTERN = r"^\d{5}(-\d{4})?$"

# Columns an update may clear; every other field is NOT NULL in the database
NULLABLE_FIELDS = {"description", "end_date_time", "refund_policy_text", "canvas_image_url"}


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _blank_url_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("Invalid URL")
    return value


class EventCreate(BaseModel):
    title: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    start_date_time: datetime
    end_date_time: Optional[datetime] = None
    location_name: str = Field(min_length=2)
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2, max_length=2)
    zip: str = Field(pattern=ZIP_PATTERN)
    ticket_price_cents: int = Field(ge=0, le=100000)
    capacity: int = Field(ge=1, le=1000)
    sales_cutoff_hours: int = Field(settings.DEFAULT_SALES_CUTOFF_HOURS, ge=0, le=168)
    refund_policy_text: Optional[str] = Field(None, max_length=1000)
    canvas_image_url: Optional[str] = None
    canvas_id: Optional[str] = None
    status: EventStatus = EventStatus.DRAFT

    @field_validator("start_date_time", "end_date_time")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)

    @field_validator("start_date_time")
    @classmethod
    def start_in_future(cls, v: datetime) -> datetime:
        if v <= datetime.utcnow():
            raise ValueError("Event must be in the future")
        return v

    @field_validator("canvas_image_url")
    @classmethod
    def check_canvas_image_url(cls, v):
        return _blank_url_to_none(v)


class EventUpdate(BaseModel):
    status: Optional[EventStatus] = None
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    location_name: Optional[str] = Field(None, min_length=2)
    address: Optional[str] = Field(None, min_length=5)
    city: Optional[str] = Field(None, min_length=2)
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    zip: Optional[str] = Field(None, pattern=ZIP_PATTERN)
    ticket_price_cents: Optional[int] = Field(None, ge=0, le=100000)
    capacity: Optional[int] = Field(None, ge=1, le=1000)
    sales_cutoff_hours: Optional[int] = Field(None, ge=0, le=168)
    refund_policy_text: Optional[str] = Field(None, max_length=1000)
    canvas_image_url: Optional[str] = None

    @field_validator("start_date_time", "end_date_time")
    @classmethod
    def normalize_datetime(cls, v):
        return to_naive_utc(v)

    @field_validator("canvas_image_url")
    @classmethod
    def check_canvas_image_url(cls, v):
        return _blank_url_to_none(v)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in sorted(self.model_fields_set - NULLABLE_FIELDS):
            if getattr(self, name) is None:
                raise ValueError(f"{name}: may not be null")
        return self


class Event(BaseModel):
    id: UUID
    host_id: UUID
    title: str
    slug: str
    description: Optional[str] = None
    start_date_time: datetime
    end_date_time: Optional[datetime] = None
    location_name: str
    address: str
    city: str
    state: str
    zip: str
    ticket_price_cents: int
    capacity: int
    sales_cutoff_hours: int
    refund_policy_text: Optional[str] = None
    canvas_image_url: Optional[str] = None
    canvas_id: Optional[str] = None
    status: EventStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventWithSales(Event):
    tickets_sold: int = 0


class EventDetail(EventWithSales):
    bookings: List[Booking] = []  # PAID bookings only


class CalendarEvent(BaseModel):
    id: UUID
    title: str
    start_date_time: datetime
    status: EventStatus
    city: str
    tickets_sold: int
    capacity: int


class PublicEvent(BaseModel):
    id: UUID
    title: str
    slug: str
    description: Optional[str] = None
    start_date_time: datetime
    end_date_time: Optional[datetime] = None
    location_name: str
    address: str
    city: str
    state: str
    zip: str
    ticket_price_cents: int
    capacity: int
    sales_cutoff_hours: int
    refund_policy_text: Optional[str] = None
    canvas_image_url: Optional[str] = None
    status: EventStatus
    tickets_remaining: int = 0
    sales_open: bool = False

    class Config:
        from_attributes = True
