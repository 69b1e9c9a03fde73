from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from uuid import UUID

from sipdepot.models.booking import BookingStatus


class CheckoutRequest(BaseModel):
    event_id: UUID
    quantity: int = Field(ge=1, le=10)
    purchaser_name: str = Field(min_length=2)
    purchaser_email: EmailStr


class CheckoutResponse(BaseModel):
    url: str


class Booking(BaseModel):
    id: UUID
    event_id: UUID
    purchaser_name: str
    purchaser_email: str
    quantity: int
    amount_paid_cents: int
    status: BookingStatus
    created_at: datetime

    class Config:
        from_attributes = True
