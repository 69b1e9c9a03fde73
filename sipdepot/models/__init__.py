from sipdepot.models.user import User, OnboardingStatus
from sipdepot.models.canvas import Canvas
from sipdepot.models.event import Event, EventStatus
from sipdepot.models.booking import Booking, BookingStatus
from sipdepot.models.stripe_event import StripeEvent

__all__ = [
    "User", "OnboardingStatus", "Canvas", "Event", "EventStatus",
    "Booking", "BookingStatus", "StripeEvent",
]
