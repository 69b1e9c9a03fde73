from sipdepot.schemas.user import User, UserSignup, UserLogin, Token
from sipdepot.schemas.booking import Booking, CheckoutRequest, CheckoutResponse
from sipdepot.schemas.event import Event, EventCreate, EventUpdate, EventWithSales, EventDetail, CalendarEvent, PublicEvent
from sipdepot.schemas.stripe import AccountStatusResponse, AccountSessionRequest, AccountSessionResponse, WebhookAck
from sipdepot.schemas.canvas import Canvas, CanvasCreate, CanvasImportRequest, CanvasImportResponse
from sipdepot.schemas.dashboard import DashboardSummary

__all__ = [
    "User", "UserSignup", "UserLogin", "Token",
    "Booking", "CheckoutRequest", "CheckoutResponse",
    "Event", "EventCreate", "EventUpdate", "EventWithSales", "EventDetail", "CalendarEvent", "PublicEvent",
    "AccountStatusResponse", "AccountSessionRequest", "AccountSessionResponse", "WebhookAck",
    "Canvas", "CanvasCreate", "CanvasImportRequest", "CanvasImportResponse",
    "DashboardSummary",
]
