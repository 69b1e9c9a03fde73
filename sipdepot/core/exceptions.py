"""
Domain exceptions raised by the service layer.

Routes catch DomainError and convert it with to_http_exception(); the
message is always safe to show to the caller.
"""
from typing import Optional

from fastapi import HTTPException, status


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.message)


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


# Checkout / inventory

class BookingRejected(DomainError):
    """Checkout refused before any booking row is written."""


class EventNotFound(NotFoundError, BookingRejected):
    def __init__(self, message: str = "Event not found"):
        super().__init__(message)


class EventNotPublished(BookingRejected):
    def __init__(self, message: str = "This event is not available for booking"):
        super().__init__(message)


class SalesCutoffPassed(BookingRejected):
    def __init__(self, message: str = "Ticket sales have ended for this event"):
        super().__init__(message)


class InsufficientInventory(BookingRejected):
    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"Only {remaining} ticket{'' if remaining == 1 else 's'} remaining")


# Event management

class EventUpdateRejected(DomainError):
    pass


# Payment provider

class PaymentProviderError(DomainError):
    """Stripe call failed or Stripe is not configured. The raw error is logged, never returned."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class WebhookVerificationError(DomainError):
    """Missing or invalid Stripe-Signature, or a body that is not a Stripe event."""
