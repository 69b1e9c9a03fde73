"""
Processor for verified Stripe webhook events.

Every transition is a conditional update on the booking's current status, so
redelivered or out-of-order notifications are harmless:

    PENDING --checkout.session.completed (paid)--> PAID
    PENDING --checkout.session.expired-----------> CANCELED
    PAID    --charge.refunded--------------------> REFUNDED

Connected-account events refresh the host's cached onboarding status.
"""
import logging
from datetime import datetime
from typing import Any, Dict

from sqlalchemy.orm import Session

from sipdepot.models.booking import Booking, BookingStatus
from sipdepot.models.stripe_event import StripeEvent
from sipdepot.models.user import OnboardingStatus, User
from sipdepot.services.account_status import (
    apply_status_to_user,
    snapshot_from_account,
    status_from_snapshot,
)

logger = logging.getLogger(__name__)

# Outcomes returned by process_stripe_event
PAID = "paid"
CANCELED = "canceled"
REFUNDED = "refunded"
ACCOUNT_SYNCED = "account_synced"
ACCOUNT_DISCONNECTED = "account_disconnected"
NOOP = "noop"
IGNORED = "ignored"


def process_stripe_event(db: Session, event: Dict[str, Any]) -> str:
    """
    Apply a verified Stripe event. Does not commit.

    Handles:
    - checkout.session.completed -> mark booking paid, record payment intent
    - checkout.session.expired -> cancel booking still pending
    - charge.refunded -> mark paid booking refunded
    - account.updated -> recompute host onboarding status
    - account.application.deauthorized -> unlink host account
    """
    event_type = event.get("type")
    data = (event.get("data") or {}).get("object") or {}

    if event_type == "checkout.session.completed":
        return _process_checkout_completed(db, data)
    elif event_type == "checkout.session.expired":
        return _process_checkout_expired(db, data)
    elif event_type == "charge.refunded":
        return _process_refund(db, data)
    elif event_type == "account.updated":
        return _process_account_updated(db, data)
    elif event_type == "account.application.deauthorized":
        return _process_account_deauthorized(db, event)

    logger.info(f"[WEBHOOK] Event type {event_type} not handled - skipping")
    return IGNORED


def _process_checkout_completed(db: Session, session: Dict[str, Any]) -> str:
    session_id = session.get("id")
    if session.get("payment_status") != "paid":
        logger.info(f"[WEBHOOK] Checkout session {session_id} completed but not paid - skipping")
        return NOOP

    payment_intent = session.get("payment_intent")
    if isinstance(payment_intent, dict):
        payment_intent = payment_intent.get("id")

    updated = db.query(Booking).filter(
        Booking.stripe_checkout_session_id == session_id,
        Booking.status == BookingStatus.PENDING,
    ).update(
        {
            Booking.status: BookingStatus.PAID,
            Booking.stripe_payment_intent_id: payment_intent,
            Booking.updated_at: datetime.utcnow(),
        },
        synchronize_session=False,
    )

    if updated:
        logger.info(f"[WEBHOOK] Booking confirmed for session: {session_id}")
        return PAID

    booking = db.query(Booking).filter(Booking.stripe_checkout_session_id == session_id).first()
    if booking is None:
        logger.warning(f"[WEBHOOK] No booking found for checkout session {session_id}")
    else:
        logger.info(f"[WEBHOOK] Booking {booking.id} already {booking.status.value} - no change")
    return NOOP


def _process_checkout_expired(db: Session, session: Dict[str, Any]) -> str:
    session_id = session.get("id")
    updated = db.query(Booking).filter(
        Booking.stripe_checkout_session_id == session_id,
        Booking.status == BookingStatus.PENDING,
    ).update(
        {Booking.status: BookingStatus.CANCELED, Booking.updated_at: datetime.utcnow()},
        synchronize_session=False,
    )
    if updated:
        logger.info(f"[WEBHOOK] Booking canceled (session expired): {session_id}")
        return CANCELED
    return NOOP


def _process_refund(db: Session, charge: Dict[str, Any]) -> str:
    payment_intent = charge.get("payment_intent")
    if isinstance(payment_intent, dict):
        payment_intent = payment_intent.get("id")
    if not payment_intent:
        logger.info(f"[WEBHOOK] Refunded charge {charge.get('id')} has no payment intent - skipping")
        return NOOP

    updated = db.query(Booking).filter(
        Booking.stripe_payment_intent_id == payment_intent,
        Booking.status == BookingStatus.PAID,
    ).update(
        {Booking.status: BookingStatus.REFUNDED, Booking.updated_at: datetime.utcnow()},
        synchronize_session=False,
    )
    if updated:
        logger.info(f"[WEBHOOK] Booking refunded for payment intent: {payment_intent}")
        return REFUNDED
    return NOOP


def _process_account_updated(db: Session, account: Dict[str, Any]) -> str:
    account_id = account.get("id")
    user = db.query(User).filter(User.stripe_account_id == account_id).first()
    if user is None:
        logger.warning(f"[WEBHOOK] account.updated for unknown account {account_id}")
        return NOOP

    status = status_from_snapshot(account_id, snapshot_from_account(account))
    apply_status_to_user(user, status, datetime.utcnow())
    logger.info(f"[WEBHOOK] Account {account_id} is now {status.onboarding_status.value}")
    return ACCOUNT_SYNCED


def _process_account_deauthorized(db: Session, event: Dict[str, Any]) -> str:
    account_id = event.get("account")
    user = db.query(User).filter(User.stripe_account_id == account_id).first() if account_id else None
    if user is None:
        logger.warning(f"[WEBHOOK] Deauthorization for unknown account {account_id}")
        return NOOP

    user.stripe_account_id = None
    user.stripe_details_submitted = False
    user.stripe_charges_enabled = False
    user.stripe_payouts_enabled = False
    user.stripe_requirements = None
    user.stripe_disabled_reason = None
    user.stripe_onboarding_status = OnboardingStatus.NOT_STARTED
    user.stripe_last_synced_at = datetime.utcnow()
    logger.info(f"[WEBHOOK] Account disconnected: {account_id} (user {user.id})")
    return ACCOUNT_DISCONNECTED


def record_and_process(db: Session, event: Dict[str, Any], source: str) -> str:
    """
    Log the event, process it once, and commit.

    An event id that was already processed is acknowledged without being
    applied again. If processing fails the transaction is rolled back and
    the error propagates so Stripe redelivers the event.
    """
    event_id = event.get("id")
    stripe_event = db.query(StripeEvent).filter(StripeEvent.stripe_event_id == event_id).first()
    if stripe_event is not None and stripe_event.processed:
        logger.info(f"[WEBHOOK] Event {event_id} already processed")
        return NOOP

    if stripe_event is None:
        stripe_event = StripeEvent(
            stripe_event_id=event_id,
            type=event.get("type"),
            source=source,
            payload=event,
            processed=False,
            received_at=datetime.utcnow(),
        )
        db.add(stripe_event)

    try:
        outcome = process_stripe_event(db, event)
        stripe_event.processed = True
        stripe_event.processed_at = datetime.utcnow()
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"[WEBHOOK] Error processing event {event_id} ({event.get('type')})")
        raise

    return outcome
