from sipdepot.core.config import settings
from sipdepot.models import Booking, BookingStatus, OnboardingStatus, StripeEvent
from sipdepot.services import booking_lifecycle


def completed_event(session_id, event_id="evt_completed_1", payment_status="paid", payment_intent="pi_123"):
    return {
        "id": event_id,
        "type": "checkout.session.completed",
        "data": {"object": {
            "id": session_id,
            "object": "checkout.session",
            "payment_status": payment_status,
            "payment_intent": payment_intent,
        }},
    }


def expired_event(session_id, event_id="evt_expired_1"):
    return {
        "id": event_id,
        "type": "checkout.session.expired",
        "data": {"object": {"id": session_id, "object": "checkout.session"}},
    }


def refund_event(payment_intent, event_id="evt_refund_1"):
    return {
        "id": event_id,
        "type": "charge.refunded",
        "data": {"object": {"id": "ch_1", "object": "charge", "payment_intent": payment_intent}},
    }


def test_completed_marks_booking_paid(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING, quantity=2)

    response = post_webhook(completed_event(booking.stripe_checkout_session_id))
    assert response.status_code == 200
    assert response.json() == {"received": True}

    db.refresh(booking)
    assert booking.status == BookingStatus.PAID
    assert booking.stripe_payment_intent_id == "pi_123"

    logged = db.query(StripeEvent).one()
    assert logged.stripe_event_id == "evt_completed_1"
    assert logged.source == "checkout"
    assert logged.processed is True


def test_replayed_event_is_applied_once(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)
    payload = completed_event(booking.stripe_checkout_session_id)

    assert post_webhook(payload).status_code == 200
    assert post_webhook(payload).status_code == 200

    db.refresh(booking)
    assert booking.status == BookingStatus.PAID
    assert db.query(StripeEvent).count() == 1


def test_redelivery_with_new_id_does_not_change_paid_booking(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)
    session_id = booking.stripe_checkout_session_id

    post_webhook(completed_event(session_id, event_id="evt_a", payment_intent="pi_first"))
    post_webhook(completed_event(session_id, event_id="evt_b", payment_intent="pi_second"))

    db.refresh(booking)
    assert booking.status == BookingStatus.PAID
    assert booking.stripe_payment_intent_id == "pi_first"


def test_unpaid_completion_leaves_booking_pending(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)

    response = post_webhook(completed_event(booking.stripe_checkout_session_id, payment_status="unpaid"))
    assert response.status_code == 200

    db.refresh(booking)
    assert booking.status == BookingStatus.PENDING


def test_completion_for_unknown_session_is_acknowledged(post_webhook, db):
    response = post_webhook(completed_event("cs_unknown"))
    assert response.status_code == 200
    assert db.query(Booking).count() == 0


def test_invalid_signature_rejected(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)

    response = post_webhook(
        completed_event(booking.stripe_checkout_session_id),
        signature="t=1700000000,v1=deadbeef",
    )
    assert response.status_code == 400

    db.refresh(booking)
    assert booking.status == BookingStatus.PENDING
    assert db.query(StripeEvent).count() == 0


def test_wrong_secret_rejected(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)

    response = post_webhook(completed_event(booking.stripe_checkout_session_id), secret="whsec_someone_else")
    assert response.status_code == 400

    db.refresh(booking)
    assert booking.status == BookingStatus.PENDING


def test_missing_signature_header_rejected(client):
    response = client.post("/webhooks/stripe", content='{"id": "evt_1", "type": "ping"}')
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing stripe-signature header"


def test_missing_secret_is_server_error(post_webhook, monkeypatch):
    monkeypatch.setattr(settings, "STRIPE_WEBHOOK_SECRET", None)
    response = post_webhook(completed_event("cs_1"), secret="whsec_test_checkout")
    assert response.status_code == 500


def test_expired_cancels_pending_booking(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)

    post_webhook(expired_event(booking.stripe_checkout_session_id))

    db.refresh(booking)
    assert booking.status == BookingStatus.CANCELED


def test_expired_does_not_touch_paid_booking(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PAID)

    post_webhook(expired_event(booking.stripe_checkout_session_id))

    db.refresh(booking)
    assert booking.status == BookingStatus.PAID


def test_refund_marks_paid_booking_refunded(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PAID, stripe_payment_intent_id="pi_refund_me")

    post_webhook(refund_event("pi_refund_me"))

    db.refresh(booking)
    assert booking.status == BookingStatus.REFUNDED


def test_refund_ignores_pending_booking(post_webhook, db, make_event, make_booking):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING, stripe_payment_intent_id="pi_pending")

    post_webhook(refund_event("pi_pending"))

    db.refresh(booking)
    assert booking.status == BookingStatus.PENDING


def test_unhandled_event_type_acknowledged(post_webhook, db):
    response = post_webhook({"id": "evt_other", "type": "customer.created", "data": {"object": {"id": "cus_1"}}})
    assert response.status_code == 200
    assert response.json() == {"received": True}


def test_connect_account_updated_refreshes_host(post_webhook, db, host):
    host.stripe_account_id = "acct_host"
    db.commit()

    response = post_webhook(
        {
            "id": "evt_acct_1",
            "type": "account.updated",
            "account": "acct_host",
            "data": {"object": {
                "id": "acct_host",
                "object": "account",
                "details_submitted": True,
                "charges_enabled": True,
                "payouts_enabled": True,
                "requirements": {"currently_due": [], "eventually_due": [], "past_due": []},
            }},
        },
        path="/webhooks/stripe-connect",
        secret=settings.STRIPE_CONNECT_WEBHOOK_SECRET,
    )
    assert response.status_code == 200

    db.refresh(host)
    assert host.stripe_onboarding_status == OnboardingStatus.COMPLETE
    assert host.stripe_charges_enabled is True
    assert host.stripe_last_synced_at is not None
    assert db.query(StripeEvent).one().source == "connect"


def test_connect_deauthorization_unlinks_host(post_webhook, db, host):
    host.stripe_account_id = "acct_gone"
    host.stripe_onboarding_status = OnboardingStatus.COMPLETE
    host.stripe_charges_enabled = True
    db.commit()

    response = post_webhook(
        {
            "id": "evt_deauth_1",
            "type": "account.application.deauthorized",
            "account": "acct_gone",
            "data": {"object": {"id": "ca_platform", "object": "application"}},
        },
        path="/webhooks/stripe-connect",
        secret=settings.STRIPE_CONNECT_WEBHOOK_SECRET,
    )
    assert response.status_code == 200

    db.refresh(host)
    assert host.stripe_account_id is None
    assert host.stripe_onboarding_status == OnboardingStatus.NOT_STARTED
    assert host.stripe_charges_enabled is False


def test_connect_endpoint_rejects_checkout_secret(post_webhook, db, host):
    response = post_webhook(
        {"id": "evt_x", "type": "account.updated", "data": {"object": {"id": "acct_x"}}},
        path="/webhooks/stripe-connect",
        secret=settings.STRIPE_WEBHOOK_SECRET,
    )
    assert response.status_code == 400


def test_processing_failure_rolls_back_for_redelivery(post_webhook, db, make_event, make_booking, monkeypatch):
    event = make_event()
    booking = make_booking(event, BookingStatus.PENDING)
    payload = completed_event(booking.stripe_checkout_session_id)

    def fail(db, event):
        raise RuntimeError("database went away")

    monkeypatch.setattr(booking_lifecycle, "process_stripe_event", fail)
    response = post_webhook(payload)
    assert response.status_code == 500
    assert response.json()["detail"] == "Webhook handler failed"
    assert "database went away" not in response.text

    db.refresh(booking)
    assert booking.status == BookingStatus.PENDING
    assert db.query(StripeEvent).filter(StripeEvent.processed.is_(True)).count() == 0

    # Stripe redelivers the same event once the handler recovers
    monkeypatch.undo()
    assert post_webhook(payload).status_code == 200
    db.refresh(booking)
    assert booking.status == BookingStatus.PAID


def test_event_without_id_rejected(post_webhook, db):
    response = post_webhook({"type": "checkout.session.completed", "data": {"object": {"id": "cs_1"}}})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid payload"
    assert db.query(StripeEvent).count() == 0
