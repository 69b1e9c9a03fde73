import uuid
from datetime import datetime, timedelta

from sipdepot.models import Booking, BookingStatus, EventStatus


def checkout_body(event, **overrides):
    body = {
        "event_id": str(event.id),
        "quantity": 2,
        "purchaser_name": "Gina Guest",
        "purchaser_email": "gina@example.com",
    }
    body.update(overrides)
    return body


def test_checkout_returns_hosted_url(client, db, gateway, make_event):
    event = make_event(ticket_price_cents=3500, canvas_image_url="https://img.example.com/starry.png")

    response = client.post("/checkout", json=checkout_body(event))
    assert response.status_code == 200
    assert response.json() == {"url": "https://checkout.stripe.test/pay/cs_test_1"}

    booking = db.query(Booking).one()
    assert booking.status == BookingStatus.PENDING
    assert booking.quantity == 2
    assert booking.amount_paid_cents == 7000
    assert booking.stripe_checkout_session_id == "cs_test_1"
    assert booking.purchaser_email == "gina@example.com"

    params = gateway.checkout_sessions[0]
    line_item = params["line_items"][0]
    assert line_item["quantity"] == 2
    assert line_item["price_data"]["unit_amount"] == 3500
    assert line_item["price_data"]["currency"] == "usd"
    assert line_item["price_data"]["product_data"]["name"] == event.title
    assert line_item["price_data"]["product_data"]["description"] == f"2 tickets for {event.title}"
    assert line_item["price_data"]["product_data"]["images"] == ["https://img.example.com/starry.png"]
    assert params["customer_email"] == "gina@example.com"
    assert params["metadata"] == {
        "booking_id": str(booking.id),
        "event_id": str(event.id),
        "purchaser_name": "Gina Guest",
    }
    assert params["success_url"] == "http://testserver.local/booking/success?session_id={CHECKOUT_SESSION_ID}"
    assert params["cancel_url"] == f"http://testserver.local/e/{event.slug}?canceled=true"


def test_price_is_snapshotted_at_checkout(client, db, make_event):
    event = make_event(ticket_price_cents=2000)

    client.post("/checkout", json=checkout_body(event, quantity=1))
    event.ticket_price_cents = 9999
    db.commit()

    booking = db.query(Booking).one()
    assert booking.amount_paid_cents == 2000


def test_unknown_event_is_404(client, db, gateway):
    response = client.post("/checkout", json={
        "event_id": str(uuid.uuid4()),
        "quantity": 1,
        "purchaser_name": "Gina Guest",
        "purchaser_email": "gina@example.com",
    })
    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"
    assert gateway.checkout_sessions == []


def test_draft_event_rejected(client, db, gateway, make_event):
    event = make_event(status=EventStatus.DRAFT)
    response = client.post("/checkout", json=checkout_body(event))
    assert response.status_code == 400
    assert response.json()["detail"] == "This event is not available for booking"
    assert db.query(Booking).count() == 0
    assert gateway.checkout_sessions == []


def test_sales_cutoff_rejected(client, db, make_event):
    event = make_event(start_date_time=datetime.utcnow() + timedelta(hours=10), sales_cutoff_hours=12)
    response = client.post("/checkout", json=checkout_body(event))
    assert response.status_code == 400
    assert response.json()["detail"] == "Ticket sales have ended for this event"
    assert db.query(Booking).count() == 0


def test_insufficient_inventory_rejected(client, db, make_event, make_booking):
    event = make_event(capacity=4)
    make_booking(event, BookingStatus.PAID, quantity=3)

    response = client.post("/checkout", json=checkout_body(event, quantity=2))
    assert response.status_code == 400
    assert response.json()["detail"] == "Only 1 ticket remaining"
    assert db.query(Booking).count() == 1


def test_pending_bookings_do_not_hold_inventory(client, db, make_event, make_booking):
    event = make_event(capacity=2)
    make_booking(event, BookingStatus.PENDING, quantity=2)

    response = client.post("/checkout", json=checkout_body(event, quantity=2))
    assert response.status_code == 200


def test_invalid_quantity_is_400(client, make_event):
    event = make_event()
    response = client.post("/checkout", json=checkout_body(event, quantity=0))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("quantity:")

    response = client.post("/checkout", json=checkout_body(event, quantity=11))
    assert response.status_code == 400


def test_invalid_email_is_400(client, make_event):
    event = make_event()
    response = client.post("/checkout", json=checkout_body(event, purchaser_email="not-an-email"))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("purchaser_email:")


def test_provider_failure_leaves_no_booking(client, db, gateway, make_event):
    event = make_event()
    gateway.fail = True

    response = client.post("/checkout", json=checkout_body(event))
    assert response.status_code == 500
    assert response.json()["detail"] == "Stripe is unavailable"
    assert "timed out" not in response.text
    assert db.query(Booking).count() == 0
