from sqlalchemy import Column, String, DateTime, JSON, Boolean, Uuid
import uuid
from datetime import datetime
from sipdepot.db.session import Base


class StripeEvent(Base):
    __tablename__ = "stripe_events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    stripe_event_id = Column(String, nullable=False, unique=True, index=True)
    type = Column(String, nullable=False, index=True)  # checkout.session.completed, charge.refunded, etc.
    source = Column(String, nullable=False)  # "checkout" or "connect" - which endpoint received it
    payload = Column(JSON, nullable=False)  # Full verified event payload from Stripe
    processed = Column(Boolean, default=False, nullable=False, index=True)
    received_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    processed_at = Column(DateTime, nullable=True)
