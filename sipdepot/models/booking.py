from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Uuid, Enum as SQLEnum, CheckConstraint
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from sipdepot.db.session import Base


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    CANCELED = "CANCELED"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id"), nullable=False, index=True)
    purchaser_name = Column(String, nullable=False)
    purchaser_email = Column(String, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    amount_paid_cents = Column(Integer, nullable=False)  # Price snapshot at checkout: ticket price * quantity
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.PENDING, nullable=False, index=True)
    stripe_checkout_session_id = Column(String, nullable=True, unique=True, index=True)
    stripe_payment_intent_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    event = relationship("Event", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_bookings_quantity_positive"),
    )
