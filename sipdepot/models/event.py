from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from sipdepot.db.session import Base


class EventStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ENDED = "ENDED"
    CANCELED = "CANCELED"


class Event(Base):
    __tablename__ = "events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    host_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    start_date_time = Column(DateTime, nullable=False, index=True)
    end_date_time = Column(DateTime, nullable=True)
    location_name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String(2), nullable=False)
    zip = Column(String(10), nullable=False)
    ticket_price_cents = Column(Integer, nullable=False)  # Store in cents to avoid floating point issues
    capacity = Column(Integer, nullable=False)
    sales_cutoff_hours = Column(Integer, default=48, nullable=False)  # Sales close this many hours before start
    refund_policy_text = Column(Text, nullable=True)
    canvas_image_url = Column(String, nullable=True)
    canvas_id = Column(String, ForeignKey("canvases.id"), nullable=True)
    status = Column(SQLEnum(EventStatus), default=EventStatus.DRAFT, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    bookings = relationship("Booking", back_populates="event", cascade="all, delete-orphan")
