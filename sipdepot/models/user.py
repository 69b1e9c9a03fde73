from sqlalchemy import Column, String, Boolean, DateTime, JSON, Uuid, Enum as SQLEnum
import uuid
from datetime import datetime
import enum
from sipdepot.db.session import Base


class OnboardingStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"
    RESTRICTED = "RESTRICTED"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True, index=True)  # Stored lower-cased
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Connected account. Everything below stripe_account_id is a cache of the
    # provider's account object, refreshed on every status check.
    stripe_account_id = Column(String, nullable=True, unique=True, index=True)
    stripe_onboarding_status = Column(
        SQLEnum(OnboardingStatus), default=OnboardingStatus.NOT_STARTED, nullable=False
    )
    stripe_details_submitted = Column(Boolean, default=False, nullable=False)
    stripe_charges_enabled = Column(Boolean, default=False, nullable=False)
    stripe_payouts_enabled = Column(Boolean, default=False, nullable=False)
    stripe_requirements = Column(JSON, nullable=True)
    stripe_disabled_reason = Column(String, nullable=True)
    stripe_last_synced_at = Column(DateTime, nullable=True)
