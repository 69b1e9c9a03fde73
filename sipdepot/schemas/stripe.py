from pydantic import BaseModel
from typing import Any, List, Optional
from datetime import datetime

from sipdepot.models.user import OnboardingStatus


class AccountRequirements(BaseModel):
    currently_due: List[str] = []
    eventually_due: List[str] = []
    past_due: List[str] = []
    pending_verification: List[str] = []


class AccountStatusResponse(BaseModel):
    account_id: Optional[str] = None
    details_submitted: bool
    charges_enabled: bool
    payouts_enabled: bool
    onboarding_status: OnboardingStatus
    requirements: Optional[AccountRequirements] = None
    disabled_reason: Optional[str] = None
    last_synced_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AccountSessionRequest(BaseModel):
    mode: Optional[Any] = None  # Unknown values fall back to onboarding


class AccountSessionResponse(BaseModel):
    client_secret: str


class WebhookAck(BaseModel):
    received: bool = True
