"""Embedded-component sessions for a host's connected account."""
import enum
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from sipdepot.models.user import User

logger = logging.getLogger(__name__)


class SessionMode(str, enum.Enum):
    ONBOARDING = "onboarding"
    COMPLIANCE = "compliance"
    PAYMENTS = "payments"
    PAYOUTS = "payouts"


def parse_mode(value: Any) -> SessionMode:
    """Anything that is not a known mode falls back to onboarding."""
    if isinstance(value, SessionMode):
        return value
    if not isinstance(value, str):
        return SessionMode.ONBOARDING
    try:
        return SessionMode(value)
    except ValueError:
        return SessionMode.ONBOARDING


def build_components(mode: SessionMode) -> Dict[str, Dict[str, Any]]:
    """Return the Stripe ``components`` map enabled for the given mode."""
    if mode == SessionMode.COMPLIANCE:
        return {
            "notification_banner": {"enabled": True},
            "account_management": {"enabled": True},
        }
    if mode == SessionMode.PAYMENTS:
        return {
            "payments": {
                "enabled": True,
                "features": {
                    "refund_management": True,
                    "dispute_management": True,
                    "capture_payments": True,
                },
            },
        }
    if mode == SessionMode.PAYOUTS:
        return {
            "balances": {"enabled": True},
            "payouts": {"enabled": True},
        }
    return {"account_onboarding": {"enabled": True}}


def create_account_session(gateway, account_id: str, mode: Any) -> str:
    if not account_id:
        raise ValueError("account_id is required")
    mode = parse_mode(mode)
    return gateway.create_account_session(account_id, build_components(mode))


def ensure_connected_account(db: Session, user: User, gateway) -> str:
    """Return the user's connected account id, creating an Express account on first use."""
    if user.stripe_account_id:
        return user.stripe_account_id

    account_id = gateway.create_express_account()
    user.stripe_account_id = account_id
    db.commit()
    logger.info(f"[STRIPE] Linked connected account {account_id} to user {user.id}")
    return account_id
