"""
Connected-account onboarding status.

The provider's account object is the source of truth. The status derived
here is cached on the user row so the dashboard can gate on it, but it is
recomputed on every status check and may be stale in between.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from sipdepot.models.user import OnboardingStatus, User

logger = logging.getLogger(__name__)

REQUIREMENT_LISTS = ("currently_due", "eventually_due", "past_due", "pending_verification")


@dataclass
class AccountSnapshot:
    charges_enabled: bool = False
    payouts_enabled: bool = False
    details_submitted: bool = False
    requirements: Optional[Dict[str, List[str]]] = None
    disabled_reason: Optional[str] = None

    def due(self, name: str) -> List[str]:
        if not self.requirements:
            return []
        return self.requirements.get(name) or []


@dataclass
class AccountStatus:
    account_id: Optional[str]
    details_submitted: bool
    charges_enabled: bool
    payouts_enabled: bool
    onboarding_status: OnboardingStatus
    requirements: Optional[Dict[str, List[str]]] = None
    disabled_reason: Optional[str] = None
    last_synced_at: Optional[datetime] = field(default=None)


# Evaluated top to bottom. Every matching rule overwrites the running result,
# so a later rule wins over an earlier one. COMPLETE and RESTRICTED never both
# match: they disagree on the enabled flags.
STATUS_RULES: List[Tuple[str, Callable[[AccountSnapshot], bool], OnboardingStatus]] = [
    (
        "nothing_submitted",
        lambda s: not s.details_submitted and len(s.due("currently_due")) > 0,
        OnboardingStatus.NOT_STARTED,
    ),
    (
        "fully_enabled",
        lambda s: s.charges_enabled and s.payouts_enabled,
        OnboardingStatus.COMPLETE,
    ),
    (
        "blocked_by_provider",
        lambda s: (not s.charges_enabled or not s.payouts_enabled)
        and (len(s.due("past_due")) > 0 or bool(s.disabled_reason)),
        OnboardingStatus.RESTRICTED,
    ),
]


def derive_onboarding_status(snapshot: AccountSnapshot) -> OnboardingStatus:
    result = OnboardingStatus.IN_PROGRESS
    for _name, predicate, status in STATUS_RULES:
        if predicate(snapshot):
            result = status
    return result


def _get(obj: Any, key: str, default=None):
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def snapshot_from_account(account: Any) -> AccountSnapshot:
    """Normalize a Stripe Account (object or webhook dict) into a snapshot."""
    req = _get(account, "requirements")
    requirements = None
    if req:
        requirements = {name: list(_get(req, name) or []) for name in REQUIREMENT_LISTS}

    return AccountSnapshot(
        charges_enabled=bool(_get(account, "charges_enabled", False)),
        payouts_enabled=bool(_get(account, "payouts_enabled", False)),
        details_submitted=bool(_get(account, "details_submitted", False)),
        requirements=requirements,
        disabled_reason=_get(req, "disabled_reason") or None,
    )


def status_from_snapshot(account_id: Optional[str], snapshot: AccountSnapshot) -> AccountStatus:
    return AccountStatus(
        account_id=account_id,
        details_submitted=snapshot.details_submitted,
        charges_enabled=snapshot.charges_enabled,
        payouts_enabled=snapshot.payouts_enabled,
        onboarding_status=derive_onboarding_status(snapshot),
        requirements=snapshot.requirements,
        disabled_reason=snapshot.disabled_reason,
    )


def get_account_status(gateway, account_id: str) -> AccountStatus:
    account = gateway.retrieve_account(account_id)
    return status_from_snapshot(account_id, snapshot_from_account(account))


def apply_status_to_user(user: User, status: AccountStatus, synced_at: datetime) -> None:
    user.stripe_details_submitted = status.details_submitted
    user.stripe_charges_enabled = status.charges_enabled
    user.stripe_payouts_enabled = status.payouts_enabled
    user.stripe_requirements = status.requirements
    user.stripe_disabled_reason = status.disabled_reason
    user.stripe_onboarding_status = status.onboarding_status
    user.stripe_last_synced_at = synced_at


def sync_user_account_status(db: Session, user: User, gateway) -> AccountStatus:
    """
    Refresh the user's cached onboarding status from Stripe.

    A user without a connected account gets the cached view back untouched.
    """
    if not user.stripe_account_id:
        return AccountStatus(
            account_id=None,
            details_submitted=False,
            charges_enabled=False,
            payouts_enabled=False,
            onboarding_status=user.stripe_onboarding_status or OnboardingStatus.NOT_STARTED,
            requirements=None,
            disabled_reason=None,
            last_synced_at=user.stripe_last_synced_at,
        )

    status = get_account_status(gateway, user.stripe_account_id)
    now = datetime.utcnow()
    apply_status_to_user(user, status, now)
    db.commit()
    status.last_synced_at = now

    logger.info(
        f"[STRIPE] Synced account {user.stripe_account_id} for user {user.id}: "
        f"{status.onboarding_status.value}"
    )
    return status
