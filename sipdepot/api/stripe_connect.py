"""Connected-account status and embedded-component sessions for hosts."""
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from typing import Optional

from sipdepot.api.deps import get_current_user_record, get_stripe_gateway
from sipdepot.core.exceptions import DomainError
from sipdepot.db.session import get_db
from sipdepot.models.user import User
from sipdepot.schemas.stripe import AccountSessionRequest, AccountSessionResponse, AccountStatusResponse
from sipdepot.services.account_session import create_account_session, ensure_connected_account
from sipdepot.services.account_status import sync_user_account_status
from sipdepot.services.stripe_gateway import StripeGateway

router = APIRouter()


@router.get("/account-status", response_model=AccountStatusResponse)
def account_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_record),
    gateway: StripeGateway = Depends(get_stripe_gateway),
):
    """
    Return the host's onboarding status, refreshed from Stripe.

    Polled by the dashboard; the result is also cached on the user row.
    """
    try:
        return sync_user_account_status(db, current_user, gateway)
    except DomainError as e:
        raise e.to_http_exception()


@router.post("/account-session", response_model=AccountSessionResponse)
def account_session(
    payload: Optional[AccountSessionRequest] = Body(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_record),
    gateway: StripeGateway = Depends(get_stripe_gateway),
):
    mode = payload.mode if payload else None
    try:
        account_id = ensure_connected_account(db, current_user, gateway)
        client_secret = create_account_session(gateway, account_id, mode)
    except DomainError as e:
        raise e.to_http_exception()
    return AccountSessionResponse(client_secret=client_secret)
