from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sipdepot.api.deps import get_stripe_gateway
from sipdepot.core.exceptions import DomainError
from sipdepot.db.session import get_db
from sipdepot.schemas.booking import CheckoutRequest, CheckoutResponse
from sipdepot.services.checkout import create_checkout
from sipdepot.services.stripe_gateway import StripeGateway

router = APIRouter()


@router.post("", response_model=CheckoutResponse)
def start_checkout(
    data: CheckoutRequest,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_stripe_gateway),
):
    """Reserve tickets as a PENDING booking and return the hosted checkout URL."""
    try:
        url = create_checkout(
            db,
            gateway,
            event_id=data.event_id,
            quantity=data.quantity,
            purchaser_name=data.purchaser_name.strip(),
            purchaser_email=data.purchaser_email,
        )
    except DomainError as e:
        raise e.to_http_exception()
    return CheckoutResponse(url=url)
