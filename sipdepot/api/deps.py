from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import uuid

from sipdepot.core.security import decode_access_token
from sipdepot.db.session import get_db
from sipdepot.models.user import User
from sipdepot.services.stripe_gateway import StripeGateway

# auto_error=False so a missing header is a 401, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_token_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> uuid.UUID:
    """Validate the bearer token and return the user id it was issued for."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("user_id") if payload else None
    try:
        return uuid.UUID(str(user_id))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    user_id: uuid.UUID = Depends(get_token_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user_record(
    user_id: uuid.UUID = Depends(get_token_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Like get_current_user, but an authenticated caller without a user row is a 404."""
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def get_stripe_gateway(request: Request) -> StripeGateway:
    gateway = getattr(request.app.state, "stripe_gateway", None)
    if gateway is None:
        gateway = StripeGateway.from_settings()
        request.app.state.stripe_gateway = gateway
    return gateway
