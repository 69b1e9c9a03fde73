from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from sipdepot.api.deps import get_current_user
from sipdepot.core.security import create_access_token, get_password_hash, verify_password
from sipdepot.db.session import get_db
from sipdepot.models.user import User
from sipdepot.schemas.user import Token, User as UserSchema, UserLogin, UserSignup

router = APIRouter()
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> Token:
    return Token(access_token=create_access_token({"sub": user.email, "user_id": str(user.id)}))


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(data: UserSignup, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
        )

    user = User(
        email=data.email,
        name=data.name.strip(),
        hashed_password=get_password_hash(data.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[AUTH] New host signed up: {user.id}")
    return _issue_token(user)


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    # Normalize email: lowercase and strip whitespace
    email = credentials.email.lower().strip()
    user = db.query(User).filter(User.email == email).first()

    # Same message either way so the response doesn't reveal whether the email exists
    if user is None or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)


@router.get("/me", response_model=UserSchema)
def me(current_user: User = Depends(get_current_user)):
    return current_user
