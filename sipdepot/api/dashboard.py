from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from sipdepot.api.deps import get_current_user
from sipdepot.db.session import get_db
from sipdepot.models.booking import BookingStatus
from sipdepot.models.user import User
from sipdepot.schemas.booking import Booking as BookingSchema
from sipdepot.schemas.dashboard import DashboardSummary
from sipdepot.services.dashboard import host_bookings, host_summary

router = APIRouter()


@router.get("/summary", response_model=DashboardSummary)
def summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return host_summary(db, current_user.id)


@router.get("/bookings", response_model=List[BookingSchema])
def bookings(
    status: Optional[BookingStatus] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return host_bookings(db, current_user.id, status)
