from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventdesk.core.security import CurrentUser, get_current_user
from eventdesk.database.db import get_db
from eventdesk.schemas.bookings import BookingOut, BookRequest
from eventdesk.services.bookings import create_booking

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def book_ticket(
    payload: BookRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_booking(db, event_id=payload.event_id, user_id=current_user.user_id)
