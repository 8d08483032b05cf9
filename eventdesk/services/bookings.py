
import redis
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eventdesk.core.errors import ConflictError, NotFoundError
from eventdesk.core.redis_config import get_redis_client
from eventdesk.models.bookings import Booking, BookingStatus
from eventdesk.models.events import Event


class SoldOutError(ConflictError):
    pass


def create_booking(
    db: Session,
    *,
    event_id: int,
    user_id: int,
    lock_timeout: float = 10,
    blocking_timeout: float = 5,
) -> Booking:
    """
    Book one seat with a per-event Redis lock so concurrent requests cannot
    take more seats than the event's capacity.
    """
    redis_client = get_redis_client()
    lock = redis_client.lock(f"event_lock:{event_id}", timeout=lock_timeout, blocking_timeout=blocking_timeout)

    try:
        # Acquire the lock - only one booking per event proceeds at a time
        acquired = lock.acquire(blocking=True, blocking_timeout=blocking_timeout)
    except redis.exceptions.LockError:
        acquired = False
    if not acquired:
        raise SoldOutError("Could not acquire lock, please try again.")

    try:
        if db.in_transaction():
            booking = _create_booking_in_transaction(db, event_id, user_id)
            db.commit()
        else:
            with db.begin():
                booking = _create_booking_in_transaction(db, event_id, user_id)
    finally:
        _release_lock(lock, event_id)

    logger.info("Booking {} created for event {} by user {}", booking.booking_id, event_id, user_id)
    return booking


def _release_lock(lock, event_id: int) -> None:
    # The booking outcome is already settled here; an expired lock must not turn it into a failure
    try:
        lock.release()
    except redis.exceptions.LockNotOwnedError:
        logger.warning("Booking lock for event {} expired before release", event_id)


def _create_booking_in_transaction(db: Session, event_id: int, user_id: int) -> Booking:
    """Check capacity against booking rows and insert within one transaction."""
    event = db.get(Event, event_id, with_for_update=True)
    if not event:
        raise NotFoundError("Event not found")

    booked = db.scalar(select(func.count(Booking.booking_id)).where(Booking.event_id == event_id)) or 0
    if booked >= event.capacity:
        raise SoldOutError("Event is sold out.")

    booking = Booking(
        event_id=event_id,
        user_id=user_id,
        status=BookingStatus.CONFIRMED.value,
    )
    db.add(booking)
    # Keep the stored snapshot equal to the derived figure for bookings taken here
    event.available_seats = event.capacity - (booked + 1)
    db.flush()  # gets booking.booking_id
    db.refresh(booking)
    return booking
