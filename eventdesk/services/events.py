from datetime import date as date_type

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from eventdesk.core.errors import BadRequestError, ForbiddenError, NotFoundError
from eventdesk.core.security import CurrentUser
from eventdesk.models.bookings import Booking
from eventdesk.models.events import Event
from eventdesk.models.users import User
from eventdesk.schemas.events import EventCreate


def _parse_date_filter(value: str | None) -> date_type | None:
    if value is None or not value.strip():
        return None
    try:
        return date_type.fromisoformat(value.strip())
    except ValueError:
        raise BadRequestError("Invalid date filter, expected YYYY-MM-DD")


def list_events(db: Session, *, location: str | None = None, date: str | None = None) -> list[dict]:
    """
    List every event with its live seat availability.

    available_seats is capacity minus the number of booking rows for the event.
    The outer join keeps events without bookings; overbooked events come back
    negative rather than clamped.
    """
    event_columns = [column for column in Event.__table__.c if column.key != "available_seats"]
    stmt = (
        select(
            *event_columns,
            (Event.capacity - func.count(Booking.booking_id)).label("available_seats"),
        )
        .select_from(Event)
        .outerjoin(Booking, Booking.event_id == Event.event_id)
    )

    if location is not None and location.strip():
        stmt = stmt.where(Event.location.icontains(location.strip(), autoescape=True))

    on_date = _parse_date_filter(date)
    if on_date is not None:
        stmt = stmt.where(func.date(Event.date) == on_date.isoformat())

    stmt = stmt.group_by(Event.event_id).order_by(Event.date.asc())
    return [dict(row) for row in db.execute(stmt).mappings()]


def get_event(db: Session, event_id: int) -> Event:
    """Return the stored event row as-is, including its stored available_seats."""
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def list_organizer_events(db: Session, organizer_id: int) -> list[Event]:
    stmt = select(Event).where(Event.organizer_id == organizer_id).order_by(Event.date.desc())
    return list(db.scalars(stmt))


def get_attendee_report(db: Session, *, event_id: int, organizer_id: int) -> dict:
    # Scoping by owner answers existence and authorization together
    event = db.scalar(
        select(Event).where(Event.event_id == event_id, Event.organizer_id == organizer_id)
    )
    if event is None:
        raise ForbiddenError("Unauthorized or Event not found")

    attendees = db.execute(
        select(User.name, User.email, Booking.booking_date, Booking.status)
        .join(User, Booking.user_id == User.user_id)
        .where(Booking.event_id == event_id)
        .order_by(Booking.booking_id)
    ).mappings().all()

    return {
        "event": event,
        "attendees": [dict(row) for row in attendees],
        # Uniform pricing: every booking is assumed to have paid event.price
        "total_revenue": len(attendees) * float(event.price or 0),
    }


def create_event(db: Session, *, payload: EventCreate, organizer_id: int, image_url: str) -> Event:
    event = Event(
        title=payload.title,
        description=payload.description,
        date=payload.date,
        location=payload.location,
        price=payload.price,
        image_url=image_url,
        mode=payload.mode.value,
        meeting_link=payload.meeting_link,
        capacity=payload.capacity,
        organizer_id=organizer_id,
        available_seats=payload.capacity,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event {} created by user {}", event.event_id, organizer_id)
    return event


def delete_event(db: Session, *, event_id: int, user: CurrentUser) -> None:
    """Delete an event owned by ``user``; admins may delete any event."""
    stmt = delete(Event).where(Event.event_id == event_id)
    if not user.is_admin:
        stmt = stmt.where(Event.organizer_id == user.user_id)

    res = db.execute(stmt)
    if res.rowcount == 0:
        db.rollback()
        raise NotFoundError("Event not found or unauthorized")
    db.commit()
    logger.info("Event {} deleted by user {} ({})", event_id, user.user_id, user.role.value)
