from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from eventdesk.core.config import Settings, get_settings
from eventdesk.core.errors import BadRequestError
from eventdesk.core.security import CurrentUser, get_current_user, require_event_creator
from eventdesk.database.db import get_db
from eventdesk.schemas.events import (
    AttendeeReportOut,
    EventCreate,
    EventCreatedOut,
    EventOut,
    MessageOut,
)
from eventdesk.services import events as event_service
from eventdesk.services.images import ImageStore, get_image_store

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=list[EventOut])
def list_events(
    location: str | None = None,
    date: str | None = None,
    db: Session = Depends(get_db),
):
    """Public listing with seats computed from bookings."""
    return event_service.list_events(db, location=location, date=date)


# Registered before /{event_id} so "my-events" is not parsed as an id
@router.get("/my-events", response_model=list[EventOut])
def my_events(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.list_organizer_events(db, current_user.user_id)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.get("/{event_id}/attendees", response_model=AttendeeReportOut)
def event_attendees(
    event_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.get_attendee_report(db, event_id=event_id, organizer_id=current_user.user_id)


@router.post("", response_model=EventCreatedOut, status_code=status.HTTP_201_CREATED)
def create_event(
    request: Request,
    title: str | None = Form(None),
    description: str | None = Form(None),
    date: str | None = Form(None),
    location: str | None = Form(None),
    price: str | None = Form(None),
    mode: str | None = Form(None),
    meeting_link: str | None = Form(None),
    capacity: str | None = Form(None),
    image: UploadFile | None = File(None),
    current_user: CurrentUser = Depends(require_event_creator),
    config: Settings = Depends(get_settings),
    images: ImageStore = Depends(get_image_store),
    db: Session = Depends(get_db),
):
    if not title or not date:
        raise BadRequestError("Title and Date are required")

    try:
        payload = EventCreate(
            title=title,
            description=description,
            date=date,
            location=location,
            price=price,
            mode=mode,
            meeting_link=meeting_link,
            capacity=capacity,
        )
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise BadRequestError(f"Invalid event fields: {fields}")

    image_url = config.PLACEHOLDER_IMAGE_URL
    filename = None
    if image is not None and image.filename:
        filename = images.save(image)
        image_url = images.public_url(filename, str(request.base_url))

    try:
        event = event_service.create_event(
            db, payload=payload, organizer_id=current_user.user_id, image_url=image_url
        )
    except Exception:
        if filename:
            images.discard(filename)
        raise

    return {"message": "Event created successfully", "event_id": event.event_id}


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(
    event_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    event_service.delete_event(db, event_id=event_id, user=current_user)
    return {"message": "Event deleted successfully"}
