from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from eventdesk.models.events import EventMode

DEFAULT_CAPACITY = 100
DEFAULTED_FIELDS = ("capacity", "mode", "price")


# ---------- Event ----------
class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    date: datetime
    location: str | None = None
    price: float = Field(default=0, ge=0)
    mode: EventMode = EventMode.PHYSICAL
    meeting_link: str | None = None
    capacity: int = Field(default=DEFAULT_CAPACITY, gt=0)

    @model_validator(mode="before")
    @classmethod
    def apply_falsy_defaults(cls, data):
        # Form submissions send "" or 0 for untouched capacity, mode and price; those mean "use the default"
        if isinstance(data, dict):
            data = {
                key: value
                for key, value in data.items()
                if key not in DEFAULTED_FIELDS or value not in (None, "", 0, "0")
            }
        return data


class EventOut(BaseModel):
    event_id: int
    title: str
    description: str | None = None
    date: datetime
    location: str | None = None
    price: float
    image_url: str | None = None
    mode: str
    meeting_link: str | None = None
    capacity: int
    organizer_id: int | None = None
    available_seats: int

    class Config:
        from_attributes = True


class EventCreatedOut(BaseModel):
    message: str
    event_id: int


class MessageOut(BaseModel):
    message: str


# ---------- Attendees ----------
class AttendeeOut(BaseModel):
    name: str
    email: str
    booking_date: datetime | None = None
    status: str

    class Config:
        from_attributes = True


class AttendeeReportOut(BaseModel):
    event: EventOut
    attendees: list[AttendeeOut]
    total_revenue: float
