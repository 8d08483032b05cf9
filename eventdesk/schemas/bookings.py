from datetime import datetime

from pydantic import BaseModel, Field


class BookRequest(BaseModel):
    event_id: int = Field(ge=1)


class BookingOut(BaseModel):
    booking_id: int
    event_id: int
    user_id: int
    booking_date: datetime | None = None
    status: str

    class Config:
        from_attributes = True
