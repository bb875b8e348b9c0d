"""Booking and event data models as read from and written to the booking database."""

from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Booking(BaseModel):
    """A reservation document, keyed by its human-readable booking code."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    booking_id: str = Field(alias="bookingId")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""
    phone: str = ""
    event_name: str = Field(default="", alias="eventName")
    booking_date: str = Field(default="", alias="bookingDate")
    booking_time: str = Field(default="", alias="bookingTime")
    adults: int = 0
    children: int = 0
    status: str = ""
    payment_status: str = Field(default="", alias="paymentStatus")
    total_price: Optional[float] = Field(default=None, alias="totalPrice")

    @field_validator(
        "id", "first_name", "last_name", "email", "phone", "event_name",
        "booking_date", "booking_time", "status", "payment_status",
        mode="before",
    )
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("adults", "children", mode="before")
    @classmethod
    def _null_count(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class EventRecord(BaseModel):
    """An event document; it may carry any of name, title or eventName."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: Optional[str] = None
    title: Optional[str] = None
    event_name: Optional[str] = Field(default=None, alias="eventName")
    start_date: Any = Field(default=None, alias="startDate")
    end_date: Any = Field(default=None, alias="endDate")

    @field_validator("name", "title", "event_name", mode="before")
    @classmethod
    def _blank_name(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def display_name(self) -> str:
        return self.title or self.name or self.event_name or "Event"


class EventWindow(BaseModel):
    """The inclusive calendar-date range during which an event's bookings may be scheduled."""

    name: str
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class BookingUpdate(BaseModel):
    """Field-level changes written back to a booking document."""

    new_date: Optional[str] = None
    new_time: Optional[str] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_empty(self) -> bool:
        return self.new_date is None and self.new_time is None

    def to_document(self) -> dict[str, Any]:
        """Return only the document keys this update writes."""
        doc: dict[str, Any] = {"updatedAt": self.updated_at}
        if self.new_date is not None:
            doc["bookingDate"] = self.new_date
        if self.new_time is not None:
            doc["bookingTime"] = self.new_time
        return doc
