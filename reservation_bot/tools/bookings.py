"""
Booking and event stores.

The in-memory stores hold a small seeded data set for the console demo and
tests. Production deployments use the Firestore adapters in
``firestore_store``; both satisfy the same protocols.
"""

import logging
from typing import Any, Iterable, Optional, Protocol

from reservation_bot.conversation.validators import coerce_calendar_date
from reservation_bot.schemas.booking_schema import (
    Booking,
    BookingUpdate,
    EventRecord,
    EventWindow,
)

logger = logging.getLogger(__name__)

MIN_SUBSTRING_QUERY = 3


class BookingStoreError(Exception):
    """Raised when the booking backend cannot complete a lookup or write."""


class BookingStore(Protocol):
    def find_by_code(self, code: str) -> Optional[Booking]: ...

    def update_schedule(self, booking: Booking, update: BookingUpdate) -> None: ...


class EventStore(Protocol):
    def list_events(self) -> list[EventRecord]: ...


DEMO_BOOKINGS: list[dict[str, Any]] = [
    {
        "id": "doc-bup001",
        "bookingId": "BUP001",
        "firstName": "Budi",
        "lastName": "Santoso",
        "email": "a@x.com",
        "phone": "08123",
        "eventName": "Sunset Dinner Cruise",
        "bookingDate": "2025-01-12",
        "bookingTime": "19:00",
        "adults": 2,
        "children": 1,
        "status": "confirmed",
        "paymentStatus": "paid",
        "totalPrice": 1500000,
    },
    {
        "id": "doc-tes22t",
        "bookingId": "TES22T",
        "firstName": "Siti",
        "lastName": "Rahma",
        "email": "siti@example.com",
        "phone": "081299887766",
        "eventName": "Harbour Breakfast",
        "bookingDate": "2025-02-03",
        "bookingTime": "",
        "adults": 1,
        "children": 0,
        "status": "pending",
        "paymentStatus": "unpaid",
    },
    {
        "id": "doc-cnl900",
        "bookingId": "CNL900",
        "firstName": "Andi",
        "lastName": "Wijaya",
        "email": "andi@example.com",
        "phone": "0811111",
        "eventName": "Sunset Dinner Cruise",
        "bookingDate": "2025-01-15",
        "bookingTime": "18:30",
        "adults": 4,
        "children": 0,
        "status": "cancelled",
        "paymentStatus": "refunded",
    },
]

DEMO_EVENTS: list[dict[str, Any]] = [
    {
        "id": "evt-sunset",
        "title": "Sunset Dinner Cruise",
        "startDate": "2025-01-10",
        "endDate": "2025-01-20",
    },
    {
        "id": "evt-gala",
        "name": "New Year Gala",
        "startDate": "2024-12-31T18:00:00",
        "endDate": "2025-01-01T02:00:00",
    },
]


class InMemoryBookingStore:
    """Booking store backed by a dict keyed by document id."""

    def __init__(self, bookings: Optional[Iterable[dict[str, Any]]] = None) -> None:
        self._seed = list(DEMO_BOOKINGS if bookings is None else bookings)
        self._docs: dict[str, dict[str, Any]] = {}
        self.writes: list[tuple[str, dict[str, Any]]] = []
        self.reset()

    def reset(self) -> None:
        """Restore the seed data and forget recorded writes."""
        self._docs = {doc["id"]: dict(doc) for doc in self._seed}
        self.writes = []

    def get_document(self, doc_id: str) -> Optional[dict[str, Any]]:
        doc = self._docs.get(doc_id)
        return dict(doc) if doc else None

    def find_by_code(self, code: str) -> Optional[Booking]:
        for doc in self._docs.values():
            if doc.get("bookingId") == code:
                return Booking.model_validate(doc)
        return None

    def update_schedule(self, booking: Booking, update: BookingUpdate) -> None:
        doc = self._docs.get(booking.id)
        if doc is None:
            raise BookingStoreError(f"Booking document {booking.id!r} not found")
        fields = update.to_document()
        doc.update(fields)
        self.writes.append((booking.id, fields))
        logger.info("Booking %s updated: %s", booking.booking_id, sorted(fields))


class InMemoryEventStore:
    """Event store returning a fixed list of event documents."""

    def __init__(self, events: Optional[Iterable[dict[str, Any]]] = None) -> None:
        self._events = [
            EventRecord.model_validate(doc)
            for doc in (DEMO_EVENTS if events is None else events)
        ]

    def list_events(self) -> list[EventRecord]:
        return list(self._events)


def _names(event: EventRecord) -> list[str]:
    return [
        value.strip().lower()
        for value in (event.title, event.name, event.event_name)
        if value and value.strip()
    ]


def _to_window(event: EventRecord) -> Optional[EventWindow]:
    start = coerce_calendar_date(event.start_date)
    end = coerce_calendar_date(event.end_date)
    if start is None or end is None:
        logger.debug("Event %s has no usable date range", event.id or event.display_name)
        return None
    return EventWindow(name=event.display_name, start_date=start, end_date=end)


def match_event_window(name: str, events: Iterable[EventRecord]) -> Optional[EventWindow]:
    """
    Best-effort lookup of the date window for a booking's event name.

    Bookings carry only the event's display name, so this tries an exact
    case-insensitive match on title, name and eventName across all events,
    then substring containment once the query has at least three characters.
    The first event with a usable date range wins.
    """
    query = (name or "").strip().lower()
    if not query:
        return None
    candidates = list(events)

    for event in candidates:
        if query in _names(event):
            window = _to_window(event)
            if window:
                return window

    if len(query) >= MIN_SUBSTRING_QUERY:
        for event in candidates:
            if any(query in field for field in _names(event)):
                window = _to_window(event)
                if window:
                    return window

    logger.info("No event window found for %r", name)
    return None
