"""Tests for event window resolution and the in-memory stores."""

from datetime import date

import pytest

from reservation_bot.schemas.booking_schema import Booking, BookingUpdate, EventRecord
from reservation_bot.tools.bookings import (
    BookingStoreError,
    InMemoryBookingStore,
    InMemoryEventStore,
    match_event_window,
)


def _events(*docs):
    return [EventRecord.model_validate(doc) for doc in docs]


class TestMatchEventWindow:
    def test_exact_title_match_case_insensitive(self):
        events = _events({"title": "Sunset Dinner Cruise", "startDate": "2025-01-10", "endDate": "2025-01-20"})
        window = match_event_window("  sunset dinner CRUISE ", events)
        assert window.start_date == date(2025, 1, 10)
        assert window.end_date == date(2025, 1, 20)
        assert window.name == "Sunset Dinner Cruise"

    def test_matches_name_and_event_name_fields(self):
        events = _events(
            {"name": "Gala", "startDate": "2025-02-01", "endDate": "2025-02-02"},
            {"eventName": "Brunch", "startDate": "2025-03-01", "endDate": "2025-03-02"},
        )
        assert match_event_window("gala", events).start_date == date(2025, 2, 1)
        assert match_event_window("brunch", events).start_date == date(2025, 3, 1)

    def test_exact_match_wins_over_earlier_substring(self):
        events = _events(
            {"title": "Gala Dinner Night", "startDate": "2025-02-01", "endDate": "2025-02-02"},
            {"title": "Gala Dinner", "startDate": "2025-04-01", "endDate": "2025-04-02"},
        )
        assert match_event_window("Gala Dinner", events).start_date == date(2025, 4, 1)

    def test_substring_match(self):
        events = _events({"title": "Sunset Dinner Cruise", "startDate": "2025-01-10", "endDate": "2025-01-20"})
        assert match_event_window("dinner", events) is not None

    def test_short_query_needs_exact_match(self):
        events = _events({"title": "Sunset Dinner Cruise", "startDate": "2025-01-10", "endDate": "2025-01-20"})
        assert match_event_window("di", events) is None

    def test_skips_events_without_dates(self):
        events = _events(
            {"title": "Gala", "startDate": None, "endDate": "2025-02-02"},
            {"name": "Gala", "startDate": "2025-05-01", "endDate": "2025-05-03"},
        )
        assert match_event_window("gala", events).start_date == date(2025, 5, 1)

    def test_datetime_bounds_use_calendar_date(self):
        events = _events({"name": "Gala", "startDate": "2024-12-31T18:00:00", "endDate": "2025-01-01T02:00:00"})
        window = match_event_window("Gala", events)
        assert window.end_date == date(2025, 1, 1)

    def test_no_match(self):
        assert match_event_window("Spa Day", _events({"title": "Gala", "startDate": "2025-01-01", "endDate": "2025-01-02"})) is None

    def test_empty_name(self):
        assert match_event_window("", []) is None


class TestInMemoryBookingStore:
    def test_find_by_code(self, booking_store):
        booking = booking_store.find_by_code("BUP001")
        assert booking.email == "a@x.com"
        assert booking.customer_name == "Budi Santoso"

    def test_unknown_code(self, booking_store):
        assert booking_store.find_by_code("ZZZ999") is None

    def test_update_writes_only_present_fields(self, booking_store):
        booking = booking_store.find_by_code("BUP001")
        booking_store.update_schedule(booking, BookingUpdate(new_time="14:30"))
        doc = booking_store.get_document("doc-1")
        assert doc["bookingTime"] == "14:30"
        assert doc["bookingDate"] == "2025-01-12"
        assert "updatedAt" in doc
        assert set(booking_store.writes[0][1]) == {"bookingTime", "updatedAt"}

    def test_update_unknown_document_raises(self, booking_store):
        ghost = Booking(id="missing", bookingId="GHOST1")
        with pytest.raises(BookingStoreError):
            booking_store.update_schedule(ghost, BookingUpdate(new_time="10:00"))

    def test_reset_restores_seed(self, booking_store):
        booking = booking_store.find_by_code("BUP001")
        booking_store.update_schedule(booking, BookingUpdate(new_date="2025-01-15"))
        booking_store.reset()
        assert booking_store.find_by_code("BUP001").booking_date == "2025-01-12"
        assert booking_store.writes == []

    def test_demo_seed(self):
        store = InMemoryBookingStore()
        assert store.find_by_code("BUP001") is not None
        assert len(InMemoryEventStore().list_events()) >= 1


class TestBookingUpdate:
    def test_document_keys(self):
        doc = BookingUpdate(new_date="2025-01-15", new_time="14:30").to_document()
        assert set(doc) == {"bookingDate", "bookingTime", "updatedAt"}

    def test_is_empty(self):
        assert BookingUpdate().is_empty()
        assert not BookingUpdate(new_date="2025-01-15").is_empty()


class TestNullTolerantRecords:
    def test_booking_nulls_become_defaults(self):
        booking = Booking.model_validate({
            "bookingId": "BUP001", "bookingTime": None, "adults": None,
            "children": "", "status": None, "email": None,
        })
        assert booking.booking_time == ""
        assert booking.adults == 0
        assert booking.children == 0
        assert booking.status == ""
        assert booking.email == ""

    def test_numeric_phone_kept_as_text(self):
        assert Booking.model_validate({"bookingId": "BUP001", "phone": 8123}).phone == "8123"

    def test_event_blank_names_ignored(self):
        event = EventRecord.model_validate({"title": "  ", "name": None, "eventName": "Gala"})
        assert event.title is None
        assert event.display_name == "Gala"

    def test_event_with_null_names_still_matches_other_field(self):
        window = match_event_window("gala", _events(
            {"title": None, "name": "Gala", "startDate": "2025-01-10", "endDate": "2025-01-12"},
        ))
        assert window is not None
        assert window.start_date == date(2025, 1, 10)
