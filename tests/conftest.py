"""Shared test fixtures and helpers."""

from datetime import date, datetime, timezone
from typing import Optional

import pytest

from reservation_bot.conversation.engine import DialogueEngine, DialogueReply
from reservation_bot.conversation.messages import Language
from reservation_bot.conversation.session import ConversationSession
from reservation_bot.conversation.state_machine import DialogueStateMachine, DialogueStep
from reservation_bot.conversation.validators import BookingCodePolicy
from reservation_bot.tools.bookings import InMemoryBookingStore, InMemoryEventStore

TODAY = date(2025, 1, 5)
NOW = datetime(2025, 1, 5, 9, 30, tzinfo=timezone.utc)

BOOKING = {
    "id": "doc-1",
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
}

CANCELLED_BOOKING = {
    **BOOKING,
    "id": "doc-2",
    "bookingId": "CNL900",
    "status": "cancelled",
}

NO_EVENT_BOOKING = {
    **BOOKING,
    "id": "doc-3",
    "bookingId": "KLM7X2",
    "eventName": "Private Room",
}

EVENTS = [
    {"id": "evt-1", "title": "Sunset Dinner Cruise", "startDate": "2025-01-10", "endDate": "2025-01-20"},
]


@pytest.fixture
def state_machine():
    return DialogueStateMachine()


@pytest.fixture
def booking_store():
    return InMemoryBookingStore([BOOKING, CANCELLED_BOOKING, NO_EVENT_BOOKING])


@pytest.fixture
def event_store():
    return InMemoryEventStore(EVENTS)


@pytest.fixture
def engine(booking_store, event_store):
    return DialogueEngine(
        booking_store,
        event_store,
        code_policy=BookingCodePolicy.STRICT,
        clock=lambda: TODAY,
        max_future_years=2,
        hotel_name="Test Hotel",
    )


@pytest.fixture
def session():
    """A session that already chose English and is waiting for a booking code."""
    return ConversationSession(
        session_key="6281234567890",
        current_step=DialogueStep.ASK_BOOKING_ID,
        language=Language.EN,
    )


def run_inputs(engine: DialogueEngine, session: ConversationSession, inputs: list[str]) -> Optional[DialogueReply]:
    """Feed inputs to the engine in order and return the last reply."""
    reply = None
    for text in inputs:
        reply = engine.handle(session, text)
    return reply


VERIFIED_INPUTS = ["BUP001", "1", "a@x.com", "08123"]
