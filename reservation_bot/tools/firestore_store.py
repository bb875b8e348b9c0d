"""
Firestore-backed booking and event stores.

Bookings are looked up by their human-readable ``bookingId`` field and
updated by document id. Event documents are read from each configured
collection in order (regular events first, then special events).
"""

import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

from reservation_bot.schemas.booking_schema import Booking, BookingUpdate, EventRecord
from reservation_bot.tools.bookings import (
    BookingStore,
    BookingStoreError,
    EventStore,
    InMemoryBookingStore,
    InMemoryEventStore,
)

logger = logging.getLogger(__name__)


def get_firestore_client(credentials_path: str = ""):
    """Initialise the Firebase app once and return a Firestore client."""
    if not firebase_admin._apps:
        if credentials_path:
            firebase_admin.initialize_app(credentials.Certificate(credentials_path))
        else:
            # Application default credentials (e.g. on Cloud Run)
            firebase_admin.initialize_app()
        logger.info("Firebase app initialised")
    return firestore.client()


class FirestoreBookingStore:
    def __init__(self, client, collection: str = "booking") -> None:
        self._client = client
        self._collection = collection

    def find_by_code(self, code: str) -> Optional[Booking]:
        docs = list(
            self._client.collection(self._collection)
            .where("bookingId", "==", code)
            .limit(1)
            .stream()
        )
        if not docs:
            return None
        snapshot = docs[0]
        return Booking.model_validate({**snapshot.to_dict(), "id": snapshot.id})

    def update_schedule(self, booking: Booking, update: BookingUpdate) -> None:
        if not booking.id:
            raise BookingStoreError(f"Booking {booking.booking_id} has no document id")
        fields = update.to_document()
        self._client.collection(self._collection).document(booking.id).update(fields)
        logger.info("Booking %s updated: %s", booking.booking_id, sorted(fields))


class FirestoreEventStore:
    def __init__(self, client, collections: tuple[str, ...] = ("event", "specialEvents")) -> None:
        self._client = client
        self._collections = collections

    def list_events(self) -> list[EventRecord]:
        events: list[EventRecord] = []
        for name in self._collections:
            for snapshot in self._client.collection(name).stream():
                events.append(EventRecord.model_validate({**snapshot.to_dict(), "id": snapshot.id}))
        return events


def build_stores(config) -> tuple[BookingStore, EventStore]:
    """Create the booking and event stores selected by StorageConfig."""
    if config.backend == "firestore":
        client = get_firestore_client(config.credentials_path)
        logger.info("Using Firestore stores (bookings=%s)", config.booking_collection)
        return (
            FirestoreBookingStore(client, config.booking_collection),
            FirestoreEventStore(client, config.event_collections),
        )
    logger.info("Using in-memory demo stores")
    return InMemoryBookingStore(), InMemoryEventStore()
