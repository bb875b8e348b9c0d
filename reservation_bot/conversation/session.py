"""
Conversation sessions and the stores that keep them between messages.

The in-memory store serves the single-process hosts (console, tests, a
single webhook instance). The Redis store externalizes sessions so several
webhook instances share one view of each sender's conversation.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional, Protocol

import redis
from pydantic import BaseModel, Field

from reservation_bot.conversation.messages import Language
from reservation_bot.conversation.state_machine import DialogueStep, StepEntry
from reservation_bot.schemas.booking_schema import Booking, EventWindow

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EditTarget(str, Enum):
    DATE = "date"
    TIME = "time"
    BOTH = "both"


class Verification(BaseModel):
    """Identity details submitted by the guest, pending comparison."""

    email: Optional[str] = None
    phone: Optional[str] = None


class PendingEdit(BaseModel):
    """Staged changes not yet written to the booking."""

    new_date: Optional[str] = None
    new_time: Optional[str] = None
    edit_target: Optional[EditTarget] = None


class ConversationSession(BaseModel):
    """Per-conversation dialogue state."""

    session_key: str
    current_step: DialogueStep = DialogueStep.LANGUAGE_SELECTION
    step_history: list[StepEntry] = Field(default_factory=list)
    language: Optional[Language] = None
    bound_booking: Optional[Booking] = None
    verification: Optional[Verification] = None
    pending_edit: Optional[PendingEdit] = None
    event_window: Optional[EventWindow] = None
    created_at: datetime = Field(default_factory=_utcnow)
    last_interaction: datetime = Field(default_factory=_utcnow)

    @property
    def lang(self) -> Language:
        return self.language or Language.EN

    def reset_booking(self) -> None:
        """Forget everything tied to the current booking; language survives."""
        self.bound_booking = None
        self.verification = None
        self.pending_edit = None
        self.event_window = None


class SessionStore(Protocol):
    def load(self, key: str) -> Optional[ConversationSession]: ...

    def save(self, session: ConversationSession) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemorySessionStore:
    """
    Process-local session map with idle expiry and a size cap.

    Sessions are copied on the way in and out so callers never share a
    mutable instance with the store. When the map grows past max_sessions,
    expired entries are dropped first, then the least recently active.
    All access goes through one lock; the webhook serves deliveries from
    a thread pool.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=24),
        max_sessions: int = 1000,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: dict[str, ConversationSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _is_expired(self, session: ConversationSession) -> bool:
        return self._clock() - session.last_interaction > self._ttl

    def load(self, key: str) -> Optional[ConversationSession]:
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                return None
            if self._is_expired(session):
                logger.debug("Session expired after %s idle", self._ttl)
                self._sessions.pop(key, None)
                return None
            return session.model_copy(deep=True)

    def save(self, session: ConversationSession) -> None:
        snapshot = session.model_copy(deep=True)
        with self._lock:
            self._sessions[session.session_key] = snapshot
            if len(self._sessions) > self._max_sessions:
                self._cleanup_locked()

    def delete(self, key: str) -> None:
        with self._lock:
            self._sessions.pop(key, None)

    def cleanup(self) -> int:
        """Drop expired sessions, then evict the oldest above the cap. Returns count removed."""
        with self._lock:
            return self._cleanup_locked()

    def _cleanup_locked(self) -> int:
        expired = [key for key, s in self._sessions.items() if self._is_expired(s)]
        for key in expired:
            self._sessions.pop(key, None)

        evicted = 0
        overflow = len(self._sessions) - self._max_sessions
        if overflow > 0:
            oldest = sorted(self._sessions.items(), key=lambda item: item[1].last_interaction)
            for key, _ in oldest[:overflow]:
                del self._sessions[key]
                evicted += 1

        removed = len(expired) + evicted
        if removed:
            logger.info(
                "Session cleanup removed %d (expired=%d, evicted=%d), %d active",
                removed, len(expired), evicted, len(self._sessions),
            )
        return removed


class RedisSessionStore:
    """Sessions serialized as JSON under a per-sender key with an idle TTL."""

    def __init__(self, client, ttl: timedelta = timedelta(hours=24), key_prefix: str = "conversation:") -> None:
        self._client = client
        self._ttl = ttl
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key.lstrip('+')}"

    def load(self, key: str) -> Optional[ConversationSession]:
        raw = self._client.get(self._key(key))
        if not raw:
            return None
        return ConversationSession.model_validate_json(raw)

    def save(self, session: ConversationSession) -> None:
        self._client.setex(
            self._key(session.session_key),
            int(self._ttl.total_seconds()),
            session.model_dump_json(),
        )

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))


def build_session_store(config) -> SessionStore:
    """Create the session store selected by SessionConfig."""
    ttl = timedelta(hours=config.ttl_hours)
    if config.backend == "redis":
        client = redis.Redis.from_url(config.redis_url, decode_responses=True)
        logger.info("Using Redis session store (ttl=%s)", ttl)
        return RedisSessionStore(client, ttl=ttl, key_prefix=config.key_prefix)
    logger.info("Using in-memory session store (ttl=%s, max=%d)", ttl, config.max_sessions)
    return InMemorySessionStore(ttl=ttl, max_sessions=config.max_sessions)
