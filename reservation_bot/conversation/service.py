"""Conversation service: loads a sender's session, runs the engine, saves the result."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from reservation_bot.conversation.engine import DialogueEngine, DialogueReply
from reservation_bot.conversation.messages import Language
from reservation_bot.conversation.session import ConversationSession, SessionStore
from reservation_bot.logging_context import set_sender_id
from reservation_bot.utils import mask_phone

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationService:
    """Per-sender conversation handling on top of a session store."""

    def __init__(
        self,
        engine: DialogueEngine,
        store: SessionStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.engine = engine
        self.store = store
        self._clock = clock

    def handle_incoming(self, sender: str, text: str) -> DialogueReply:
        """
        Handle one inbound text from a sender.

        A sender without a live session gets a fresh one and the opening
        message; the text of that first message only starts the conversation.
        """
        set_sender_id(mask_phone(sender))
        session = self.store.load(sender)

        if session is None:
            logger.info("Starting new conversation")
            session = ConversationSession(session_key=sender, created_at=self._clock())
            reply = self.engine.start(session)
        else:
            reply = self.engine.handle(session, text)

        session.last_interaction = self._clock()
        self.store.save(session)
        if reply.booking_updated:
            logger.info("Booking updated via conversation")
        return reply

    def session_language(self, sender: str) -> Language:
        """Language of the sender's live session, English when unknown."""
        session: Optional[ConversationSession] = self.store.load(sender)
        return session.lang if session else Language.EN
