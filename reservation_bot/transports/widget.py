"""
In-page chat widget transport.

Holds one conversation in memory for as long as the widget is open. The
transcript is a list of ChatMessage entries the UI renders in order;
closing the widget discards the session.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from reservation_bot.conversation.engine import DialogueEngine
from reservation_bot.conversation.messages import Language
from reservation_bot.conversation.session import ConversationSession
from reservation_bot.conversation.state_machine import DialogueStateMachine, DialogueStep
from reservation_bot.logging_context import set_sender_id

logger = logging.getLogger(__name__)


class Role(str, Enum):
    BOT = "bot"
    USER = "user"


@dataclass
class ChatMessage:
    role: Role
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ChatWidget:
    """A chat window driving the dialogue engine for one visitor."""

    def __init__(self, engine: DialogueEngine, language: Optional[str] = "en") -> None:
        self._engine = engine
        self._language = Language(language) if language else None
        self._session: Optional[ConversationSession] = None
        self._completed = False
        self.messages: list[ChatMessage] = []

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[ConversationSession]:
        return self._session

    @property
    def step(self) -> Optional[DialogueStep]:
        return self._session.current_step if self._session else None

    @property
    def is_completed(self) -> bool:
        return self._session is not None and self._completed

    @property
    def step_trace(self) -> list[str]:
        """Steps visited in this conversation, oldest first."""
        if self._session is None:
            return []
        return DialogueStateMachine(self.step, list(self._session.step_history)).get_step_trace()

    def _post(self, role: Role, content: str) -> None:
        self.messages.append(ChatMessage(role=role, content=content))

    def open(self) -> list[ChatMessage]:
        """Open the widget; the opening bot message is posted only once."""
        if self._session is None:
            self._session = ConversationSession(
                session_key=f"widget-{uuid4().hex[:8]}",
                language=self._language,
            )
            set_sender_id(self._session.session_key)
            reply = self._engine.start(self._session)
            self._completed = reply.completed
            for text in reply.messages:
                self._post(Role.BOT, text)
            logger.debug("Chat widget opened (%s)", self._session.session_key)
        return list(self.messages)

    def send(self, text: str) -> list[ChatMessage]:
        """Post the visitor's text and return the bot replies it produced."""
        if not text or not text.strip():
            return []
        if self._session is None:
            self.open()

        set_sender_id(self._session.session_key)
        self._post(Role.USER, text.strip())
        reply = self._engine.handle(self._session, text)
        self._completed = reply.completed
        replies = [ChatMessage(role=Role.BOT, content=body) for body in reply.messages]
        self.messages.extend(replies)
        return replies

    def close(self) -> None:
        """Discard the conversation and transcript."""
        if self._session is not None:
            logger.debug("Chat widget closed (%s)", self._session.session_key)
        self._session = None
        self._completed = False
        self.messages = []
