from reservation_bot.conversation.messages import Language, render
from reservation_bot.conversation.session import (
    ConversationSession,
    InMemorySessionStore,
    RedisSessionStore,
)
from reservation_bot.conversation.state_machine import (
    DialogueStateMachine,
    DialogueStep,
    DialogueTrigger,
)

__all__ = [
    "DialogueStateMachine",
    "DialogueStep",
    "DialogueTrigger",
    "ConversationSession",
    "InMemorySessionStore",
    "RedisSessionStore",
    "Language",
    "render",
]
