"""Tests for the in-page chat widget transport."""

from reservation_bot.conversation.state_machine import DialogueStep
from reservation_bot.transports.widget import ChatWidget, Role


class TestWidgetLifecycle:
    def test_open_posts_greeting_once(self, engine):
        widget = ChatWidget(engine)
        first = widget.open()
        second = widget.open()
        assert len(first) == 1
        assert len(second) == 1
        assert first[0].role == Role.BOT
        assert "Test Hotel" in first[0].content
        assert widget.step == DialogueStep.ASK_BOOKING_ID

    def test_closed_widget_has_no_step(self, engine):
        widget = ChatWidget(engine)
        assert not widget.is_open
        assert widget.step is None
        assert not widget.is_completed

    def test_close_discards_conversation(self, engine):
        widget = ChatWidget(engine)
        widget.open()
        widget.send("BUP001")
        widget.close()
        assert not widget.is_open
        assert widget.messages == []

    def test_reopen_starts_fresh(self, engine):
        widget = ChatWidget(engine)
        widget.open()
        widget.send("BUP001")
        widget.close()
        widget.open()
        assert widget.step == DialogueStep.ASK_BOOKING_ID
        assert widget.session.bound_booking is None

    def test_unknown_language_shows_menu(self, engine):
        widget = ChatWidget(engine, language=None)
        widget.open()
        assert widget.step == DialogueStep.LANGUAGE_SELECTION


class TestWidgetSend:
    def test_blank_input_ignored(self, engine):
        widget = ChatWidget(engine)
        widget.open()
        assert widget.send("   ") == []
        assert len(widget.messages) == 1

    def test_send_opens_implicitly(self, engine):
        widget = ChatWidget(engine)
        replies = widget.send("BUP001")
        assert widget.is_open
        assert replies
        assert widget.messages[0].role == Role.BOT

    def test_transcript_order(self, engine):
        widget = ChatWidget(engine)
        widget.open()
        replies = widget.send("  BUP001 ")
        roles = [message.role for message in widget.messages]
        assert roles[:2] == [Role.BOT, Role.USER]
        assert widget.messages[1].content == "BUP001"
        assert widget.messages[-len(replies):] == replies

    def test_lookup_moves_to_summary(self, engine):
        widget = ChatWidget(engine)
        widget.open()
        widget.send("BUP001")
        assert widget.step == DialogueStep.SHOW_BOOKING_INFO
        assert widget.session.bound_booking.booking_id == "BUP001"

    def test_completion_follows_engine(self, engine):
        widget = ChatWidget(engine)
        for text in ["BUP001", "1", "a@x.com", "08123"]:
            widget.send(text)
        assert not widget.is_completed
        widget.send("4")
        assert widget.is_completed
        assert widget.step_trace[0] == "ask_booking_id"
        assert widget.step_trace[-1] == "completed"

    def test_restart_after_completion_reopens_flow(self, engine):
        widget = ChatWidget(engine)
        for text in ["BUP001", "1", "a@x.com", "08123", "4", "menu"]:
            widget.send(text)
        assert not widget.is_completed
        assert widget.step == DialogueStep.ASK_BOOKING_ID
