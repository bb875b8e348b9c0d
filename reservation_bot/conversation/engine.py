"""
Dialogue engine for booking modification.

One engine serves every host. A host hands it a session and the guest's
raw text; the engine validates the input, calls the booking and event
stores where needed, moves the session through the step machine and
returns the texts to send back.

Each step has exactly one handler. Invalid input re-prompts in place;
store failures are logged and answered with a generic message.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from reservation_bot.conversation.messages import Language, render
from reservation_bot.conversation.session import (
    ConversationSession,
    EditTarget,
    PendingEdit,
    Verification,
)
from reservation_bot.conversation.state_machine import (
    DialogueStateMachine,
    DialogueStep,
    DialogueTrigger,
)
from reservation_bot.conversation.validators import (
    BookingCodePolicy,
    DateRejection,
    check_booking_date,
    extract_booking_code,
    looks_like_email,
    parse_booking_date,
    parse_booking_time,
    to_display_format,
    to_storage_format,
)
from reservation_bot.schemas.booking_schema import Booking, BookingUpdate, EventWindow
from reservation_bot.tools.bookings import BookingStore, EventStore, match_event_window
from reservation_bot.utils import mask_email

logger = logging.getLogger(__name__)

DEFAULT_HOTEL_NAME = "Makassar Phinisi Sea Side Hotel"

RESTART_COMMANDS = {"menu", "restart"}
ENGLISH_CHOICES = {"1", "english", "en"}
INDONESIAN_CHOICES = {"2", "bahasa", "indonesia", "bahasa indonesia", "id"}
CANCELLED_STATUS = "cancelled"

DISPLAY_DATE_FORMAT = "%d-%m-%Y"


@dataclass
class DialogueReply:
    """What the host should send back after one inbound message."""

    messages: list[str]
    step: DialogueStep
    booking_updated: bool = False
    completed: bool = False


@dataclass
class _Turn:
    session: ConversationSession
    text: str
    machine: DialogueStateMachine
    messages: list[str] = field(default_factory=list)
    booking_updated: bool = False

    def say(self, key: str, **values) -> None:
        self.messages.append(render(key, self.session.lang, **values))

    def move(self, trigger: DialogueTrigger) -> None:
        self.session.current_step = self.machine.transition(trigger)


class DialogueEngine:
    """
    Host-independent booking-modification dialogue.

    Args:
        bookings: Booking lookup/update adapter.
        events: Source of event documents for date windows.
        code_policy: Which booking-code shapes are accepted.
        clock: Returns today's calendar date.
        max_future_years: Soft limit used when no event window is known.
        hotel_name: Name used in greetings.
    """

    def __init__(
        self,
        bookings: BookingStore,
        events: EventStore,
        code_policy: BookingCodePolicy = BookingCodePolicy.STRICT,
        clock: Callable[[], date] = date.today,
        max_future_years: int = 2,
        hotel_name: str = DEFAULT_HOTEL_NAME,
    ) -> None:
        self._bookings = bookings
        self._events = events
        self._code_policy = BookingCodePolicy(code_policy)
        self._clock = clock
        self._max_future_years = max_future_years
        self._hotel_name = hotel_name
        self._handlers: dict[DialogueStep, Callable[[_Turn], None]] = {
            DialogueStep.LANGUAGE_SELECTION: self._on_language_selection,
            DialogueStep.ASK_BOOKING_ID: self._on_ask_booking_id,
            DialogueStep.SHOW_BOOKING_INFO: self._on_show_booking_info,
            DialogueStep.ASK_VERIFICATION: self._on_ask_verification,
            DialogueStep.VERIFY_DETAILS: self._on_verify_details,
            DialogueStep.EDIT_OPTIONS: self._on_edit_options,
            DialogueStep.EDIT_DATE: self._on_edit_date,
            DialogueStep.EDIT_TIME: self._on_edit_time,
            DialogueStep.ASK_CONTINUE_EDITING: self._on_ask_continue_editing,
            DialogueStep.CONFIRM_CHANGES: self._on_confirm_changes,
            DialogueStep.ASK_MORE_CHANGES: self._on_ask_more_changes,
            DialogueStep.COMPLETED: self._on_completed,
        }
        missing = set(DialogueStep) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for steps: {sorted(s.value for s in missing)}")

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def start(self, session: ConversationSession) -> DialogueReply:
        """Open a conversation: the language menu, or a greeting when the language is known."""
        if session.language is None:
            step = DialogueStep.LANGUAGE_SELECTION
            message = render("language_menu", Language.EN)
        else:
            step = DialogueStep.ASK_BOOKING_ID
            message = render("greeting", session.lang, hotel_name=self._hotel_name)
        session.current_step = step
        session.step_history = DialogueStateMachine(step).get_history()
        return DialogueReply(messages=[message], step=session.current_step)

    def handle(self, session: ConversationSession, text: str) -> DialogueReply:
        """Process one inbound message and advance the session."""
        turn = _Turn(
            session=session,
            text=(text or "").strip(),
            machine=DialogueStateMachine(session.current_step, session.step_history),
        )
        step_before = session.current_step

        if (
            turn.text.lower() in RESTART_COMMANDS
            and session.current_step != DialogueStep.LANGUAGE_SELECTION
        ):
            self._restart(turn, "restart")
        else:
            self._handlers[session.current_step](turn)

        if session.current_step != step_before:
            logger.info("Dialogue step %s -> %s", step_before.value, session.current_step.value)
            if turn.machine.is_terminal():
                logger.info("Conversation completed: %s", " -> ".join(turn.machine.get_step_trace()))
        return DialogueReply(
            messages=turn.messages,
            step=session.current_step,
            booking_updated=turn.booking_updated,
            completed=turn.machine.is_terminal(),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _restart(self, turn: _Turn, message_key: str) -> None:
        turn.session.reset_booking()
        turn.move(DialogueTrigger.RESTART)
        turn.say(message_key)

    def _require_booking(self, turn: _Turn) -> Optional[Booking]:
        booking = turn.session.bound_booking
        if booking is None:
            logger.warning("No booking bound at step %s; restarting", turn.session.current_step.value)
            self._restart(turn, "restart")
        return booking

    def _not_specified(self, turn: _Turn) -> str:
        return render("not_specified", turn.session.lang)

    def _resolve_window(self, session: ConversationSession) -> Optional[EventWindow]:
        """Find and cache the event window for the bound booking; None when unknown."""
        if session.event_window is not None:
            return session.event_window
        booking = session.bound_booking
        if booking is None or not booking.event_name:
            return None
        try:
            events = self._events.list_events()
        except Exception:
            logger.exception("Event lookup failed for %r", booking.event_name)
            return None
        session.event_window = match_event_window(booking.event_name, events)
        return session.event_window

    def _prompt_for_date(self, turn: _Turn, booking: Booking) -> None:
        turn.say(
            "current_date",
            booking_date=to_display_format(booking.booking_date) or self._not_specified(turn),
        )
        window = self._resolve_window(turn.session)
        if window is None:
            turn.say("date_prompt")
            return
        turn.say(
            "event_window",
            event_name=window.name,
            start_date=window.start_date.strftime(DISPLAY_DATE_FORMAT),
            end_date=window.end_date.strftime(DISPLAY_DATE_FORMAT),
        )
        turn.say("date_prompt_in_window")

    def _prompt_for_time(self, turn: _Turn, booking: Booking) -> None:
        turn.say("current_time", booking_time=booking.booking_time or self._not_specified(turn))
        turn.say("time_prompt")

    def _say_continue_menu(self, turn: _Turn, pending: PendingEdit) -> None:
        new_date = to_display_format(pending.new_date) if pending.new_date else None
        if pending.new_date and pending.new_time:
            turn.say("both_set_continue", new_date=new_date, new_time=pending.new_time)
        elif pending.new_date:
            turn.say("date_set_continue", new_date=new_date)
        else:
            turn.say("time_set_continue", new_time=pending.new_time)

    def _review(self, turn: _Turn, booking: Booking, pending: PendingEdit) -> None:
        lines = []
        if pending.new_date:
            lines.append(render("new_date_line", turn.session.lang,
                                new_date=to_display_format(pending.new_date)))
        if pending.new_time:
            lines.append(render("new_time_line", turn.session.lang, new_time=pending.new_time))
        turn.move(DialogueTrigger.REVIEW_CHANGES)
        turn.say("confirm_summary", booking_code=booking.booking_id, change_lines="\n".join(lines))

    def _pending(self, session: ConversationSession) -> PendingEdit:
        if session.pending_edit is None:
            session.pending_edit = PendingEdit()
        return session.pending_edit

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    def _on_language_selection(self, turn: _Turn) -> None:
        choice = turn.text.lower()
        if choice in ENGLISH_CHOICES:
            language = Language.EN
        elif choice in INDONESIAN_CHOICES:
            language = Language.ID
        else:
            turn.say("language_invalid")
            return
        turn.session.language = language
        turn.move(DialogueTrigger.LANGUAGE_CHOSEN)
        turn.say("greeting", hotel_name=self._hotel_name)

    def _on_ask_booking_id(self, turn: _Turn) -> None:
        code = extract_booking_code(turn.text, self._code_policy)
        if code is None:
            turn.say("invalid_code_format")
            return

        try:
            booking = self._bookings.find_by_code(code)
        except Exception:
            logger.exception("Booking lookup failed for %s", code)
            turn.say("lookup_failed")
            return

        if booking is None:
            logger.info("Booking %s not found", code)
            turn.say("booking_not_found", booking_code=code)
            return

        turn.session.reset_booking()
        turn.session.bound_booking = booking
        turn.move(DialogueTrigger.BOOKING_FOUND)
        not_specified = self._not_specified(turn)
        turn.say(
            "booking_summary",
            booking_code=booking.booking_id,
            customer_name=booking.customer_name or not_specified,
            event_name=booking.event_name or not_specified,
            booking_date=to_display_format(booking.booking_date) or not_specified,
            booking_time=booking.booking_time or not_specified,
            adults=booking.adults,
            children=booking.children,
            status=booking.status or not_specified,
        )

    def _on_show_booking_info(self, turn: _Turn) -> None:
        if turn.text == "1":
            booking = self._require_booking(turn)
            if booking is None:
                return
            if booking.status.lower() == CANCELLED_STATUS:
                logger.info("Booking %s is cancelled; edit refused", booking.booking_id)
                turn.session.reset_booking()
                turn.move(DialogueTrigger.START_OVER)
                turn.say("booking_cancelled")
                return
            turn.session.verification = Verification()
            turn.move(DialogueTrigger.PROCEED_TO_EDIT)
            turn.say("ask_email")
        elif turn.text == "2":
            turn.session.reset_booking()
            turn.move(DialogueTrigger.START_OVER)
            turn.say("restart")
        else:
            turn.say("show_info_invalid")

    def _on_ask_verification(self, turn: _Turn) -> None:
        if not looks_like_email(turn.text):
            turn.say("invalid_email")
            return
        turn.session.verification = Verification(email=turn.text)
        turn.move(DialogueTrigger.EMAIL_RECEIVED)
        turn.say("ask_phone")

    def _on_verify_details(self, turn: _Turn) -> None:
        booking = self._require_booking(turn)
        if booking is None:
            return
        email = turn.session.verification.email if turn.session.verification else None
        phone = turn.text

        if booking.email and booking.phone and email == booking.email and phone == booking.phone:
            turn.session.verification = Verification(email=email, phone=phone)
            turn.session.pending_edit = PendingEdit()
            turn.move(DialogueTrigger.VERIFIED)
            turn.say("verification_success")
            turn.say("edit_menu")
            return

        logger.warning(
            "Verification failed for booking %s (email %s)",
            booking.booking_id, mask_email(email or ""),
        )
        turn.session.verification = None
        turn.move(DialogueTrigger.VERIFICATION_FAILED)
        turn.say("verification_failed")

    def _on_edit_options(self, turn: _Turn) -> None:
        targets = {"1": EditTarget.DATE, "2": EditTarget.TIME, "3": EditTarget.BOTH}
        if turn.text == "4":
            turn.session.pending_edit = None
            turn.move(DialogueTrigger.EDIT_ABORTED)
            turn.say("no_changes")
            return
        target = targets.get(turn.text)
        if target is None:
            turn.say("edit_options_invalid")
            return

        booking = self._require_booking(turn)
        if booking is None:
            return
        turn.session.pending_edit = PendingEdit(edit_target=target)

        if target == EditTarget.TIME:
            turn.move(DialogueTrigger.CHOSE_TIME)
            self._prompt_for_time(turn, booking)
            return

        turn.move(DialogueTrigger.CHOSE_DATE)
        if target == EditTarget.BOTH:
            turn.say("both_intro")
        self._prompt_for_date(turn, booking)

    def _on_edit_date(self, turn: _Turn) -> None:
        day = parse_booking_date(turn.text)
        if day is None:
            turn.say("invalid_date_format")
            return

        window = turn.session.event_window
        check = check_booking_date(day, self._clock(), window, self._max_future_years)
        shown = day.strftime(DISPLAY_DATE_FORMAT)

        if not check.ok:
            if check.reason == DateRejection.PAST:
                turn.say("date_past", date=shown)
            elif check.reason == DateRejection.OUTSIDE_EVENT:
                turn.say(
                    "date_outside_event",
                    date=shown,
                    event_name=window.name,
                    start_date=window.start_date.strftime(DISPLAY_DATE_FORMAT),
                    end_date=window.end_date.strftime(DISPLAY_DATE_FORMAT),
                )
            else:
                turn.say("date_too_far", date=shown, years=self._max_future_years)
            return

        pending = self._pending(turn.session)
        pending.new_date = to_storage_format(day)
        if check.caveat:
            turn.say("date_caveat", date=shown)

        if pending.edit_target == EditTarget.BOTH and pending.new_time is None:
            turn.move(DialogueTrigger.DATE_ACCEPTED_CHAINED)
            turn.say("date_set_chained", new_date=shown)
            return
        turn.move(DialogueTrigger.DATE_ACCEPTED)
        self._say_continue_menu(turn, pending)

    def _on_edit_time(self, turn: _Turn) -> None:
        new_time = parse_booking_time(turn.text)
        if new_time is None:
            turn.say("invalid_time")
            return
        pending = self._pending(turn.session)
        pending.new_time = new_time
        turn.move(DialogueTrigger.TIME_ACCEPTED)
        self._say_continue_menu(turn, pending)

    def _on_ask_continue_editing(self, turn: _Turn) -> None:
        booking = self._require_booking(turn)
        if booking is None:
            return
        pending = self._pending(turn.session)

        if turn.text == "1":
            if pending.new_time is None:
                turn.move(DialogueTrigger.CONTINUE_WITH_TIME)
                self._prompt_for_time(turn, booking)
            elif pending.new_date is None:
                turn.move(DialogueTrigger.CONTINUE_WITH_DATE)
                self._prompt_for_date(turn, booking)
            else:
                self._review(turn, booking, pending)
        elif turn.text == "2":
            self._review(turn, booking, pending)
        elif turn.text == "3":
            turn.session.pending_edit = None
            turn.move(DialogueTrigger.EDIT_ABORTED)
            turn.say("changes_cancelled")
        else:
            turn.say("continue_invalid")

    def _on_confirm_changes(self, turn: _Turn) -> None:
        if turn.text == "2":
            turn.session.pending_edit = None
            turn.move(DialogueTrigger.EDIT_ABORTED)
            turn.say("changes_cancelled")
            return
        if turn.text != "1":
            turn.say("confirm_invalid")
            return

        booking = self._require_booking(turn)
        if booking is None:
            return
        pending = self._pending(turn.session)
        update = BookingUpdate(new_date=pending.new_date, new_time=pending.new_time)
        if update.is_empty():
            logger.warning("Nothing staged for booking %s; no write", booking.booking_id)
            turn.session.pending_edit = None
            turn.move(DialogueTrigger.EDIT_ABORTED)
            turn.say("no_changes")
            return

        try:
            self._bookings.update_schedule(booking, update)
        except Exception:
            logger.exception("Booking update failed for %s", booking.booking_id)
            turn.session.pending_edit = None
            turn.move(DialogueTrigger.SAVE_FAILED)
            turn.say("update_failed")
            return

        changes = {}
        if update.new_date is not None:
            changes["booking_date"] = update.new_date
        if update.new_time is not None:
            changes["booking_time"] = update.new_time
        updated = booking.model_copy(update=changes)
        turn.session.bound_booking = updated
        turn.session.pending_edit = None
        turn.booking_updated = True
        turn.move(DialogueTrigger.CHANGES_SAVED)
        turn.say(
            "update_success",
            booking_code=updated.booking_id,
            booking_date=to_display_format(updated.booking_date) or self._not_specified(turn),
            booking_time=updated.booking_time or self._not_specified(turn),
        )

    def _on_ask_more_changes(self, turn: _Turn) -> None:
        if turn.text == "1":
            turn.move(DialogueTrigger.MORE_CHANGES)
            turn.say("more_changes_prompt")
            turn.say("edit_menu")
        elif turn.text == "2":
            turn.move(DialogueTrigger.DONE)
            turn.say("goodbye", hotel_name=self._hotel_name)
        else:
            turn.say("more_changes_invalid")

    def _on_completed(self, turn: _Turn) -> None:
        turn.say("session_completed")
