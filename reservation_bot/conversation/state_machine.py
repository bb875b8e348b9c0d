"""
Finite state machine for the booking-modification dialogue.

Defines the 12 dialogue steps and the explicit transitions between them.
Every conversation follows a deterministic path through the step graph;
re-prompts keep the current step and are not transitions.

Usage:
    sm = DialogueStateMachine(session.current_step, session.step_history)
    sm.transition(DialogueTrigger.BOOKING_FOUND)
    assert sm.current_step == DialogueStep.SHOW_BOOKING_INFO
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

MAX_HISTORY = 100


class DialogueStep(str, Enum):
    """All steps of a booking-modification conversation."""
    LANGUAGE_SELECTION = "language_selection"
    ASK_BOOKING_ID = "ask_booking_id"
    SHOW_BOOKING_INFO = "show_booking_info"
    ASK_VERIFICATION = "ask_verification"
    VERIFY_DETAILS = "verify_details"
    EDIT_OPTIONS = "edit_options"
    EDIT_DATE = "edit_date"
    EDIT_TIME = "edit_time"
    ASK_CONTINUE_EDITING = "ask_continue_editing"
    CONFIRM_CHANGES = "confirm_changes"
    ASK_MORE_CHANGES = "ask_more_changes"
    COMPLETED = "completed"


class DialogueTrigger(str, Enum):
    """Events that move the dialogue to another step."""
    LANGUAGE_CHOSEN = "language_chosen"
    BOOKING_FOUND = "booking_found"
    PROCEED_TO_EDIT = "proceed_to_edit"
    START_OVER = "start_over"
    EMAIL_RECEIVED = "email_received"
    VERIFIED = "verified"
    VERIFICATION_FAILED = "verification_failed"
    CHOSE_DATE = "chose_date"
    CHOSE_TIME = "chose_time"
    EDIT_ABORTED = "edit_aborted"
    DATE_ACCEPTED = "date_accepted"
    DATE_ACCEPTED_CHAINED = "date_accepted_chained"
    TIME_ACCEPTED = "time_accepted"
    CONTINUE_WITH_DATE = "continue_with_date"
    CONTINUE_WITH_TIME = "continue_with_time"
    REVIEW_CHANGES = "review_changes"
    CHANGES_SAVED = "changes_saved"
    SAVE_FAILED = "save_failed"
    MORE_CHANGES = "more_changes"
    DONE = "done"
    RESTART = "restart"


@dataclass
class Transition:
    """A single valid step transition."""
    from_step: DialogueStep
    to_step: DialogueStep
    trigger: DialogueTrigger


class StepEntry(BaseModel):
    """Recorded history entry for a step visit. Stored on the session between messages."""
    step: DialogueStep
    entered_at: datetime
    trigger: Optional[DialogueTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current step."""


class DialogueStateMachine:
    """
    Deterministic step machine controlling the dialogue.

    Every transition must be explicitly defined. A handler that fires a
    trigger with no matching transition is a bug and is rejected with an
    error listing what is allowed from the current step.
    """

    TRANSITIONS: list[Transition] = [
        # --- Language ---
        Transition(DialogueStep.LANGUAGE_SELECTION, DialogueStep.ASK_BOOKING_ID,
                   DialogueTrigger.LANGUAGE_CHOSEN),

        # --- Lookup ---
        Transition(DialogueStep.ASK_BOOKING_ID, DialogueStep.SHOW_BOOKING_INFO,
                   DialogueTrigger.BOOKING_FOUND),
        Transition(DialogueStep.SHOW_BOOKING_INFO, DialogueStep.ASK_VERIFICATION,
                   DialogueTrigger.PROCEED_TO_EDIT),
        Transition(DialogueStep.SHOW_BOOKING_INFO, DialogueStep.ASK_BOOKING_ID,
                   DialogueTrigger.START_OVER),

        # --- Identity verification gate ---
        Transition(DialogueStep.ASK_VERIFICATION, DialogueStep.VERIFY_DETAILS,
                   DialogueTrigger.EMAIL_RECEIVED),
        Transition(DialogueStep.VERIFY_DETAILS, DialogueStep.EDIT_OPTIONS,
                   DialogueTrigger.VERIFIED),
        Transition(DialogueStep.VERIFY_DETAILS, DialogueStep.ASK_VERIFICATION,
                   DialogueTrigger.VERIFICATION_FAILED),

        # --- Edit menu ---
        Transition(DialogueStep.EDIT_OPTIONS, DialogueStep.EDIT_DATE,
                   DialogueTrigger.CHOSE_DATE),
        Transition(DialogueStep.EDIT_OPTIONS, DialogueStep.EDIT_TIME,
                   DialogueTrigger.CHOSE_TIME),
        Transition(DialogueStep.EDIT_OPTIONS, DialogueStep.COMPLETED,
                   DialogueTrigger.EDIT_ABORTED),

        # --- Field collection ---
        Transition(DialogueStep.EDIT_DATE, DialogueStep.ASK_CONTINUE_EDITING,
                   DialogueTrigger.DATE_ACCEPTED),
        Transition(DialogueStep.EDIT_DATE, DialogueStep.EDIT_TIME,
                   DialogueTrigger.DATE_ACCEPTED_CHAINED),
        Transition(DialogueStep.EDIT_TIME, DialogueStep.ASK_CONTINUE_EDITING,
                   DialogueTrigger.TIME_ACCEPTED),

        # --- Continue or review ---
        Transition(DialogueStep.ASK_CONTINUE_EDITING, DialogueStep.EDIT_DATE,
                   DialogueTrigger.CONTINUE_WITH_DATE),
        Transition(DialogueStep.ASK_CONTINUE_EDITING, DialogueStep.EDIT_TIME,
                   DialogueTrigger.CONTINUE_WITH_TIME),
        Transition(DialogueStep.ASK_CONTINUE_EDITING, DialogueStep.CONFIRM_CHANGES,
                   DialogueTrigger.REVIEW_CHANGES),
        Transition(DialogueStep.ASK_CONTINUE_EDITING, DialogueStep.COMPLETED,
                   DialogueTrigger.EDIT_ABORTED),

        # --- Commit ---
        Transition(DialogueStep.CONFIRM_CHANGES, DialogueStep.ASK_MORE_CHANGES,
                   DialogueTrigger.CHANGES_SAVED),
        Transition(DialogueStep.CONFIRM_CHANGES, DialogueStep.COMPLETED,
                   DialogueTrigger.SAVE_FAILED),
        Transition(DialogueStep.CONFIRM_CHANGES, DialogueStep.COMPLETED,
                   DialogueTrigger.EDIT_ABORTED),

        # --- Post-commit ---
        Transition(DialogueStep.ASK_MORE_CHANGES, DialogueStep.EDIT_OPTIONS,
                   DialogueTrigger.MORE_CHANGES),
        Transition(DialogueStep.ASK_MORE_CHANGES, DialogueStep.COMPLETED,
                   DialogueTrigger.DONE),
    ] + [
        # --- Global restart ---
        Transition(step, DialogueStep.ASK_BOOKING_ID, DialogueTrigger.RESTART)
        for step in DialogueStep
        if step != DialogueStep.LANGUAGE_SELECTION
    ]

    def __init__(
        self,
        initial: DialogueStep = DialogueStep.LANGUAGE_SELECTION,
        history: Optional[list[StepEntry]] = None,
    ) -> None:
        """
        Args:
            initial: Step to resume from.
            history: Step history to append to in place, usually the
                session's own list. Seeded with the initial step when empty.
        """
        self._current_step = initial
        self._history: list[StepEntry] = history if history is not None else []
        if not self._history:
            self._history.append(StepEntry(step=initial, entered_at=datetime.now(timezone.utc)))

    @property
    def current_step(self) -> DialogueStep:
        return self._current_step

    def transition(self, trigger: DialogueTrigger) -> DialogueStep:
        """
        Execute a step transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new dialogue step.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_step == self._current_step and t.trigger == trigger:
                old_step = self._current_step
                self._current_step = t.to_step

                self._history.append(StepEntry(
                    step=self._current_step,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                if len(self._history) > MAX_HISTORY:
                    del self._history[:-MAX_HISTORY]

                logger.debug(
                    "Step transition: %s -> %s (trigger: %s)",
                    old_step.value, self._current_step.value, trigger.value,
                )
                return self._current_step

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_step.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[DialogueTrigger]:
        """Return all triggers valid from the current step."""
        return [t.trigger for t in self.TRANSITIONS if t.from_step == self._current_step]

    def get_history(self) -> list[StepEntry]:
        """Return the full step transition history."""
        return list(self._history)

    def get_step_trace(self) -> list[str]:
        """Return ordered list of step names visited."""
        return [entry.step.value for entry in self._history]

    def is_terminal(self) -> bool:
        """Check if the dialogue has reached its terminal step."""
        return self._current_step == DialogueStep.COMPLETED
