"""
Offline console demo: runs the booking-modification chat in a terminal.

Drives the same chat widget the website embeds, against the seeded
in-memory booking and event stores. No Firebase, no WhatsApp, no network.
The demo clock is pinned to the seed data's season so the event window
rules behave as they would for a real guest.

Usage:
    python console_demo.py
    python console_demo.py --scenario wrong_phone
    python console_demo.py --scenario edit_both
"""

import argparse
from datetime import date

from reservation_bot.config import settings
from reservation_bot.conversation.engine import DialogueEngine
from reservation_bot.tools.bookings import InMemoryBookingStore, InMemoryEventStore
from reservation_bot.transports.widget import ChatWidget, Role

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_TODAY = date(2025, 1, 5)


class ConsoleSession:
    """A chat widget session rendered to stdout."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "edit_time": ["BUP001", "1", "a@x.com", "08123", "2", "14:30", "2", "1", "2"],
        "wrong_phone": ["BUP001", "1", "a@x.com", "00000", "a@x.com", "08123", "4"],
        "edit_both": [
            "bup001", "1", "a@x.com", "08123", "3",
            "09-01-2025", "21-01-2025", "18-01-2025", "20:15", "1", "1", "2",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self) -> None:
        self.bookings = InMemoryBookingStore()
        self.engine = DialogueEngine(
            self.bookings,
            InMemoryEventStore(),
            code_policy=settings.dialogue.widget_code_policy,
            clock=lambda: DEMO_TODAY,
            max_future_years=settings.dialogue.max_future_years,
            hotel_name=settings.business.name,
        )
        self.widget = ChatWidget(self.engine, language=settings.dialogue.default_language)

    def bot_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[Assistant]{RESET} {GREEN}{text}{RESET}\n")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  BOOKING ASSISTANT - {title}{RESET}")
        print(f"{BOLD}  Hotel: {settings.business.name}{RESET}")
        print(f"{BOLD}  Demo date: {DEMO_TODAY.isoformat()}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Conversation ended at step: {self.widget.step.value}{RESET}")
        print(f"{DIM}  Path: {' -> '.join(self.widget.step_trace)}{RESET}")
        for doc_id, fields in self.bookings.writes:
            written = {k: v for k, v in fields.items() if k != "updatedAt"}
            print(f"{DIM}  Write to {doc_id}: {written}{RESET}")
        if not self.bookings.writes:
            print(f"{DIM}  No booking writes.{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def _exchange(self, text: str) -> None:
        for message in self.widget.send(text):
            self.bot_say(message.content)
        self.system_log(f"Step: {self.widget.step.value}")

    def _open(self) -> None:
        for message in self.widget.open():
            if message.role == Role.BOT:
                self.bot_say(message.content)

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        self._open()
        for step in steps:
            if self.widget.is_completed:
                break
            print(f"{BLUE}[Guest] {RESET}{step}\n")
            self._exchange(step)
        self._summary()

    def run(self) -> None:
        self._banner("Console Demo (type 'quit' to exit)")
        self._open()

        while not self.widget.is_completed:
            user_input = input(f"{BLUE}[Guest] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.bot_say("That message is too long. Please keep it short.")
                continue
            print()
            self._exchange(user_input)

        self._summary()
        self.widget.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
