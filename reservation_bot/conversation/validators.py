"""
Input validators for booking codes, dates and times.

Dates are accepted as DD-MM-YYYY or YYYY-MM-DD, stored as YYYY-MM-DD and
shown to guests as DD-MM-YYYY. All comparisons are by calendar date only.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from reservation_bot.schemas.booking_schema import EventWindow

logger = logging.getLogger(__name__)

BOOKING_CODE_LENGTH = 6

STRICT_CODE_PATTERN = re.compile(r"^[A-Z0-9]+$", re.IGNORECASE)
LOOSE_CODE_PATTERN = re.compile(
    r"\b(?:TES\d{2,4}T|[A-Z]{2,3}-[A-Z0-9]{3,6}|[A-Z]{2,3}\d{3,6}[A-Z]?)\b",
    re.IGNORECASE,
)

DISPLAY_DATE_PATTERN = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")
ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
SLASH_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")

MAX_HOUR = 23
MAX_MINUTE = 59


class BookingCodePolicy(str, Enum):
    """Which booking-code shapes a host accepts."""

    STRICT = "strict"
    LOOSE = "loose"


class DateRejection(str, Enum):
    PAST = "past"
    OUTSIDE_EVENT = "outside_event"
    TOO_FAR = "too_far"


@dataclass(frozen=True)
class DateCheck:
    """Outcome of checking a proposed booking date."""

    ok: bool
    reason: Optional[DateRejection] = None
    caveat: bool = False


def is_strict_booking_code(text: str) -> bool:
    """Exactly six letters or digits, case-insensitive."""
    return len(text) == BOOKING_CODE_LENGTH and bool(STRICT_CODE_PATTERN.match(text))


def extract_booking_code(text: str, policy: BookingCodePolicy) -> Optional[str]:
    """Return the upper-cased booking code found in text, or None."""
    candidate = text.strip()
    if is_strict_booking_code(candidate):
        return candidate.upper()
    if policy == BookingCodePolicy.LOOSE:
        match = LOOSE_CODE_PATTERN.search(candidate)
        if match:
            return match.group(0).upper()
    return None


def parse_booking_date(text: str) -> Optional[date]:
    """Parse DD-MM-YYYY or YYYY-MM-DD into a calendar date; None when invalid."""
    text = text.strip()
    match = DISPLAY_DATE_PATTERN.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
    else:
        match = ISO_DATE_PATTERN.match(text)
        if not match:
            return None
        year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def to_storage_format(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def to_display_format(value: str) -> str:
    """Render a stored date as DD-MM-YYYY; unrecognised strings pass through.

    Older documents hold DD/MM/YYYY or DD-MM-YYYY, so those are normalised first.
    """
    if not value:
        return value
    match = ISO_DATE_PATTERN.match(format_date_for_storage(value))
    if not match:
        return value
    year, month, day = match.groups()
    return f"{day}-{month}-{year}"


def format_date_for_storage(text: str) -> str:
    """Convert DD-MM-YYYY or DD/MM/YYYY to YYYY-MM-DD; anything else passes through."""
    text = text.strip()
    match = SLASH_DATE_PATTERN.match(text)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    match = DISPLAY_DATE_PATTERN.match(text)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month}-{day}"
    return text


def parse_booking_time(text: str) -> Optional[str]:
    """Validate a strict 24-hour HH:MM time."""
    text = text.strip()
    match = TIME_PATTERN.match(text)
    if not match:
        return None
    hours, minutes = (int(part) for part in match.groups())
    if hours > MAX_HOUR or minutes > MAX_MINUTE:
        return None
    return text


def looks_like_email(text: str) -> bool:
    return "@" in text


def coerce_calendar_date(value: Any) -> Optional[date]:
    """Turn a stored event bound (ISO string, date or datetime) into a calendar date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            return parse_booking_date(raw)
    logger.debug("Unsupported date value type: %s", type(value).__name__)
    return None


def _add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # 29 February
        return day.replace(year=day.year + years, day=28)


def check_booking_date(
    candidate: date,
    today: date,
    window: Optional[EventWindow],
    max_future_years: int = 2,
) -> DateCheck:
    """
    Apply the booking date rules in order.

    A date before today is always rejected. With an event window the date
    must lie inside it (bounds inclusive). Without one, dates more than
    max_future_years ahead are rejected and the rest pass with a caveat.
    """
    if candidate < today:
        return DateCheck(ok=False, reason=DateRejection.PAST)
    if window is not None:
        if not window.contains(candidate):
            return DateCheck(ok=False, reason=DateRejection.OUTSIDE_EVENT)
        return DateCheck(ok=True)
    if candidate > _add_years(today, max_future_years):
        return DateCheck(ok=False, reason=DateRejection.TOO_FAR)
    return DateCheck(ok=True, caveat=True)
