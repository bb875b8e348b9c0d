"""Sender correlation logging context.

Every log line carries the masked id of the guest whose message is being
handled, so one conversation can be followed across the webhook, the
conversation service and the dialogue engine. Hosts set the id once per
inbound message; the filter sits on the output handlers, so records from
any logger (ours or a library's) get the attribute before formatting.

Usage:
    from reservation_bot.logging_context import set_sender_id

    set_sender_id(mask_phone("6281234567890"))
    logger.info("Processing message")
    # 2025-01-05 09:30:00 [*********7890] [reservation_bot.x] INFO: Processing message
"""

import logging
from contextvars import ContextVar
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(sender_id)s] [%(name)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
NO_SENDER = "-"

_sender_id: ContextVar[str] = ContextVar("sender_id", default=NO_SENDER)


def set_sender_id(sender_id: Optional[str]) -> None:
    """Set the correlation id for the current context."""
    _sender_id.set(sender_id or NO_SENDER)


class SenderIdFilter(logging.Filter):
    """Injects sender_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.sender_id = _sender_id.get()  # type: ignore[attr-defined]
        return True


def install_sender_filter(handlers: Iterable[logging.Handler]) -> None:
    """Attach a SenderIdFilter to each handler that does not have one yet."""
    for handler in handlers:
        if not any(isinstance(f, SenderIdFilter) for f in handler.filters):
            handler.addFilter(SenderIdFilter())
