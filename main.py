"""
Booking assistant entry point.

Serves the WhatsApp webhook with uvicorn, or runs the offline console demo
for development.

Usage:
    Webhook server: python main.py serve [--host 0.0.0.0] [--port 8080]
    Console mode:   python main.py console
"""

import argparse
import logging

from reservation_bot.config import settings

logger = logging.getLogger(__name__)


def _run_server(host: str, port: int) -> None:
    """Start the FastAPI webhook host (requires WhatsApp credentials for replies)."""
    import uvicorn

    from reservation_bot.api.app import create_app

    logger.info("Starting webhook server on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level=settings.log_level.lower())


def _run_console_mode() -> None:
    """Start the offline console demo (no credentials required)."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    session.run()


def main() -> None:
    parser = argparse.ArgumentParser(description="Hotel booking assistant")
    parser.add_argument("mode", nargs="?", choices=["serve", "console"], default="serve")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    if args.mode == "console":
        _run_console_mode()
    else:
        _run_server(args.host, args.port)


if __name__ == "__main__":
    main()
