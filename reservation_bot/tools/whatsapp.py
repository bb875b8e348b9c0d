"""
Outbound WhatsApp text messages via the WhatsApp Business Cloud API.

The sender never raises: missing credentials and HTTP or network errors
are logged and reported as a False return, so one failed reply never
aborts processing of the rest of a webhook delivery.
"""

import logging

import requests

from reservation_bot.utils import mask_phone

logger = logging.getLogger(__name__)


class WhatsAppSender:
    """Sends plain-text messages from the configured business phone number."""

    def __init__(self, config, http=requests) -> None:
        self._config = config
        self._http = http

    @property
    def messages_url(self) -> str:
        cfg = self._config
        return f"{cfg.api_base_url.rstrip('/')}/{cfg.api_version}/{cfg.phone_number_id}/messages"

    def send_text(self, to: str, body: str) -> bool:
        """Send one text message. Returns True when the API accepted it."""
        if not self._config.access_token or not self._config.phone_number_id:
            logger.error("WhatsApp credentials not configured; message to %s dropped", mask_phone(to))
            return False

        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": body},
        }
        headers = {
            "Authorization": f"Bearer {self._config.access_token}",
            "Content-Type": "application/json",
        }

        try:
            response = self._http.post(
                self.messages_url,
                json=payload,
                headers=headers,
                timeout=self._config.request_timeout_sec,
            )
        except requests.RequestException:
            logger.exception("WhatsApp request to %s failed", mask_phone(to))
            return False

        if response.status_code >= 400:
            logger.error(
                "WhatsApp API error %s for %s: %s",
                response.status_code, mask_phone(to), response.text,
            )
            return False

        logger.info("WhatsApp message sent to %s", mask_phone(to))
        return True
