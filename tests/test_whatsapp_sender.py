"""Tests for the outbound WhatsApp sender."""

import requests

from reservation_bot.config import WhatsAppConfig
from reservation_bot.tools.whatsapp import WhatsAppSender


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "{}") -> None:
        self.status_code = status_code
        self.text = text


class FakeHttp:
    def __init__(self, response=None, error=None) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def _config(**overrides) -> WhatsAppConfig:
    values = dict(
        access_token="token-abc",
        phone_number_id="1098765",
        verify_token="secret",
        api_base_url="https://graph.facebook.com",
        api_version="v18.0",
        request_timeout_sec=5.0,
    )
    values.update(overrides)
    return WhatsAppConfig(**values)


class TestSendText:
    def test_posts_text_message(self):
        http = FakeHttp()
        assert WhatsAppSender(_config(), http=http).send_text("6281234567890", "Hello")

        call = http.calls[0]
        assert call["url"] == "https://graph.facebook.com/v18.0/1098765/messages"
        assert call["headers"]["Authorization"] == "Bearer token-abc"
        assert call["json"] == {
            "messaging_product": "whatsapp",
            "to": "6281234567890",
            "type": "text",
            "text": {"body": "Hello"},
        }
        assert call["timeout"] == 5.0

    def test_missing_token_skips_call(self):
        http = FakeHttp()
        assert not WhatsAppSender(_config(access_token=""), http=http).send_text("6281", "Hi")
        assert http.calls == []

    def test_missing_phone_number_id_skips_call(self):
        http = FakeHttp()
        assert not WhatsAppSender(_config(phone_number_id=""), http=http).send_text("6281", "Hi")
        assert http.calls == []

    def test_api_error_returns_false(self):
        http = FakeHttp(response=FakeResponse(401, '{"error": "invalid token"}'))
        assert not WhatsAppSender(_config(), http=http).send_text("6281", "Hi")

    def test_network_error_returns_false(self):
        http = FakeHttp(error=requests.ConnectionError("unreachable"))
        assert not WhatsAppSender(_config(), http=http).send_text("6281", "Hi")

    def test_base_url_trailing_slash(self):
        sender = WhatsAppSender(_config(api_base_url="http://localhost:9000/"))
        assert sender.messages_url == "http://localhost:9000/v18.0/1098765/messages"
