"""Tests for configuration loading and validation."""

import pytest

from reservation_bot.config import (
    AppConfig,
    DialogueConfig,
    SessionConfig,
    StorageConfig,
    WhatsAppConfig,
    _safe_int,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_unknown_session_backend(self):
        config = AppConfig(sessions=SessionConfig(backend="memcached"))
        with pytest.raises(ValueError, match="SESSION_BACKEND"):
            _validate_config(config)

    def test_redis_needs_url(self):
        config = AppConfig(sessions=SessionConfig(backend="redis", redis_url=""))
        with pytest.raises(ValueError, match="REDIS_URL"):
            _validate_config(config)

    def test_redis_with_url_ok(self):
        _validate_config(AppConfig(sessions=SessionConfig(backend="redis", redis_url="redis://localhost:6379")))

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValueError, match="SESSION_TTL_HOURS"):
            _validate_config(AppConfig(sessions=SessionConfig(ttl_hours=0)))

    def test_max_sessions_must_be_positive(self):
        with pytest.raises(ValueError, match="MAX_SESSIONS"):
            _validate_config(AppConfig(sessions=SessionConfig(max_sessions=0)))

    def test_unknown_storage_backend(self):
        with pytest.raises(ValueError, match="STORAGE_BACKEND"):
            _validate_config(AppConfig(storage=StorageConfig(backend="postgres")))

    def test_unknown_code_policy(self):
        with pytest.raises(ValueError, match="WIDGET_BOOKING_CODE_POLICY"):
            _validate_config(AppConfig(dialogue=DialogueConfig(widget_code_policy="fuzzy")))

    def test_unknown_language(self):
        with pytest.raises(ValueError, match="DEFAULT_LANGUAGE"):
            _validate_config(AppConfig(dialogue=DialogueConfig(default_language="fr")))

    def test_future_years_must_be_positive(self):
        with pytest.raises(ValueError, match="MAX_FUTURE_YEARS"):
            _validate_config(AppConfig(dialogue=DialogueConfig(max_future_years=0)))

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="WHATSAPP_REQUEST_TIMEOUT"):
            _validate_config(AppConfig(whatsapp=WhatsAppConfig(request_timeout_sec=0)))


class TestDefaults:
    def test_policies_differ_per_host(self):
        dialogue = DialogueConfig()
        assert dialogue.webhook_code_policy == "loose"
        assert dialogue.widget_code_policy == "strict"

    def test_event_collections(self):
        assert StorageConfig().event_collections == ("event", "specialEvents")

    def test_graph_api_version(self):
        assert WhatsAppConfig().api_version == "v18.0"


class TestSafeInt:
    def test_bad_value_names_variable(self, monkeypatch):
        monkeypatch.setenv("SOME_LIMIT", "lots")
        with pytest.raises(ValueError, match="SOME_LIMIT"):
            _safe_int("SOME_LIMIT", "1")

    def test_default_used(self, monkeypatch):
        monkeypatch.delenv("SOME_LIMIT", raising=False)
        assert _safe_int("SOME_LIMIT", "7") == 7
