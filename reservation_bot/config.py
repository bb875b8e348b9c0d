"""
Centralized configuration with environment variable overrides.

Credentials, storage backends, session lifetimes and dialogue policies are
configurable here. Nothing is hardcoded in the engine, stores or transports.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from reservation_bot.logging_context import LOG_DATE_FORMAT, LOG_FORMAT, install_sender_filter

load_dotenv()

logger = logging.getLogger(__name__)

SESSION_BACKENDS = ("memory", "redis")
STORAGE_BACKENDS = ("memory", "firestore")
CODE_POLICIES = ("strict", "loose")
LANGUAGES = ("en", "id")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _split_list(env_var: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(env_var, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class BusinessConfig:
    """Hotel identity used in greetings."""

    name: str = os.getenv("BUSINESS_NAME", "Makassar Phinisi Sea Side Hotel")


@dataclass(frozen=True)
class WhatsAppConfig:
    """WhatsApp Business Platform credentials and endpoint settings."""

    access_token: str = os.getenv("WHATSAPP_ACCESS_TOKEN", "")
    phone_number_id: str = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    verify_token: str = os.getenv("WHATSAPP_VERIFY_TOKEN", "")
    api_base_url: str = os.getenv("WHATSAPP_API_BASE_URL", "https://graph.facebook.com")
    api_version: str = os.getenv("WHATSAPP_API_VERSION", "v18.0")
    request_timeout_sec: float = _safe_float("WHATSAPP_REQUEST_TIMEOUT", "10.0")


@dataclass(frozen=True)
class SessionConfig:
    """Conversation session storage and lifetime."""

    backend: str = os.getenv("SESSION_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "")
    ttl_hours: int = _safe_int("SESSION_TTL_HOURS", "24")
    max_sessions: int = _safe_int("MAX_SESSIONS", "1000")
    key_prefix: str = os.getenv("SESSION_KEY_PREFIX", "conversation:")


@dataclass(frozen=True)
class DialogueConfig:
    """Dialogue policies that differ between hosts."""

    webhook_code_policy: str = os.getenv("WEBHOOK_BOOKING_CODE_POLICY", "loose")
    widget_code_policy: str = os.getenv("WIDGET_BOOKING_CODE_POLICY", "strict")
    max_future_years: int = _safe_int("MAX_FUTURE_YEARS", "2")
    default_language: str = os.getenv("DEFAULT_LANGUAGE", "en")


@dataclass(frozen=True)
class StorageConfig:
    """Booking and event collection backend."""

    backend: str = os.getenv("STORAGE_BACKEND", "memory")
    credentials_path: str = os.getenv("FIREBASE_CREDENTIALS", "")
    booking_collection: str = os.getenv("BOOKING_COLLECTION", "booking")
    event_collections: tuple[str, ...] = _split_list("EVENT_COLLECTIONS", "event,specialEvents")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    whatsapp: WhatsAppConfig = field(default_factory=WhatsAppConfig)
    sessions: SessionConfig = field(default_factory=SessionConfig)
    dialogue: DialogueConfig = field(default_factory=DialogueConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.sessions.backend not in SESSION_BACKENDS:
        raise ValueError(
            f"SESSION_BACKEND must be one of {SESSION_BACKENDS}, got {config.sessions.backend!r}"
        )
    if config.sessions.backend == "redis" and not config.sessions.redis_url:
        raise ValueError("REDIS_URL is required when SESSION_BACKEND is 'redis'")
    if config.sessions.ttl_hours < 1:
        raise ValueError(f"SESSION_TTL_HOURS must be >= 1, got {config.sessions.ttl_hours}")
    if config.sessions.max_sessions < 1:
        raise ValueError(f"MAX_SESSIONS must be >= 1, got {config.sessions.max_sessions}")

    if config.storage.backend not in STORAGE_BACKENDS:
        raise ValueError(
            f"STORAGE_BACKEND must be one of {STORAGE_BACKENDS}, got {config.storage.backend!r}"
        )

    for name, policy in [
        ("WEBHOOK_BOOKING_CODE_POLICY", config.dialogue.webhook_code_policy),
        ("WIDGET_BOOKING_CODE_POLICY", config.dialogue.widget_code_policy),
    ]:
        if policy not in CODE_POLICIES:
            raise ValueError(f"{name} must be one of {CODE_POLICIES}, got {policy!r}")

    if config.dialogue.default_language not in LANGUAGES:
        raise ValueError(
            f"DEFAULT_LANGUAGE must be one of {LANGUAGES}, got {config.dialogue.default_language!r}"
        )
    if config.dialogue.max_future_years < 1:
        raise ValueError(
            f"MAX_FUTURE_YEARS must be >= 1, got {config.dialogue.max_future_years}"
        )

    if config.whatsapp.request_timeout_sec <= 0:
        raise ValueError(
            "WHATSAPP_REQUEST_TIMEOUT must be > 0, "
            f"got {config.whatsapp.request_timeout_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    install_sender_filter(logging.getLogger().handlers)
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
