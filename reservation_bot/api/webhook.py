"""
WhatsApp Business webhook.

GET answers the platform's subscription challenge. POST receives message
deliveries, runs each text through the conversation service and sends the
replies back through the WhatsApp sender.
"""

import logging
from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from reservation_bot.config import settings
from reservation_bot.conversation.engine import DialogueEngine
from reservation_bot.conversation.messages import render
from reservation_bot.conversation.service import ConversationService
from reservation_bot.conversation.session import build_session_store
from reservation_bot.logging_context import set_sender_id
from reservation_bot.tools.firestore_store import build_stores
from reservation_bot.tools.whatsapp import WhatsAppSender
from reservation_bot.utils import mask_phone

logger = logging.getLogger(__name__)

router = APIRouter()

BUSINESS_ACCOUNT_OBJECT = "whatsapp_business_account"
MESSAGES_FIELD = "messages"


@lru_cache
def get_conversation_service() -> ConversationService:
    bookings, events = build_stores(settings.storage)
    engine = DialogueEngine(
        bookings,
        events,
        code_policy=settings.dialogue.webhook_code_policy,
        max_future_years=settings.dialogue.max_future_years,
        hotel_name=settings.business.name,
    )
    return ConversationService(engine, build_session_store(settings.sessions))


@lru_cache
def get_message_sender() -> WhatsAppSender:
    return WhatsAppSender(settings.whatsapp)


def get_verify_token() -> str:
    return settings.whatsapp.verify_token


@router.get("/webhooks/whatsapp")
def verify_webhook(
    hub_mode: Optional[str] = Query(default=None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
    verify_token: str = Depends(get_verify_token),
):
    if not verify_token:
        logger.error("WHATSAPP_VERIFY_TOKEN is not set; cannot verify webhook")
        return PlainTextResponse("Server not configured", status_code=500)

    if hub_mode == "subscribe" and hub_verify_token == verify_token:
        logger.info("Webhook verified")
        return PlainTextResponse(hub_challenge or "")

    logger.warning("Webhook verification rejected (mode=%s)", hub_mode)
    return PlainTextResponse("Forbidden", status_code=403)


def _handle_message(message: dict[str, Any], service: ConversationService, sender: WhatsAppSender) -> None:
    phone = message.get("from")
    if not phone:
        logger.warning("Message without sender skipped")
        return
    set_sender_id(mask_phone(phone))

    if message.get("type") != "text":
        logger.info("Non-text message (%s) received", message.get("type"))
        sender.send_text(phone, render("text_only", service.session_language(phone)))
        return

    text = (message.get("text") or {}).get("body", "")
    reply = service.handle_incoming(phone, text)
    for body in reply.messages:
        sender.send_text(phone, body)


def _dicts(items: Any) -> list[dict[str, Any]]:
    """Dict items of a JSON array; anything malformed is dropped."""
    if not isinstance(items, list):
        return []
    skipped = [item for item in items if not isinstance(item, dict)]
    if skipped:
        logger.warning("Skipping %d malformed webhook item(s)", len(skipped))
    return [item for item in items if isinstance(item, dict)]


def process_payload(payload: dict[str, Any], service: ConversationService, sender: WhatsAppSender) -> int:
    """Dispatch every message in a delivery. Returns how many were handled."""
    handled = 0
    for entry in _dicts(payload.get("entry")):
        for change in _dicts(entry.get("changes")):
            if change.get("field", MESSAGES_FIELD) != MESSAGES_FIELD:
                continue
            value = change.get("value")
            if not isinstance(value, dict):
                continue
            for message in _dicts(value.get("messages")):
                try:
                    _handle_message(message, service, sender)
                    handled += 1
                except Exception:
                    logger.exception("Failed to process message %s", message.get("id"))
    return handled


@router.post("/webhooks/whatsapp")
async def receive_webhook(
    request: Request,
    service: ConversationService = Depends(get_conversation_service),
    sender: WhatsAppSender = Depends(get_message_sender),
):
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return PlainTextResponse("Bad Request", status_code=400)

    if not isinstance(payload, dict) or payload.get("object") != BUSINESS_ACCOUNT_OBJECT:
        return PlainTextResponse("Not Found", status_code=404)

    handled = await run_in_threadpool(process_payload, payload, service, sender)
    logger.debug("Webhook delivery processed %d message(s)", handled)
    return PlainTextResponse("EVENT_RECEIVED")


@router.get("/health")
def health():
    return {"status": "ok"}
