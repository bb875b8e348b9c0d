"""FastAPI application factory for the WhatsApp webhook host."""

from fastapi import FastAPI

from reservation_bot.api import webhook
from reservation_bot.config import settings


def create_app() -> FastAPI:
    app = FastAPI(title=f"{settings.business.name} booking assistant")
    app.include_router(webhook.router)
    return app
