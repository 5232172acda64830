"""Telegram application factory."""

from __future__ import annotations

import logging

from telegram.ext import Application, CommandHandler

from src.bot.handlers import handle_ai, handle_error
from src.config import settings
from src.memory.store import ConversationStore

logger = logging.getLogger(__name__)


async def _post_init(app: Application) -> None:
    """Called after the Application is fully initialized (event loop running)."""
    store = ConversationStore.get()
    logger.info("Conversation memory: %s, ttl=%ss", store.mode, store.ttl)


def create_app() -> Application:
    """Build and configure the Telegram application."""
    app = Application.builder().token(settings.telegram_token).concurrent_updates(True).build()

    app.add_handler(CommandHandler("ai", handle_ai))
    app.add_error_handler(handle_error)

    app.post_init = _post_init

    return app
