"""Telegram handlers for the unified /ai command."""

import contextlib
import logging

from telegram import Update
from telegram.ext import ContextTypes

from src.bot.commands import UsageError, parse_command
from src.bot.replies import send_reply, text_reply
from src.bot.router import dispatch

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 200


async def handle_ai(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /ai <mode> <input>.

    Malformed commands get a usage hint without touching any provider.
    Anything unexpected is logged and reported as a short error message;
    one bad request never takes the bot down.
    """
    message = update.effective_message
    if message is None or update.effective_user is None:
        return

    user_id = update.effective_user.id
    args = list(context.args or [])
    logger.info("/ai from %s: %s", user_id, " ".join(args)[:80])

    try:
        command = parse_command(args)
    except UsageError as exc:
        await message.reply_text(text_reply(str(exc)).text)
        return

    try:
        reply = await dispatch(command, user_id)
        await send_reply(message, reply)
    except Exception as exc:
        logger.exception("AI handler error (mode=%s)", command.mode)
        with contextlib.suppress(Exception):
            await message.reply_text(text_reply(f"Error: {str(exc)[:MAX_ERROR_LENGTH]}").text)


async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors raised outside the /ai handler (network hiccups, polling)."""
    logger.error("Telegram update %s caused an error", update, exc_info=context.error)
