"""Outbound reply shapes and their delivery through Telegram."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import telegram

logger = logging.getLogger(__name__)

BANNER = "Belaynish"
TELEGRAM_TEXT_LIMIT = 4096
TELEGRAM_CAPTION_LIMIT = 1024


class ReplyKind(StrEnum):
    TEXT = "text"
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    VOICE = "voice"


@dataclass(frozen=True)
class Reply:
    """What to send back: the text (or caption) plus an optional media payload.

    ``media`` is a remote URL or an inline buffer.
    """

    kind: ReplyKind
    text: str = ""
    media: str | bytes | None = None


def with_prefix(text: str) -> str:
    """Every text the bot sends starts with the banner."""
    return f"{BANNER}\n\n{text}"


def text_reply(text: str) -> Reply:
    return Reply(kind=ReplyKind.TEXT, text=with_prefix(text))


def media_reply(kind: ReplyKind, media: str | bytes, caption: str = "") -> Reply:
    return Reply(kind=kind, text=with_prefix(caption) if caption else "", media=media)


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


async def send_reply(message: telegram.Message, reply: Reply) -> None:
    """Deliver *reply* as a response to *message*."""
    caption = _truncate(reply.text, TELEGRAM_CAPTION_LIMIT) or None

    if reply.kind is ReplyKind.TEXT:
        await message.reply_text(_truncate(reply.text, TELEGRAM_TEXT_LIMIT))
    elif reply.kind is ReplyKind.PHOTO:
        await message.reply_photo(photo=reply.media, caption=caption)
    elif reply.kind is ReplyKind.VIDEO:
        await message.reply_video(video=reply.media, caption=caption)
    elif reply.kind is ReplyKind.DOCUMENT:
        await message.reply_document(document=reply.media, caption=caption)
    elif reply.kind is ReplyKind.VOICE:
        await message.reply_voice(voice=reply.media, caption=caption)
    else:
        msg = f"Unhandled reply kind: {reply.kind}"
        raise ValueError(msg)
