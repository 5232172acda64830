"""Routes a parsed ``/ai`` command to its capability and shapes the reply."""

from __future__ import annotations

import logging
from typing import assert_never

from src import providers
from src.bot.commands import NO_MEDIA_PROVIDER, Command, Mode, help_text
from src.bot.replies import Reply, ReplyKind, media_reply, text_reply
from src.config import settings
from src.llm.client import generate_response
from src.memory.store import ConversationStore
from src.providers.base import (
    Failure,
    MediaOp,
    MediaRequest,
    MediaResult,
    ProviderResult,
    TextResult,
)
from src.providers.replicate import NamedModelRequest

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 200

# Outbound shape per media op, decided by the op rather than the payload.
PHOTO_OPS = {MediaOp.TEXT_TO_IMAGE, MediaOp.FLUX, MediaOp.FIX_FACE}
TEXT_OPS = {MediaOp.CAPTION}
DOCUMENT_OPS = {MediaOp.RECON_3D}


def _reason(result: Failure, default: str) -> str:
    """The most specific failure reason, truncated for display."""
    reason = result.attempts[-1].reason if result.attempts else default
    return reason[:MAX_REASON_LENGTH]


def _text_or(result: ProviderResult, default: str) -> Reply:
    if isinstance(result, TextResult):
        return text_reply(result.text)
    if isinstance(result, Failure):
        return text_reply(_reason(result, default))
    return text_reply(default)


async def dispatch(command: Command, conversation_id: str | int) -> Reply:
    """Run *command* for the caller identified by *conversation_id*."""
    match command.mode:
        case Mode.HELP:
            return text_reply(help_text(settings.memory_ttl_seconds))
        case Mode.RESET:
            await ConversationStore.get().clear(conversation_id)
            return text_reply("Memory cleared. Starting fresh.")
        case Mode.CHAT:
            answer = await generate_response(conversation_id, command.text, command.model_key)
            return text_reply(answer)
        case Mode.WIKI:
            result = await providers.resolve([providers.wikipedia], command.text)
            return _text_or(result, "Wikipedia lookup failed")
        case Mode.DUCK:
            result = await providers.resolve([providers.duckduckgo], command.text)
            return _text_or(result, "DuckDuckGo lookup failed")
        case Mode.TRANSLATE:
            return text_reply(await providers.translate(command.text, command.target))
        case Mode.TTS:
            return await _speak(command.text)
        case Mode.MEDIA:
            return await _media(command)
        case Mode.REPLICATE:
            return await _replicate(command)
        case _:
            assert_never(command.mode)


async def _speak(text: str) -> Reply:
    result = await providers.resolve(providers.SPEECH_ADAPTERS, text)
    if isinstance(result, MediaResult):
        return media_reply(ReplyKind.VOICE, result.data or result.url)
    if isinstance(result, Failure) and result.attempts:
        return text_reply(f"TTS error: {_reason(result, '')}")
    return text_reply("No TTS provider configured.")


async def _media(command: Command) -> Reply:
    op = command.op
    if op is None or op not in providers.MEDIA_ADAPTERS:
        return text_reply(NO_MEDIA_PROVIDER)

    request = MediaRequest(op=op, payload=command.text)
    result = await providers.resolve([providers.MEDIA_ADAPTERS[op]], request)

    if isinstance(result, Failure):
        if not result.attempts:
            return text_reply(NO_MEDIA_PROVIDER)
        return text_reply(f"Media error: {_reason(result, '')}")

    if op in TEXT_OPS or isinstance(result, TextResult):
        text = result.text if isinstance(result, TextResult) else (result.url or "")
        return text_reply(text)

    media = result.url or result.data
    if op in PHOTO_OPS:
        return media_reply(ReplyKind.PHOTO, media, caption=command.text)
    if op in DOCUMENT_OPS:
        return media_reply(ReplyKind.DOCUMENT, media)
    return media_reply(ReplyKind.VIDEO, media, caption=command.text)


async def _replicate(command: Command) -> Reply:
    if not settings.lookup(command.key_name):
        return text_reply(f"No replicate model found in env as {command.key_name}")

    request = NamedModelRequest(key_name=command.key_name, prompt=command.text)
    result = await providers.resolve([providers.replicate_model], request)

    if isinstance(result, TextResult):
        return text_reply(result.text)
    if isinstance(result, Failure) and result.attempts:
        return text_reply(f"Replicate error: {_reason(result, '')}")
    return text_reply("Replicate is not configured.")
