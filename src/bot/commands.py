"""Parsing for the unified ``/ai <mode> <input>`` command."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from src.llm.models import DEFAULT_MODEL, ModelKey, split_model_key
from src.providers.base import MediaOp
from src.providers.translate import DEFAULT_TARGET

USAGE = "Usage: /ai <mode> <input>\nModes: chat|wiki|duck|translate|media|tts|replicate"
MISSING_INPUT = "Please provide input. Example: /ai chat Explain Newton laws"
MISSING_PROMPT = "Please provide a prompt for chat."
UNKNOWN_MODE = "Unknown mode. Type /ai help for usage."
MEDIA_USAGE = "Usage: /ai media <mode> <input>. Type /ai help for modes."
NO_MEDIA_PROVIDER = "No provider configured for that media mode."
REPLICATE_USAGE = "Usage: /ai replicate <env_model_variable> <prompt>"

MAX_LANG_CODE_LENGTH = 3

HELP_TEXT = """/ai <mode> <input>

Chat (English default):
  /ai chat [model] <prompt>  -> model optional ({models}). Default {default}
Search:
  /ai wiki <topic>  -> Wikipedia summary
  /ai duck <query>  -> DuckDuckGo instant answer
Translate:
  /ai translate [lang] <text>  -> translate to English, or to lang (e.g. 'am' for Amharic)
Media (Runway / Replicate):
  /ai media <mode> <input>
    modes: {media_ops}
TTS:
  /ai tts <text>  -> ElevenLabs or Replicate TTS
Replicate chat:
  /ai replicate <model_variable> <prompt>  -> call a Replicate model configured as REPLICATE_*
Memory:
  /ai reset  -> forget this conversation
  Conversation memory is kept ~{ttl} seconds."""


class Mode(StrEnum):
    HELP = "help"
    CHAT = "chat"
    WIKI = "wiki"
    DUCK = "duck"
    TRANSLATE = "translate"
    TTS = "tts"
    MEDIA = "media"
    REPLICATE = "replicate"
    RESET = "reset"


# Modes that need no input after the keyword.
_BARE_MODES = {Mode.HELP, Mode.RESET}


class UsageError(ValueError):
    """The command is malformed; ``str(exc)`` is the reply for the user."""


@dataclass(frozen=True)
class Command:
    """A parsed ``/ai`` command.

    Attributes:
        mode: Which capability to run.
        text: The free-text input (prompt, topic, query, text to speak/translate,
            or the media payload).
        model_key: Chat model key (chat only).
        target: Target language code (translate only).
        op: Media operation (media only).
        key_name: Configuration key naming a Replicate model (replicate only).
    """

    mode: Mode
    text: str = ""
    model_key: ModelKey = DEFAULT_MODEL
    target: str = DEFAULT_TARGET
    op: MediaOp | None = None
    key_name: str = ""


def help_text(ttl: int) -> str:
    return HELP_TEXT.format(
        models=", ".join(ModelKey),
        default=DEFAULT_MODEL,
        media_ops=" ".join(MediaOp),
        ttl=ttl,
    )


def parse_command(args: list[str]) -> Command:
    """Parse the words after ``/ai``.

    Raises:
        UsageError: with the fixed message to send back, for empty input,
            unknown modes, unknown media ops and missing arguments.
    """
    if not args:
        raise UsageError(USAGE)

    try:
        mode = Mode(args[0].lower())
    except ValueError:
        raise UsageError(UNKNOWN_MODE) from None

    rest = " ".join(args[1:]).strip()
    if not rest and mode not in _BARE_MODES:
        raise UsageError(MISSING_INPUT)

    if mode is Mode.CHAT:
        model_key, prompt = split_model_key(rest)
        if not prompt:
            raise UsageError(MISSING_PROMPT)
        return Command(mode=mode, text=prompt, model_key=model_key)

    if mode is Mode.TRANSLATE:
        return _parse_translate(rest)

    if mode is Mode.MEDIA:
        return _parse_media(args[1:])

    if mode is Mode.REPLICATE:
        if len(args) < 3:
            raise UsageError(REPLICATE_USAGE)
        return Command(mode=mode, key_name=args[1], text=" ".join(args[2:]).strip())

    return Command(mode=mode, text=rest)


def _parse_translate(rest: str) -> Command:
    """``[lang] <text>``: a short first token is a language code if text follows."""
    first, _, remainder = rest.partition(" ")
    if remainder.strip() and len(first) <= MAX_LANG_CODE_LENGTH:
        return Command(mode=Mode.TRANSLATE, text=remainder.strip(), target=first.lower())
    return Command(mode=Mode.TRANSLATE, text=rest)


def _parse_media(args: list[str]) -> Command:
    if len(args) < 2:
        raise UsageError(MEDIA_USAGE)
    try:
        op = MediaOp(args[0].lower())
    except ValueError:
        raise UsageError(NO_MEDIA_PROVIDER) from None
    return Command(mode=Mode.MEDIA, op=op, text=" ".join(args[1:]).strip())
