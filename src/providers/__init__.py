"""Provider adapters and the priority order they are tried in.

Order reflects operator preference: free/self-hosted first, paid last.
To add a provider, write an adapter in src/providers/ and slot it in here.
"""

from src.providers import replicate, runway
from src.providers.base import Adapter, MediaOp
from src.providers.elevenlabs import elevenlabs
from src.providers.huggingface import hf_inference, hf_space
from src.providers.knowledge import duckduckgo, web_lookup, wikipedia
from src.providers.replicate import replicate_chat, replicate_model, replicate_tts
from src.providers.resolver import NO_PROVIDER, resolve
from src.providers.translate import translate

CHAT_ADAPTERS: list[Adapter] = [hf_space, hf_inference, replicate_chat, web_lookup]
SPEECH_ADAPTERS: list[Adapter] = [elevenlabs, replicate_tts]


def build_media_registry(*tables: dict[MediaOp, Adapter]) -> dict[MediaOp, Adapter]:
    """Merge per-provider media tables, checking every op has exactly one adapter."""
    merged: dict[MediaOp, Adapter] = {}
    for table in tables:
        for op, adapter in table.items():
            if op in merged:
                msg = f"Media op '{op}' is mapped to both {merged[op].name} and {adapter.name}"
                raise ValueError(msg)
            merged[op] = adapter

    missing = [op.value for op in MediaOp if op not in merged]
    if missing:
        msg = f"Media ops without an adapter: {', '.join(missing)}"
        raise ValueError(msg)
    return merged


MEDIA_ADAPTERS = build_media_registry(runway.MEDIA_ADAPTERS, replicate.MEDIA_ADAPTERS)

__all__ = [
    "CHAT_ADAPTERS",
    "MEDIA_ADAPTERS",
    "NO_PROVIDER",
    "SPEECH_ADAPTERS",
    "build_media_registry",
    "duckduckgo",
    "replicate_model",
    "resolve",
    "translate",
    "wikipedia",
]
