"""Chat model keys accepted by ``/ai chat [model] <prompt>``."""

from enum import StrEnum


class ModelKey(StrEnum):
    LLAMA2 = "llama2"
    MISTRAL = "mistral"
    FLAN_T5 = "flan_t5"
    FALCON = "falcon"
    GPT2 = "gpt2"
    BLOOM = "bloom"


DEFAULT_MODEL = ModelKey.LLAMA2


def split_model_key(text: str) -> tuple[ModelKey, str]:
    """Split an optional leading model key off a chat prompt.

    ``"mistral Explain tides"`` → ``(MISTRAL, "Explain tides")``;
    ``"Explain tides"`` → ``(LLAMA2, "Explain tides")``.
    """
    first, _, rest = text.strip().partition(" ")
    try:
        return ModelKey(first.lower()), rest.strip()
    except ValueError:
        return DEFAULT_MODEL, text.strip()
