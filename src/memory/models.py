"""Data models for conversation memory."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError


class ConversationTurn(BaseModel):
    """A single conversation turn. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


_history_adapter = TypeAdapter(list[ConversationTurn])


def dump_history(history: list[ConversationTurn]) -> str:
    """Serialize a history to the JSON list stored in the backend."""
    return _history_adapter.dump_json(history).decode()


def load_history(raw: str | bytes | None) -> list[ConversationTurn] | None:
    """Parse a stored history. Returns None when the payload is unusable."""
    if not raw:
        return None
    try:
        return _history_adapter.validate_json(raw)
    except ValidationError:
        return None


def transcript(history: list[ConversationTurn]) -> str:
    """Render a history as ``role: content`` lines for prompt context."""
    return "\n".join(f"{turn.role}: {turn.content}" for turn in history)
