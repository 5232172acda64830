"""Base types for provider adapters.

Every adapter returns a ``ProviderResult``: ``TextResult`` or ``MediaResult``
on success, ``Failure`` otherwise. Adapters never raise across their
boundary.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from src.config import settings


class MediaKind(StrEnum):
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
    AUDIO = "audio"


class MediaOp(StrEnum):
    TEXT_TO_IMAGE = "t2i"
    TEXT_TO_VIDEO = "t2v"
    IMAGE_TO_VIDEO = "i2v"
    VIDEO_TO_VIDEO = "v2v"
    UPSCALE = "upscale"
    ACT = "act"
    FLUX = "flux"
    FIX_FACE = "fixface"
    CAPTION = "caption"
    BURN_CAPTION = "burncaption"
    RECON_3D = "recon3d"


@dataclass(frozen=True)
class ChatRequest:
    """A chat turn: the new prompt plus the transcript that includes it."""

    prompt: str
    context: str
    model_key: str = "llama2"


@dataclass(frozen=True)
class MediaRequest:
    op: MediaOp
    payload: str


class ResponseShapeError(ValueError):
    """Upstream answered, but not in a shape the adapter recognizes."""


@dataclass(frozen=True)
class TextResult:
    text: str
    provider: str = ""

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class MediaResult:
    """Generated media, either a remote reference or an inline buffer."""

    kind: MediaKind
    url: str | None = None
    data: bytes | None = None
    provider: str = ""

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: str
    provider: str = ""
    attempts: tuple[Failure, ...] = field(default=())

    @property
    def success(self) -> bool:
        return False


ProviderResult = TextResult | MediaResult | Failure


class Adapter(ABC):
    """Normalizing wrapper around one provider for one capability.

    Subclasses list the settings fields they need in ``required``; the
    adapter is available only when all of them are non-empty. Adapters whose
    needs depend on the request override ``is_available``. Availability is
    checked on every call, never cached.

    Example::

        class MyAdapter(Adapter):
            name = "my_provider"
            required = ("my_api_key",)

            async def run(self, request) -> ProviderResult:
                return TextResult(text="hi", provider=self.name)
    """

    name: str = ""
    required: tuple[str, ...] = ()

    def is_available(self, request: Any = None) -> bool:
        """Whether every required setting is present for this request."""
        return all(getattr(settings, key, "") for key in self.required)

    @abstractmethod
    async def run(self, request: Any) -> ProviderResult:
        """Call the provider and normalize its answer."""
        ...

    def fail(self, reason: str) -> Failure:
        return Failure(reason=reason, provider=self.name)
