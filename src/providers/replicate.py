"""Replicate adapters: chat models, media models, and speech.

All of them go through ``run_prediction``, which creates a prediction,
waits for it synchronously when Replicate allows, and otherwise polls the
prediction URL until it reaches a terminal status or the deadline passes.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from src.config import settings
from src.providers.base import (
    Adapter,
    ChatRequest,
    MediaKind,
    MediaOp,
    MediaRequest,
    MediaResult,
    ProviderResult,
    ResponseShapeError,
    TextResult,
)

logger = logging.getLogger(__name__)

REPLICATE_TIMEOUT = 600
POLL_INTERVAL = 2.0
TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}


class ReplicateError(Exception):
    """A prediction could not be created or did not succeed."""


def _headers() -> dict[str, str]:
    return {
        "Authorization": f"Token {settings.replicate_api_key}",
        "Content-Type": "application/json",
        "Prefer": "wait",
    }


async def run_prediction(version: str, model_input: dict[str, Any]) -> dict[str, Any]:
    """Create a prediction and return its final JSON.

    Raises:
        ReplicateError: on non-2xx responses or a failed/canceled prediction.
        httpx.HTTPError: on transport errors and timeouts.
    """
    deadline = time.monotonic() + REPLICATE_TIMEOUT
    url = f"{settings.replicate_api_url.rstrip('/')}/predictions"

    async with httpx.AsyncClient(timeout=REPLICATE_TIMEOUT) as client:
        resp = await client.post(
            url, json={"version": version, "input": model_input}, headers=_headers()
        )
        if resp.status_code >= 400:
            raise ReplicateError(f"HTTP {resp.status_code}: {resp.text[:200]}")
        prediction = resp.json()

        while prediction.get("status") not in TERMINAL_STATUSES:
            poll_url = (prediction.get("urls") or {}).get("get")
            if not poll_url:
                status = prediction.get("status", "unknown")
                raise ReplicateError(f"prediction {status} without a poll URL")
            if time.monotonic() >= deadline:
                raise ReplicateError("prediction did not finish in time")
            await asyncio.sleep(POLL_INTERVAL)
            resp = await client.get(poll_url, headers=_headers())
            if resp.status_code >= 400:
                raise ReplicateError(f"HTTP {resp.status_code} polling prediction")
            prediction = resp.json()

    if prediction["status"] != "succeeded":
        detail = prediction.get("error") or ""
        raise ReplicateError(f"prediction {prediction['status']}: {detail}".rstrip(": "))
    return prediction


def parse_text_output(prediction: dict[str, Any]) -> str:
    """Language models stream tokens, so list outputs are joined."""
    output = prediction.get("output")
    if isinstance(output, str) and output:
        return output
    if isinstance(output, list) and output and all(isinstance(o, str) for o in output):
        return "".join(output)
    raise ResponseShapeError("Replicate returned no text output")


def parse_media_output(prediction: dict[str, Any]) -> str:
    output = prediction.get("output")
    if isinstance(output, str) and output:
        return output
    if isinstance(output, list) and output and isinstance(output[0], str):
        return output[0]
    raise ResponseShapeError("Replicate returned no output")


class _ReplicateAdapter(Adapter):
    """Shared error handling: every failure becomes a ``Failure``.

    Subclasses build the prediction input in ``prepare`` and turn the
    finished prediction into a result in ``normalize``.
    """

    @abstractmethod
    def prepare(self, request: Any) -> tuple[str, dict[str, Any]]:
        """Model version and prediction input for *request*."""

    @abstractmethod
    def normalize(self, prediction: dict[str, Any]) -> ProviderResult:
        """Turn a succeeded prediction into a result."""

    async def run(self, request: Any) -> ProviderResult:
        version, model_input = self.prepare(request)
        try:
            prediction = await run_prediction(version, model_input)
            return self.normalize(prediction)
        except httpx.TimeoutException:
            return self.fail("Replicate timed out")
        except httpx.HTTPError as exc:
            return self.fail(f"Replicate request failed: {exc}")
        except (ReplicateError, ResponseShapeError) as exc:
            return self.fail(str(exc))
        except ValueError:
            return self.fail("Replicate returned an unreadable response")


class ReplicateChatAdapter(_ReplicateAdapter):
    name = "replicate_chat"
    required = ("replicate_api_key",)

    def is_available(self, request: ChatRequest | None = None) -> bool:
        model_key = request.model_key if request else ""
        return super().is_available(request) and bool(settings.replicate_chat_model(model_key))

    def prepare(self, request: ChatRequest) -> tuple[str, dict[str, Any]]:
        return settings.replicate_chat_model(request.model_key), {"prompt": request.context}

    def normalize(self, prediction: dict[str, Any]) -> ProviderResult:
        return TextResult(text=parse_text_output(prediction), provider=self.name)


@dataclass(frozen=True)
class NamedModelRequest:
    """``/ai replicate <key_name> <prompt>``: the model comes from a config key."""

    key_name: str
    prompt: str


class ReplicateModelAdapter(ReplicateChatAdapter):
    name = "replicate_model"

    def is_available(self, request: NamedModelRequest | None = None) -> bool:
        configured = all(getattr(settings, key, "") for key in self.required)
        return configured and (request is None or bool(settings.lookup(request.key_name)))

    def prepare(self, request: NamedModelRequest) -> tuple[str, dict[str, Any]]:
        return settings.lookup(request.key_name), {"prompt": request.prompt}


class ReplicateMediaAdapter(_ReplicateAdapter):
    """One Replicate model for one media operation.

    A ``kind`` of None means the model answers with text (captioning).
    """

    def __init__(
        self, op: MediaOp, model_setting: str, input_key: str, kind: MediaKind | None
    ) -> None:
        self.op = op
        self.name = f"replicate_{op.value}"
        self.required = ("replicate_api_key", model_setting)
        self._model_setting = model_setting
        self._input_key = input_key
        self._kind = kind

    def prepare(self, request: MediaRequest) -> tuple[str, dict[str, Any]]:
        return getattr(settings, self._model_setting), {self._input_key: request.payload}

    def normalize(self, prediction: dict[str, Any]) -> ProviderResult:
        if self._kind is None:
            return TextResult(text=parse_text_output(prediction), provider=self.name)
        return MediaResult(kind=self._kind, url=parse_media_output(prediction), provider=self.name)


class ReplicateSpeechAdapter(_ReplicateAdapter):
    name = "replicate_tts"
    required = ("replicate_api_key", "replicate_tts_model")

    def prepare(self, request: str) -> tuple[str, dict[str, Any]]:
        return settings.replicate_tts_model, {"text": request}

    def normalize(self, prediction: dict[str, Any]) -> ProviderResult:
        url = parse_media_output(prediction)
        return MediaResult(kind=MediaKind.AUDIO, url=url, provider=self.name)


replicate_chat = ReplicateChatAdapter()
replicate_model = ReplicateModelAdapter()
replicate_tts = ReplicateSpeechAdapter()

MEDIA_ADAPTERS: dict[MediaOp, ReplicateMediaAdapter] = {
    MediaOp.FLUX: ReplicateMediaAdapter(
        MediaOp.FLUX, "replicate_image_model", "prompt", MediaKind.IMAGE
    ),
    MediaOp.FIX_FACE: ReplicateMediaAdapter(
        MediaOp.FIX_FACE, "replicate_upscale_model", "image", MediaKind.IMAGE
    ),
    MediaOp.CAPTION: ReplicateMediaAdapter(
        MediaOp.CAPTION, "replicate_video_caption_model", "video", None
    ),
    MediaOp.BURN_CAPTION: ReplicateMediaAdapter(
        MediaOp.BURN_CAPTION, "replicate_video_captioned_model", "video", MediaKind.VIDEO
    ),
    MediaOp.RECON_3D: ReplicateMediaAdapter(
        MediaOp.RECON_3D, "replicate_3d_model", "video", MediaKind.DOCUMENT
    ),
}
