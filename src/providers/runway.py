"""Runway media adapters: one per media operation, each with its own endpoint."""

import logging
from typing import Any

import httpx

from src.config import settings
from src.providers.base import (
    Adapter,
    MediaKind,
    MediaOp,
    MediaRequest,
    MediaResult,
    ProviderResult,
    ResponseShapeError,
)

logger = logging.getLogger(__name__)

RUNWAY_TIMEOUT = 600


def parse_runway_output(data: Any) -> str:
    """First entry of ``output`` (a list of URLs, or a single URL)."""
    output = data.get("output") if isinstance(data, dict) else None
    if isinstance(output, str) and output:
        return output
    if isinstance(output, list) and output and isinstance(output[0], str):
        return output[0]
    raise ResponseShapeError("Runway returned no output.")


class RunwayAdapter(Adapter):
    """POSTs ``{"model": ..., "input": {input_key: payload}}`` to the op's endpoint."""

    def __init__(self, op: MediaOp, setting_suffix: str, input_key: str, kind: MediaKind) -> None:
        self.op = op
        self.name = f"runway_{op.value}"
        self._url_setting = f"runway_url_{setting_suffix}"
        self._model_setting = f"runway_model_{setting_suffix}"
        self.required = ("runway_api_key", self._url_setting)
        self._input_key = input_key
        self._kind = kind

    async def run(self, request: MediaRequest) -> ProviderResult:
        url = getattr(settings, self._url_setting).rstrip("/")
        body = {
            "model": getattr(settings, self._model_setting) or None,
            "input": {self._input_key: request.payload},
        }
        headers = {
            "Authorization": f"Bearer {settings.runway_api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=RUNWAY_TIMEOUT) as client:
                resp = await client.post(url, json=body, headers=headers)

            if resp.status_code >= 400:
                return self.fail(f"Runway HTTP {resp.status_code}: {resp.text[:200]}")

            return MediaResult(
                kind=self._kind, url=parse_runway_output(resp.json()), provider=self.name
            )
        except httpx.TimeoutException:
            return self.fail("Runway timed out")
        except httpx.HTTPError as exc:
            logger.warning("Runway request failed: %s", exc)
            return self.fail(f"Runway request failed: {exc}")
        except ResponseShapeError as exc:
            return self.fail(str(exc))
        except ValueError:
            return self.fail("Runway returned an unreadable response")


MEDIA_ADAPTERS: dict[MediaOp, RunwayAdapter] = {
    MediaOp.TEXT_TO_IMAGE: RunwayAdapter(
        MediaOp.TEXT_TO_IMAGE, "text_to_image", "prompt", MediaKind.IMAGE
    ),
    MediaOp.TEXT_TO_VIDEO: RunwayAdapter(
        MediaOp.TEXT_TO_VIDEO, "text_to_video", "prompt", MediaKind.VIDEO
    ),
    MediaOp.IMAGE_TO_VIDEO: RunwayAdapter(
        MediaOp.IMAGE_TO_VIDEO, "image_to_video", "image_url", MediaKind.VIDEO
    ),
    MediaOp.VIDEO_TO_VIDEO: RunwayAdapter(
        MediaOp.VIDEO_TO_VIDEO, "video_to_video", "video_url", MediaKind.VIDEO
    ),
    MediaOp.UPSCALE: RunwayAdapter(
        MediaOp.UPSCALE, "video_upscale", "video_url", MediaKind.VIDEO
    ),
    MediaOp.ACT: RunwayAdapter(
        MediaOp.ACT, "character_performance", "video_url", MediaKind.VIDEO
    ),
}
