"""ElevenLabs text-to-speech adapter."""

import logging

import httpx

from src.config import settings
from src.providers.base import Adapter, MediaKind, MediaResult, ProviderResult

logger = logging.getLogger(__name__)

TTS_TIMEOUT = 120


class ElevenLabsAdapter(Adapter):
    """Returns the synthesized audio inline (``MediaResult.data``)."""

    name = "elevenlabs"
    required = ("elevenlabs_api_key", "elevenlabs_voice_id", "elevenlabs_api_url")

    async def run(self, request: str) -> ProviderResult:
        base = settings.elevenlabs_api_url.rstrip("/")
        url = f"{base}/text-to-speech/{settings.elevenlabs_voice_id}"
        headers = {
            "xi-api-key": settings.elevenlabs_api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }
        try:
            async with httpx.AsyncClient(timeout=TTS_TIMEOUT) as client:
                resp = await client.post(
                    url, json={"text": request, "voice_settings": {}}, headers=headers
                )
        except httpx.TimeoutException:
            return self.fail("ElevenLabs timed out")
        except httpx.HTTPError as exc:
            logger.warning("ElevenLabs request failed: %s", exc)
            return self.fail(f"ElevenLabs request failed: {exc}")

        if resp.status_code != 200:
            return self.fail(f"ElevenLabs HTTP {resp.status_code}")
        if not resp.content:
            return self.fail("ElevenLabs returned no audio")

        return MediaResult(kind=MediaKind.AUDIO, data=resp.content, provider=self.name)


elevenlabs = ElevenLabsAdapter()
