"""Best-effort translation through the unofficial Google Translate endpoint.

``translate()`` never fails the request: on any problem it returns the
input text unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from src.providers.base import Adapter, ProviderResult, ResponseShapeError, TextResult
from src.providers.resolver import resolve

logger = logging.getLogger(__name__)

GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"
TRANSLATE_TIMEOUT = 10
DEFAULT_TARGET = "en"


@dataclass(frozen=True)
class TranslationRequest:
    text: str
    target: str = DEFAULT_TARGET


def parse_translation(data: Any) -> str:
    """Join the translated segments of a ``translate_a/single`` response.

    The payload looks like ``[[["Hola", "Hello", ...], ...], None, "en", ...]``.
    """
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        raise ResponseShapeError("unrecognized translation response")
    segments = [
        seg[0] for seg in data[0] if isinstance(seg, list) and seg and isinstance(seg[0], str)
    ]
    if not segments:
        raise ResponseShapeError("translation response had no text")
    return "".join(segments)


class GoogleTranslateAdapter(Adapter):
    name = "google_translate"

    async def run(self, request: TranslationRequest) -> ProviderResult:
        params = {
            "client": "gtx",
            "sl": "auto",
            "tl": request.target,
            "dt": "t",
            "q": request.text,
        }
        try:
            async with httpx.AsyncClient(timeout=TRANSLATE_TIMEOUT) as client:
                resp = await client.get(GOOGLE_TRANSLATE_URL, params=params)

            if resp.status_code != 200:
                return self.fail(f"HTTP {resp.status_code}")

            return TextResult(text=parse_translation(resp.json()), provider=self.name)
        except httpx.TimeoutException:
            return self.fail("translation timed out")
        except httpx.HTTPError as exc:
            return self.fail(f"translation request failed: {exc}")
        except ResponseShapeError as exc:
            return self.fail(str(exc))
        except ValueError:
            return self.fail("unreadable translation response")


google_translate = GoogleTranslateAdapter()


async def translate(text: str, target: str = DEFAULT_TARGET) -> str:
    """Translate *text* into *target*, or return it unchanged on failure."""
    request = TranslationRequest(text=text, target=target or DEFAULT_TARGET)
    result = await resolve([google_translate], request)
    if isinstance(result, TextResult):
        return result.text
    logger.warning("Translation to '%s' failed, echoing input: %s", target, result.reason)
    return text
