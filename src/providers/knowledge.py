"""Knowledge lookups: Wikipedia page summaries and DuckDuckGo instant answers."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from src.providers.base import (
    Adapter,
    ChatRequest,
    ProviderResult,
    ResponseShapeError,
    TextResult,
)

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
DEFAULT_USER_AGENT = "BelaynishBot/1.0 (Telegram assistant)"

WIKIPEDIA_TIMEOUT = 10
DUCKDUCKGO_TIMEOUT = 8


def parse_wikipedia(data: Any) -> str:
    if isinstance(data, dict) and data.get("extract"):
        return str(data["extract"])
    raise ResponseShapeError("No summary found")


def parse_duckduckgo(data: Any) -> str:
    """AbstractText first, then the first related topic's text."""
    if not isinstance(data, dict):
        raise ResponseShapeError("No DuckDuckGo instant answer")
    if data.get("AbstractText"):
        return str(data["AbstractText"])
    topics = data.get("RelatedTopics") or []
    if topics and isinstance(topics[0], dict) and topics[0].get("Text"):
        return str(topics[0]["Text"])
    raise ResponseShapeError("No DuckDuckGo instant answer")


class WikipediaAdapter(Adapter):
    name = "wikipedia"

    async def run(self, request: str) -> ProviderResult:
        url = WIKIPEDIA_SUMMARY_URL + quote(request.strip(), safe="")
        try:
            async with httpx.AsyncClient(
                timeout=WIKIPEDIA_TIMEOUT,
                follow_redirects=True,
                headers={"User-Agent": DEFAULT_USER_AGENT},
            ) as client:
                resp = await client.get(url)

            if resp.status_code == 404:
                return self.fail("No summary found")
            if resp.status_code != 200:
                return self.fail(f"Wikipedia lookup failed (HTTP {resp.status_code})")

            return TextResult(text=parse_wikipedia(resp.json()), provider=self.name)
        except httpx.TimeoutException:
            return self.fail("Wikipedia lookup timed out")
        except httpx.HTTPError as exc:
            logger.warning("Wikipedia request failed: %s", exc)
            return self.fail("Wikipedia lookup failed")
        except ResponseShapeError as exc:
            return self.fail(str(exc))
        except ValueError:
            return self.fail("Wikipedia returned an unreadable response")


class DuckDuckGoAdapter(Adapter):
    name = "duckduckgo"

    async def run(self, request: str) -> ProviderResult:
        params = {"q": request, "format": "json", "no_html": 1, "skip_disambig": 1}
        try:
            async with httpx.AsyncClient(
                timeout=DUCKDUCKGO_TIMEOUT,
                headers={"User-Agent": DEFAULT_USER_AGENT},
            ) as client:
                resp = await client.get(DUCKDUCKGO_URL, params=params)

            if resp.status_code != 200:
                return self.fail(f"DuckDuckGo lookup failed (HTTP {resp.status_code})")

            return TextResult(text=parse_duckduckgo(resp.json()), provider=self.name)
        except httpx.TimeoutException:
            return self.fail("DuckDuckGo lookup timed out")
        except httpx.HTTPError as exc:
            logger.warning("DuckDuckGo request failed: %s", exc)
            return self.fail("DuckDuckGo lookup failed")
        except ResponseShapeError as exc:
            return self.fail(str(exc))
        except ValueError:
            return self.fail("DuckDuckGo returned an unreadable response")


wikipedia = WikipediaAdapter()
duckduckgo = DuckDuckGoAdapter()


class WebLookupChatAdapter(Adapter):
    """Last-resort chat answer stitched together from Wikipedia and DuckDuckGo.

    Succeeds when at least one lookup does.
    """

    name = "web_lookup"

    async def run(self, request: ChatRequest) -> ProviderResult:
        wiki = await wikipedia.run(request.prompt)
        duck = await duckduckgo.run(request.prompt)

        parts = []
        if isinstance(wiki, TextResult):
            parts.append(f"From Wikipedia: {wiki.text}")
        if isinstance(duck, TextResult):
            parts.append(f"Duck: {duck.text}")
        if not parts:
            return self.fail("web lookups found nothing")
        return TextResult(text="\n\n".join(parts), provider=self.name)


web_lookup = WebLookupChatAdapter()
