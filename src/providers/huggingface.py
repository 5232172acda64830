"""Hugging Face chat adapters: a hosted Gradio Space and the Inference API."""

import logging
from typing import Any

import httpx

from src.config import settings
from src.providers.base import (
    Adapter,
    ChatRequest,
    ProviderResult,
    ResponseShapeError,
    TextResult,
)

logger = logging.getLogger(__name__)

GENERATION_TIMEOUT = 120

# Gradio Spaces expose predictions on one of these, depending on version.
SPACE_ENDPOINTS = ("/run/predict", "/api/predict", "")


def _text(value: Any) -> str | None:
    """*value* when it is a non-blank string, else None."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def parse_space_output(data: Any) -> str:
    """``{"data": [text, ...]}`` or ``{"generated_text": text}``.

    Blank or non-string answers are rejected so the next adapter is tried.
    """
    if isinstance(data, dict):
        outputs = data.get("data")
        if isinstance(outputs, list) and outputs and _text(outputs[0]):
            return outputs[0]
        if _text(data.get("generated_text")):
            return data["generated_text"]
    raise ResponseShapeError("unrecognized Space response")


def parse_inference_output(data: Any) -> str:
    """Accept the shapes the Inference API returns for text generation.

    - plain string
    - ``[{"generated_text": ...}]``
    - ``{"generated_text": ...}``
    - ``{"data": [text]}``
    """
    if _text(data):
        return data
    if isinstance(data, list) and data and isinstance(data[0], dict):
        if _text(data[0].get("generated_text")):
            return data[0]["generated_text"]
    if isinstance(data, dict):
        if _text(data.get("generated_text")):
            return data["generated_text"]
        outputs = data.get("data")
        if isinstance(outputs, list) and outputs and _text(outputs[0]):
            return outputs[0]
    raise ResponseShapeError("unrecognized Inference API response")


def _body(resp: httpx.Response) -> Any:
    """JSON body, or the raw text when the endpoint answered with plain text."""
    try:
        return resp.json()
    except ValueError:
        return resp.text


class HFSpaceAdapter(Adapter):
    name = "hf_space"
    required = ("hf_space_url",)

    async def run(self, request: ChatRequest) -> ProviderResult:
        base = settings.hf_space_url.rstrip("/")
        last_error = "no endpoint answered"

        async with httpx.AsyncClient(timeout=GENERATION_TIMEOUT) as client:
            for suffix in SPACE_ENDPOINTS:
                url = base + suffix
                try:
                    resp = await client.post(url, json={"data": [request.context]})
                except httpx.TimeoutException:
                    return self.fail("Space timed out")
                except httpx.HTTPError as exc:
                    last_error = f"request failed: {exc}"
                    continue

                if resp.status_code >= 400:
                    last_error = f"HTTP {resp.status_code} from {url}"
                    continue

                try:
                    return TextResult(text=parse_space_output(_body(resp)), provider=self.name)
                except ResponseShapeError as exc:
                    return self.fail(str(exc))

        return self.fail(last_error)


class HFInferenceAdapter(Adapter):
    name = "hf_inference"
    required = ("huggingface_api_key",)

    def is_available(self, request: ChatRequest | None = None) -> bool:
        model_key = request.model_key if request else ""
        return super().is_available(request) and bool(settings.hf_model_url(model_key))

    async def run(self, request: ChatRequest) -> ProviderResult:
        url = settings.hf_model_url(request.model_key)
        headers = {"Authorization": f"Bearer {settings.huggingface_api_key}"}
        try:
            async with httpx.AsyncClient(timeout=GENERATION_TIMEOUT) as client:
                resp = await client.post(url, json={"inputs": request.context}, headers=headers)

            if resp.status_code != 200:
                return self.fail(f"HTTP {resp.status_code}: {resp.text[:200]}")

            return TextResult(text=parse_inference_output(_body(resp)), provider=self.name)
        except httpx.TimeoutException:
            return self.fail("Inference API timed out")
        except httpx.HTTPError as exc:
            return self.fail(f"Inference API request failed: {exc}")
        except ResponseShapeError as exc:
            return self.fail(str(exc))


hf_space = HFSpaceAdapter()
hf_inference = HFInferenceAdapter()
