"""Shared test fixtures."""

from typing import Any

import pytest

from src.config import Settings, settings
from src.memory.store import ConversationStore
from src.providers.base import Adapter, ProviderResult


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAdapter(Adapter):
    """Adapter that records its calls into a shared list and returns a canned result."""

    def __init__(
        self,
        name: str,
        result: ProviderResult | None = None,
        *,
        calls: list[str],
        available: bool = True,
        exc: Exception | None = None,
    ) -> None:
        self.name = name
        self._result = result
        self._calls = calls
        self._available = available
        self._exc = exc
        self.requests: list[Any] = []

    def is_available(self, request: Any = None) -> bool:
        return self._available

    async def run(self, request: Any) -> ProviderResult:
        self._calls.append(self.name)
        self.requests.append(request)
        if self._exc is not None:
            raise self._exc
        return self._result


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset every setting to its default so a local .env never leaks into tests."""
    for name, field in Settings.model_fields.items():
        monkeypatch.setattr(settings, name, field.default)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock, _clean_settings):
    """A local-cache ConversationStore installed as the shared instance."""
    ConversationStore._reset()
    s = ConversationStore(ttl=60, maxsize=100, timer=clock)
    ConversationStore._instance = s
    yield s
    ConversationStore._reset()


@pytest.fixture
def calls() -> list[str]:
    """Order in which fake adapters were invoked."""
    return []


@pytest.fixture
def make_adapter(calls: list[str]):
    """Factory for FakeAdapters sharing the ``calls`` log."""

    def _make(name: str, result: ProviderResult | None = None, **kwargs: Any) -> FakeAdapter:
        return FakeAdapter(name, result, calls=calls, **kwargs)

    return _make
