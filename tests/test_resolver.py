"""Tests for fallback resolution across adapters."""

from src.providers.base import Failure, TextResult
from src.providers.resolver import NO_PROVIDER, resolve


async def test_falls_through_failures_in_order(make_adapter, calls) -> None:
    a = make_adapter("a", Failure(reason="down", provider="a"))
    b = make_adapter("b", Failure(reason="timeout", provider="b"))
    c = make_adapter("c", TextResult(text="hello", provider="c"))
    d = make_adapter("d", TextResult(text="never", provider="d"))

    result = await resolve([a, b, c, d], "req")

    assert result == TextResult(text="hello", provider="c")
    assert calls == ["a", "b", "c"]


async def test_first_success_short_circuits(make_adapter, calls) -> None:
    a = make_adapter("a", TextResult(text="first", provider="a"))
    b = make_adapter("b", TextResult(text="second", provider="b"))
    c = make_adapter("c", TextResult(text="third", provider="c"))

    result = await resolve([a, b, c], "req")

    assert result.text == "first"
    assert calls == ["a"]


async def test_all_failures_return_sentinel(make_adapter, calls) -> None:
    a = make_adapter("a", Failure(reason="down", provider="a"))
    b = make_adapter("b", Failure(reason="bad shape", provider="b"))

    result = await resolve([a, b], "req")

    assert isinstance(result, Failure)
    assert result.reason == NO_PROVIDER
    assert [f.provider for f in result.attempts] == ["a", "b"]
    assert calls == ["a", "b"]


async def test_no_available_adapters_returns_sentinel(make_adapter, calls) -> None:
    a = make_adapter("a", TextResult(text="x"), available=False)

    result = await resolve([a], "req")

    assert isinstance(result, Failure)
    assert result.reason == NO_PROVIDER
    assert result.attempts == ()
    assert calls == []


async def test_empty_adapter_list_returns_sentinel() -> None:
    result = await resolve([], "req")
    assert isinstance(result, Failure)
    assert result.reason == NO_PROVIDER


async def test_unavailable_adapters_are_skipped(make_adapter, calls) -> None:
    a = make_adapter("a", TextResult(text="x"), available=False)
    b = make_adapter("b", TextResult(text="from b", provider="b"))

    result = await resolve([a, b], "req")

    assert result.text == "from b"
    assert calls == ["b"]


async def test_raising_adapter_becomes_failure(make_adapter, calls) -> None:
    a = make_adapter("a", exc=RuntimeError("boom"))
    b = make_adapter("b", TextResult(text="ok", provider="b"))

    result = await resolve([a, b], "req")

    assert result.text == "ok"
    assert calls == ["a", "b"]


async def test_request_passed_to_each_adapter(make_adapter) -> None:
    a = make_adapter("a", Failure(reason="x"))
    b = make_adapter("b", TextResult(text="ok"))

    await resolve([a, b], "the request")

    assert a.requests == ["the request"]
    assert b.requests == ["the request"]


async def test_failed_adapter_is_retried_on_next_pass(make_adapter, calls) -> None:
    a = make_adapter("a", Failure(reason="flaky"))
    b = make_adapter("b", TextResult(text="ok"))

    await resolve([a, b], "one")
    await resolve([a, b], "two")

    assert calls == ["a", "b", "a", "b"]
