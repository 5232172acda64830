"""Tests for the conversation store (Redis with local-cache fallback)."""

import gc
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.memory.models import ConversationTurn, dump_history
from src.memory.store import ConversationStore, StoreMode


def _history(*pairs: tuple[str, str]) -> list[ConversationTurn]:
    return [ConversationTurn(role=role, content=content) for role, content in pairs]


@pytest.fixture
def redis_client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def durable_store(redis_client: AsyncMock, clock) -> ConversationStore:
    return ConversationStore(redis_client, ttl=60, maxsize=100, timer=clock)


# -- local cache -------------------------------------------------------------


async def test_local_mode_when_no_redis_configured(store: ConversationStore) -> None:
    assert store.mode is StoreMode.LOCAL


async def test_put_then_get_returns_same_history(store: ConversationStore) -> None:
    history = _history(("user", "hi"), ("assistant", "hello"))

    await store.put_history(42, history)

    assert await store.get_history(42) == history


async def test_get_missing_returns_empty(store: ConversationStore) -> None:
    assert await store.get_history("nobody") == []


async def test_history_expires_after_ttl(store: ConversationStore, clock) -> None:
    await store.put_history(1, _history(("user", "hi")), ttl=30)

    clock.advance(29)
    assert len(await store.get_history(1)) == 1

    clock.advance(2)
    assert await store.get_history(1) == []


async def test_put_resets_expiry(store: ConversationStore, clock) -> None:
    await store.put_history(1, _history(("user", "a")), ttl=30)
    clock.advance(20)
    await store.put_history(1, _history(("user", "a"), ("assistant", "b")), ttl=30)
    clock.advance(20)

    assert len(await store.get_history(1)) == 2


async def test_default_ttl_used_when_not_given(store: ConversationStore, clock) -> None:
    await store.put_history(1, _history(("user", "hi")))
    clock.advance(61)
    assert await store.get_history(1) == []


async def test_returned_history_is_a_copy(store: ConversationStore) -> None:
    await store.put_history(1, _history(("user", "hi")))

    got = await store.get_history(1)
    got.append(ConversationTurn(role="assistant", content="mutated"))

    assert len(await store.get_history(1)) == 1


async def test_conversations_are_isolated(store: ConversationStore) -> None:
    await store.put_history(1, _history(("user", "one")))
    await store.put_history(2, _history(("user", "two")))

    assert (await store.get_history(1))[0].content == "one"
    assert (await store.get_history(2))[0].content == "two"


async def test_clear_forgets_history(store: ConversationStore) -> None:
    await store.put_history(1, _history(("user", "hi")))
    await store.clear(1)
    assert await store.get_history(1) == []


def test_lock_is_per_conversation(store: ConversationStore) -> None:
    assert store.lock(1) is store.lock("1")
    assert store.lock(1) is not store.lock(2)


async def test_released_locks_are_dropped(store: ConversationStore) -> None:
    for conversation_id in range(50):
        async with store.lock(conversation_id):
            assert str(conversation_id) in store._locks

    gc.collect()
    assert len(store._locks) == 0


async def test_lock_is_shared_while_held(store: ConversationStore) -> None:
    held = store.lock(9)
    async with held:
        gc.collect()
        assert store.lock(9) is held


# -- durable backend ---------------------------------------------------------


async def test_durable_put_sets_json_with_expiry(durable_store, redis_client) -> None:
    history = _history(("user", "hi"))

    await durable_store.put_history(7, history, ttl=120)

    redis_client.set.assert_awaited_once_with("memory:7", dump_history(history), ex=120)


async def test_durable_get_decodes_history(durable_store, redis_client) -> None:
    history = _history(("user", "hi"), ("assistant", "yo"))
    redis_client.get.return_value = dump_history(history)

    assert await durable_store.get_history(7) == history
    redis_client.get.assert_awaited_once_with("memory:7")


async def test_durable_get_missing_returns_empty(durable_store, redis_client) -> None:
    redis_client.get.return_value = None
    assert await durable_store.get_history(7) == []
    assert durable_store.mode is StoreMode.DURABLE


async def test_undecodable_payload_is_treated_as_absent(durable_store, redis_client) -> None:
    redis_client.get.return_value = "{not json"
    assert await durable_store.get_history(7) == []


async def test_wrong_shape_payload_is_treated_as_absent(durable_store, redis_client) -> None:
    redis_client.get.return_value = '[{"role": "robot", "content": 1}]'
    assert await durable_store.get_history(7) == []


async def test_redis_failure_demotes_to_local(durable_store, redis_client) -> None:
    redis_client.set.side_effect = RedisConnectionError("gone")

    await durable_store.put_history(7, _history(("user", "hi")))

    assert durable_store.mode is StoreMode.DEMOTED
    assert len(await durable_store.get_history(7)) == 1


async def test_demotion_is_one_way(durable_store, redis_client) -> None:
    redis_client.get.side_effect = RedisConnectionError("gone")
    assert await durable_store.get_history(7) == []
    assert durable_store.mode is StoreMode.DEMOTED

    # Redis is healthy again, but the store stays local.
    redis_client.get.side_effect = None
    redis_client.get.return_value = dump_history(_history(("user", "from redis")))
    redis_client.set.reset_mock()

    await durable_store.put_history(7, _history(("user", "local")))

    assert (await durable_store.get_history(7))[0].content == "local"
    redis_client.set.assert_not_awaited()
    assert redis_client.get.await_count == 1


async def test_os_error_also_demotes(durable_store, redis_client) -> None:
    redis_client.delete.side_effect = OSError("socket closed")

    await durable_store.clear(7)

    assert durable_store.mode is StoreMode.DEMOTED


# -- backend selection -------------------------------------------------------


def test_redis_selected_from_settings(monkeypatch) -> None:
    monkeypatch.setattr("src.config.settings.upstash_redis_rest_url", "rediss://example:6379")
    monkeypatch.setattr("src.config.settings.upstash_redis_rest_token", "secret")

    with patch("src.memory.store.redis.from_url") as from_url:
        s = ConversationStore()

    assert s.mode is StoreMode.DURABLE
    args, kwargs = from_url.call_args
    assert args[0] == "rediss://example:6379"
    assert kwargs["password"] == "secret"


def test_bad_redis_url_falls_back_to_local(monkeypatch) -> None:
    monkeypatch.setattr("src.config.settings.redis_url", "not-a-url")

    with patch("src.memory.store.redis.from_url", side_effect=ValueError("bad scheme")):
        s = ConversationStore()

    assert s.mode is StoreMode.LOCAL


def test_get_returns_singleton(store: ConversationStore) -> None:
    assert ConversationStore.get() is store
