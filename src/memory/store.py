"""Conversation memory backed by Redis with an in-process fallback.

Supports two backends selected at startup:
- Durable: set REDIS_URL (or UPSTASH_REDIS_REST_URL, with
  UPSTASH_REDIS_REST_TOKEN as the password). Histories are stored as JSON
  with a Redis expiry.
- Local: no Redis configured. Histories live in a bounded TLRU cache and
  expire on their own.

The first Redis error demotes the store to the local cache for the rest of
the process. It never goes back.
"""

from __future__ import annotations

import asyncio
import logging
import time
import weakref
from collections.abc import Callable
from enum import StrEnum
from typing import Any

import redis.asyncio as redis
from cachetools import TLRUCache
from redis.exceptions import RedisError

from src.config import settings
from src.memory.models import ConversationTurn, dump_history, load_history

logger = logging.getLogger(__name__)

KEY_PREFIX = "memory:"


class StoreMode(StrEnum):
    DURABLE = "durable"
    DEMOTED = "demoted"
    LOCAL = "local"


def _expires_at(_key: str, value: tuple[list[ConversationTurn], int], now: float) -> float:
    return now + value[1]


class ConversationStore:
    """Singleton conversation store.

    Get the shared instance via ``ConversationStore.get()``.
    """

    _instance: ConversationStore | None = None

    def __init__(
        self,
        client: Any = None,
        *,
        ttl: int | None = None,
        maxsize: int | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl if ttl is not None else settings.memory_ttl_seconds
        self._cache: TLRUCache = TLRUCache(
            maxsize=maxsize or settings.memory_cache_size,
            ttu=_expires_at,
            timer=timer,
        )
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._client = client
        self._mode = StoreMode.DURABLE if client is not None else StoreMode.LOCAL
        if client is None:
            self._init_backend()

    def _init_backend(self) -> None:
        url = settings.get_redis_url()
        if not url:
            logger.info("Conversation store: local cache (no Redis configured)")
            return
        try:
            self._client = redis.from_url(
                url,
                password=settings.upstash_redis_rest_token or None,
                decode_responses=True,
                socket_timeout=5,
            )
            self._mode = StoreMode.DURABLE
            logger.info("Conversation store: Redis")
        except (RedisError, ValueError) as exc:
            logger.warning("Redis init failed, falling back to local cache: %s", exc)
            self._client = None

    @classmethod
    def get(cls) -> ConversationStore:
        """Return the shared ConversationStore instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    @property
    def mode(self) -> StoreMode:
        return self._mode

    @property
    def ttl(self) -> int:
        return self._ttl

    def lock(self, conversation_id: str | int) -> asyncio.Lock:
        """Per-conversation lock for read-modify-write sequences.

        Locks are held weakly: once no task holds or waits on one, it is dropped.
        """
        key = str(conversation_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _demote(self, operation: str, exc: Exception) -> None:
        logger.warning("Redis %s failed, using local cache from now on: %s", operation, exc)
        self._mode = StoreMode.DEMOTED

    # -- Read ----------------------------------------------------------------

    async def get_history(self, conversation_id: str | int) -> list[ConversationTurn]:
        """Return the stored history, or an empty list if absent or expired."""
        key = f"{KEY_PREFIX}{conversation_id}"
        if self._mode is StoreMode.DURABLE:
            try:
                raw = await self._client.get(key)
            except (RedisError, OSError) as exc:
                self._demote("get", exc)
            else:
                history = load_history(raw)
                if history is None and raw:
                    logger.warning("Discarding undecodable history for %s", key)
                return history or []

        entry = self._cache.get(key)
        return list(entry[0]) if entry else []

    # -- Write ---------------------------------------------------------------

    async def put_history(
        self,
        conversation_id: str | int,
        history: list[ConversationTurn],
        ttl: int | None = None,
    ) -> None:
        """Replace the stored history and reset its expiry to *ttl* seconds."""
        key = f"{KEY_PREFIX}{conversation_id}"
        ttl = ttl or self._ttl
        if self._mode is StoreMode.DURABLE:
            try:
                await self._client.set(key, dump_history(history), ex=ttl)
                return
            except (RedisError, OSError) as exc:
                self._demote("set", exc)

        self._cache[key] = (list(history), ttl)

    async def clear(self, conversation_id: str | int) -> None:
        """Forget a conversation."""
        key = f"{KEY_PREFIX}{conversation_id}"
        if self._mode is StoreMode.DURABLE:
            try:
                await self._client.delete(key)
                return
            except (RedisError, OSError) as exc:
                self._demote("delete", exc)

        self._cache.pop(key, None)
