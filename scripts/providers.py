#!/usr/bin/env python3
"""Show which providers the bot would try, given the current .env.

Usage examples:
    # Availability of every adapter, in resolution order
    uv run python scripts/providers.py

    # Check a specific chat model key
    uv run python scripts/providers.py --model mistral

    # Also ping the Redis memory backend
    uv run python scripts/providers.py --ping-redis
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from redis.exceptions import RedisError

from src import providers
from src.llm.models import DEFAULT_MODEL, ModelKey
from src.memory.store import ConversationStore, StoreMode
from src.providers.base import ChatRequest


def _mark(available: bool) -> str:
    return "yes" if available else "-"


def print_report(model_key: str) -> None:
    request = ChatRequest(prompt="", context="", model_key=model_key)

    print(f"Chat (model={model_key}):")
    for adapter in providers.CHAT_ADAPTERS:
        print(f"  {adapter.name:<24} {_mark(adapter.is_available(request))}")

    print("\nSpeech:")
    for adapter in providers.SPEECH_ADAPTERS:
        print(f"  {adapter.name:<24} {_mark(adapter.is_available())}")

    print("\nMedia:")
    for op, adapter in providers.MEDIA_ADAPTERS.items():
        print(f"  {op.value:<12} {adapter.name:<24} {_mark(adapter.is_available())}")


async def ping_redis() -> int:
    store = ConversationStore.get()
    print(f"\nMemory backend: {store.mode}")
    if store.mode is not StoreMode.DURABLE:
        return 0
    try:
        await store._client.ping()
    except (RedisError, OSError) as exc:
        print(f"  ping failed: {exc}", file=sys.stderr)
        return 1
    print("  ping ok")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Report provider configuration")
    parser.add_argument(
        "--model",
        choices=[k.value for k in ModelKey],
        default=DEFAULT_MODEL.value,
        help="Chat model key to check availability for",
    )
    parser.add_argument("--ping-redis", action="store_true", help="Ping the Redis backend")
    args = parser.parse_args()

    print_report(args.model)
    if args.ping_redis:
        sys.exit(asyncio.run(ping_redis()))


if __name__ == "__main__":
    main()
