"""Fallback resolution across an ordered list of adapters."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from src.providers.base import Failure, ProviderResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from src.providers.base import Adapter

logger = logging.getLogger(__name__)

NO_PROVIDER = "no provider available"


async def resolve(adapters: Sequence[Adapter], request: Any) -> ProviderResult:
    """Try each adapter in order and return the first success.

    Unavailable adapters are skipped. A failed adapter is not retried within
    the pass, and nothing is remembered between passes. When no adapter
    succeeds the result is a ``Failure`` whose reason is ``NO_PROVIDER`` and
    whose ``attempts`` hold the individual failures in order.
    """
    attempts: list[Failure] = []

    for adapter in adapters:
        if not adapter.is_available(request):
            logger.debug("Adapter '%s' not configured, skipping", adapter.name)
            continue

        t0 = time.monotonic()
        try:
            result = await adapter.run(request)
        except Exception:
            logger.exception("Adapter '%s' raised", adapter.name)
            result = Failure(reason="unexpected provider error", provider=adapter.name)
        elapsed = time.monotonic() - t0

        if result.success:
            logger.info("Adapter '%s' succeeded in %.2fs", adapter.name, elapsed)
            return result

        logger.warning("Adapter '%s' failed in %.2fs: %s", adapter.name, elapsed, result.reason)
        attempts.append(result)

    return Failure(reason=NO_PROVIDER, attempts=tuple(attempts))
