# /gas_estimator/core/gas_cache.py
# Time-bounded caches of upstream chain data, shared by all concurrent requests
# of one engine. Each cache holds a single entry behind an asyncio.Lock; the
# lock is held across the refresh call so concurrent misses produce exactly one
# upstream request.

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

from gas_estimator.core.logger import GAS_PRICE_CACHE_EVENTS, get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class CachedPrice:
    value: int
    observed_at: float


class GasPriceCache:
    """
    Caches the network gas price for at most ``ttl`` seconds per lookup.
    One entry per cache; the service talks to exactly one node.
    """
    def __init__(self, rpc, clock: Callable[[], float] = time.monotonic):
        self.rpc = rpc
        self._clock = clock
        self._lock = asyncio.Lock()
        self._entry: Optional[CachedPrice] = None

    @property
    def entry(self) -> Optional[CachedPrice]:
        return self._entry

    async def get_or_refresh(self, ttl: float) -> int:
        if ttl <= 0:
            GAS_PRICE_CACHE_EVENTS.labels("bypass").inc()
            log.debug("GAS_PRICE_CACHE_BYPASSED")
            return await self.rpc.get_gas_price()

        async with self._lock:
            entry = self._entry
            if entry is not None:
                if self._clock() - entry.observed_at < ttl:
                    GAS_PRICE_CACHE_EVENTS.labels("hit").inc()
                    log.debug("GAS_PRICE_CACHE_HIT", gas_price=entry.value)
                    return entry.value
                log.debug("GAS_PRICE_CACHE_EXPIRED")

            GAS_PRICE_CACHE_EVENTS.labels("miss").inc()
            # A failure here propagates and leaves the previous entry untouched.
            gas_price = await self.rpc.get_gas_price()
            self._entry = CachedPrice(value=gas_price, observed_at=self._clock())
            log.debug("GAS_PRICE_CACHE_REFRESHED", gas_price=gas_price)
            return gas_price


class BlockNumberCache:
    """Latest block height with caching, used by the readiness check."""

    def __init__(self, rpc, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.rpc = rpc
        self.ttl = ttl
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_block: Optional[tuple[int, float]] = None

    async def get_latest_block_number(self) -> int:
        async with self._lock:
            if self._last_block is not None:
                block_number, observed_at = self._last_block
                if self._clock() - observed_at < self.ttl:
                    return block_number

            block_number = await self.rpc.get_block_number()
            self._last_block = (block_number, self._clock())
            return block_number
