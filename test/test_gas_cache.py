import asyncio

import aiohttp
import pytest

from gas_estimator.adapters.mock import MockEthereumRpc
from gas_estimator.core.gas_cache import BlockNumberCache, GasPriceCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_upstream_call():
    """
    GIVEN an empty cache and a slow node
    WHEN many legacy requests ask for the price inside one TTL window
    THEN exactly one eth_gasPrice call is made and everyone sees its value.
    """
    rpc = MockEthereumRpc(gas_price=42, delay=0.01)
    cache = GasPriceCache(rpc)

    prices = await asyncio.gather(*(cache.get_or_refresh(ttl=30) for _ in range(20)))

    assert prices == [42] * 20
    assert rpc.calls["get_gas_price"] == 1


@pytest.mark.asyncio
async def test_zero_ttl_bypasses_cache():
    rpc = MockEthereumRpc(gas_price=42, delay=0.001)
    cache = GasPriceCache(rpc)

    await asyncio.gather(*(cache.get_or_refresh(ttl=0) for _ in range(5)))

    assert rpc.calls["get_gas_price"] == 5
    assert cache.entry is None


@pytest.mark.asyncio
async def test_entry_expires_after_ttl():
    clock = FakeClock()
    rpc = MockEthereumRpc(gas_price=10)
    cache = GasPriceCache(rpc, clock=clock)

    assert await cache.get_or_refresh(ttl=15) == 10
    rpc.gas_price = 11
    clock.now += 14
    assert await cache.get_or_refresh(ttl=15) == 10
    assert rpc.calls["get_gas_price"] == 1

    clock.now += 1
    assert await cache.get_or_refresh(ttl=15) == 11
    assert rpc.calls["get_gas_price"] == 2
    assert cache.entry.value == 11
    assert cache.entry.observed_at == clock.now


@pytest.mark.asyncio
async def test_failed_refresh_keeps_stale_entry():
    clock = FakeClock()
    rpc = MockEthereumRpc(gas_price=10)
    cache = GasPriceCache(rpc, clock=clock)
    await cache.get_or_refresh(ttl=5)
    stale = cache.entry

    clock.now += 10
    rpc.set_next_call_to_fail("get_gas_price", aiohttp.ClientConnectionError("connection refused"))
    with pytest.raises(aiohttp.ClientConnectionError):
        await cache.get_or_refresh(ttl=5)
    assert cache.entry is stale

    rpc.gas_price = 12
    assert await cache.get_or_refresh(ttl=5) == 12


@pytest.mark.asyncio
async def test_cancelled_refresh_leaves_no_partial_entry():
    rpc = MockEthereumRpc(gas_price=10, delay=0.05)
    cache = GasPriceCache(rpc)

    task = asyncio.create_task(cache.get_or_refresh(ttl=30))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert cache.entry is None

    rpc.delay = 0
    assert await cache.get_or_refresh(ttl=30) == 10


@pytest.mark.asyncio
async def test_block_number_cache():
    clock = FakeClock()
    rpc = MockEthereumRpc(block_number=100)
    cache = BlockNumberCache(rpc, ttl=5, clock=clock)

    assert await cache.get_latest_block_number() == 100
    rpc.block_number = 101
    assert await cache.get_latest_block_number() == 100
    clock.now += 5
    assert await cache.get_latest_block_number() == 101
    assert rpc.calls["get_block_number"] == 2
