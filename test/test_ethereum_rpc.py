import aiohttp
import pytest

from gas_estimator.core.errors import ProviderError
from gas_estimator.core.ethereum_rpc import EthereumRpc
from gas_estimator.core.logger import UPSTREAM_RPC_CALLS


class DummyEth:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.requests = []

    @property
    def gas_price(self):
        return self._value(30_000_000_000)

    @property
    def block_number(self):
        return self._value(18_000_000)

    async def _value(self, value):
        if self.fail:
            raise aiohttp.ClientConnectionError("connection refused")
        return value

    async def estimate_gas(self, request):
        self.requests.append(request)
        return 53_000


class DummyW3:
    def __init__(self, fail: bool = False):
        self.eth = DummyEth(fail)


@pytest.fixture
def rpc():
    rpc = EthereumRpc("http://127.0.0.1:8545", timeout=1)
    rpc.w3 = DummyW3()
    return rpc


@pytest.mark.asyncio
async def test_accessors(rpc):
    calls = UPSTREAM_RPC_CALLS.labels("eth_estimateGas")
    before = calls._value.get()

    assert await rpc.get_gas_price() == 30_000_000_000
    assert await rpc.get_block_number() == 18_000_000
    assert await rpc.estimate_gas({"from": "0x1", "to": "0x2"}) == 53_000
    assert rpc.w3.eth.requests == [{"from": "0x1", "to": "0x2"}]
    assert calls._value.get() == before + 1


@pytest.mark.asyncio
async def test_verify_connection_returns_height(rpc):
    assert await rpc.verify_connection(attempts=1) == 18_000_000


@pytest.mark.asyncio
async def test_verify_connection_failure_is_provider_error(rpc):
    rpc.w3 = DummyW3(fail=True)
    with pytest.raises(ProviderError, match="Failed to connect to Ethereum node"):
        await rpc.verify_connection(attempts=1)
