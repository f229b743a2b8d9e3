# /gas_estimator/adapters/mock.py
# In-memory stand-in for EthereumRpc. Lets the engine, caches and HTTP layer
# run without a node, and records every call for assertions.

import asyncio
from typing import Any, Dict, List, Optional

from gas_estimator.core.logger import get_logger

log = get_logger(__name__)


class MockEthereumRpc:
    """
    A mock implementation of EthereumRpc for testing purposes.
    Prices and limits are fixed values; failures are queued per method.
    """
    def __init__(
        self,
        gas_price: int = 20 * 10**9,
        gas_limit: int = 21_000,
        block_number: int = 18_000_000,
        delay: float = 0.0,
    ):
        self.gas_price = gas_price
        self.gas_limit = gas_limit
        self.block_number = block_number
        self.delay = delay
        self.calls: Dict[str, int] = {"get_gas_price": 0, "get_block_number": 0, "estimate_gas": 0}
        self.estimate_requests: List[Dict[str, Any]] = []
        self._failures: Dict[str, Optional[BaseException]] = {}
        log.info("MOCK_ETHEREUM_RPC_INITIALIZED", gas_price=gas_price, gas_limit=gas_limit)

    def set_next_call_to_fail(self, method: str, error: BaseException):
        """Configure the mock to raise ``error`` on the next call of ``method``."""
        self._failures[method] = error

    async def _respond(self, method: str):
        self.calls[method] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        error = self._failures.pop(method, None)
        if error is not None:
            log.error("MOCK_RPC_FORCED_FAILURE", method=method, error=str(error))
            raise error

    async def get_gas_price(self) -> int:
        await self._respond("get_gas_price")
        return self.gas_price

    async def get_block_number(self) -> int:
        await self._respond("get_block_number")
        return self.block_number

    async def estimate_gas(self, request: Dict[str, Any]) -> int:
        self.estimate_requests.append(request)
        await self._respond("estimate_gas")
        return self.gas_limit

    async def verify_connection(self, attempts: int = 3) -> int:
        return await self.get_block_number()

    async def close(self):
        pass
