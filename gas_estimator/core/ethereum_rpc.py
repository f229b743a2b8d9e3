# /gas_estimator/core/ethereum_rpc.py
# Thin async accessor over a single Ethereum node. Immutable after
# construction and shared by every in-flight request.

from typing import Any, Dict

from web3 import AsyncHTTPProvider, AsyncWeb3

from gas_estimator.core.decorators import retriable_startup_call
from gas_estimator.core.error_translator import translate_rpc_error
from gas_estimator.core.errors import ProviderError
from gas_estimator.core.logger import UPSTREAM_RPC_CALLS, get_logger

log = get_logger(__name__)


class EthereumRpc:
    def __init__(self, rpc_url: str, timeout: float = 10.0):
        self.rpc_url = rpc_url
        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
        log.info("ETHEREUM_RPC_INITIALIZED", timeout=timeout)

    async def get_gas_price(self) -> int:
        UPSTREAM_RPC_CALLS.labels("eth_gasPrice").inc()
        return int(await self.w3.eth.gas_price)

    async def get_block_number(self) -> int:
        UPSTREAM_RPC_CALLS.labels("eth_blockNumber").inc()
        return int(await self.w3.eth.block_number)

    async def estimate_gas(self, request: Dict[str, Any]) -> int:
        UPSTREAM_RPC_CALLS.labels("eth_estimateGas").inc()
        return int(await self.w3.eth.estimate_gas(request))

    async def verify_connection(self, attempts: int = 3) -> int:
        """
        Startup connectivity check: fetches the block height, retrying with
        backoff. This is the only place upstream calls are retried.
        """
        fetch = retriable_startup_call(attempts)(self.get_block_number)
        try:
            block_number = await fetch()
        except Exception as e:
            reason = translate_rpc_error(e)
            log.critical("ETHEREUM_NODE_UNREACHABLE", error=reason.detail)
            raise ProviderError(f"Failed to connect to Ethereum node: {reason.detail}") from e
        log.info("ETHEREUM_NODE_CONNECTED", block_number=block_number)
        return block_number

    async def close(self):
        disconnect = getattr(self.w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
