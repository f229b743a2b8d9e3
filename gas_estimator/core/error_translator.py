# /gas_estimator/core/error_translator.py
"""
Maps upstream failures onto the domain taxonomy.

Classification of node-reported errors is substring based on the message the
node returns; there is no stable error code across clients for "would revert".
"""

import asyncio
from typing import Optional

import aiohttp
from web3.exceptions import (
    BadResponseFormat,
    ContractLogicError,
    ProviderConnectionError,
    Web3RPCError,
)

from gas_estimator.core.errors import GasEstimationError, GasEstimatorError, ProviderError

EXECUTION_REVERTED = "execution reverted"
GAS_EXCEEDS_ALLOWANCE = "gas required exceeds allowance"


def rpc_error_message(exc: BaseException) -> Optional[str]:
    """
    Extracts the message of an error the node itself returned, or None when the
    failure happened before a JSON-RPC error payload was received.
    """
    rpc_response = getattr(exc, "rpc_response", None)
    if isinstance(rpc_response, dict):
        error = rpc_response.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    if isinstance(exc, (ContractLogicError, Web3RPCError)):
        return str(getattr(exc, "message", None) or exc)
    # Older web3 releases raise ValueError carrying the raw error object.
    if isinstance(exc, ValueError) and exc.args and isinstance(exc.args[0], dict):
        message = exc.args[0].get("message")
        if message:
            return str(message)
    return None


def translate_rpc_error(exc: BaseException) -> GasEstimatorError:
    if isinstance(exc, GasEstimatorError):
        return exc

    message = rpc_error_message(exc)
    if message is not None:
        lowered = message.lower()
        if EXECUTION_REVERTED in lowered:
            return GasEstimationError(f"Transaction would fail: Details: {message}")
        if GAS_EXCEEDS_ALLOWANCE in lowered:
            return GasEstimationError("Transaction would fail: gas required exceeds allowance")
        return ProviderError(f"RPC error: {message}")

    if isinstance(exc, (ProviderConnectionError, aiohttp.ClientError, asyncio.TimeoutError, OSError)):
        return ProviderError(f"Transport error: {exc}")
    if isinstance(exc, BadResponseFormat):
        return ProviderError(f"Malformed response: {exc}")
    if isinstance(exc, NotImplementedError):
        return ProviderError(f"Unsupported feature: {exc}")
    if isinstance(exc, (TypeError, ValueError)):
        return ProviderError(f"Serialization error: {exc}")
    return ProviderError(f"Unexpected provider failure: {exc!r}")
