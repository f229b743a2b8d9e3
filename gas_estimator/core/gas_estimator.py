# /gas_estimator/core/gas_estimator.py
# Entry point of the estimation core: classify, price and estimate the limit
# concurrently, then combine into a cost quote.

import asyncio

from gas_estimator.core.classifier import classify
from gas_estimator.core.error_translator import translate_rpc_error
from gas_estimator.core.errors import GasEstimatorError, ServerError
from gas_estimator.core.gas_cache import GasPriceCache
from gas_estimator.core.logger import GAS_ESTIMATES, GAS_ESTIMATION_BRANCH_FAILURES, get_logger
from gas_estimator.core.models import GasEstimation, TransactionClass, TransactionInput
from gas_estimator.core.parsing import UINT128_MAX, parse_transaction
from gas_estimator.core.pricing import PricingStrategy

log = get_logger(__name__)

WEI_PER_ETH = 10**18

EXECUTION_TIME_HINTS = {
    TransactionClass.LEGACY: "~30 seconds",
    TransactionClass.FEE_MARKET: "~15 seconds",
}


def saturating_mul(a: int, b: int, limit: int = UINT128_MAX) -> int:
    return min(a * b, limit)


def format_ether(wei: int) -> str:
    """Fixed-point ether amount with exactly 18 fractional digits."""
    whole, fraction = divmod(wei, WEI_PER_ETH)
    return f"{whole}.{fraction:018d}"


def estimate_execution_time(tx_class: TransactionClass) -> str:
    return EXECUTION_TIME_HINTS[tx_class]


class GasEstimationEngine:
    """
    Quotes the execution cost of a transaction against one upstream node.

    The engine owns its PricingStrategy; the GasPriceCache is passed in so the
    caller decides its lifetime (one per service, or one per test).
    """
    def __init__(self, rpc, cache: GasPriceCache, cache_ttl: float = 0):
        self.rpc = rpc
        self.cache = cache
        self.pricing = PricingStrategy(rpc, cache, cache_ttl)
        log.info("GAS_ESTIMATION_ENGINE_INITIALIZED", cache_ttl=cache_ttl)

    async def estimate(self, tx: TransactionInput) -> GasEstimation:
        tx_class = classify(tx)
        try:
            estimation = await self._estimate(tx, tx_class)
        except GasEstimatorError as e:
            self._record_failure(tx_class, e)
            raise
        except Exception as e:
            # Local defects are server errors, never upstream ones.
            error = ServerError(f"Unexpected failure: {e}")
            self._record_failure(tx_class, error)
            raise error from e
        GAS_ESTIMATES.labels(tx_class.value, "ok").inc()
        return estimation

    def _record_failure(self, tx_class: TransactionClass, error: GasEstimatorError):
        GAS_ESTIMATES.labels(tx_class.value, error.error_type).inc()
        log.warning(
            "GAS_ESTIMATION_FAILED",
            transaction_class=tx_class.value,
            error_type=error.error_type,
            error=error.detail,
        )

    def _branch_error(self, branch: str, exc: Exception) -> GasEstimatorError:
        error = translate_rpc_error(exc)
        GAS_ESTIMATION_BRANCH_FAILURES.labels(branch, error.error_type).inc()
        log.warning(
            "GAS_ESTIMATION_BRANCH_FAILED",
            branch=branch,
            error_type=error.error_type,
            error=error.detail,
        )
        return error

    async def _estimate(self, tx: TransactionInput, tx_class: TransactionClass) -> GasEstimation:
        parsed = parse_transaction(tx)

        # Both branches settle before either result is looked at.
        gas_price, gas_limit = await asyncio.gather(
            self.pricing.price_for(tx_class, parsed),
            self.rpc.estimate_gas(parsed.to_rpc_request()),
            return_exceptions=True,
        )
        failures = [
            (branch, outcome)
            for branch, outcome in (("gas_price", gas_price), ("estimate_gas", gas_limit))
            if isinstance(outcome, BaseException)
        ]
        for _, outcome in failures:
            if not isinstance(outcome, Exception):
                raise outcome
        # Every failed branch is reported; the price branch's error is the one raised.
        errors = [(self._branch_error(branch, outcome), outcome) for branch, outcome in failures]
        if errors:
            error, cause = errors[0]
            if error is cause:
                raise error
            raise error from cause

        total_cost = saturating_mul(gas_price, gas_limit)
        estimation = GasEstimation(
            gas_limit=str(gas_limit),
            gas_price=str(gas_price),
            estimated_cost_wei=str(total_cost),
            estimated_cost_eth=format_ether(total_cost),
            estimated_execution_time=estimate_execution_time(tx_class),
            transaction_class=tx_class,
        )
        log.info(
            "GAS_ESTIMATION_COMPLETED",
            transaction_class=tx_class.value,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
        return estimation
