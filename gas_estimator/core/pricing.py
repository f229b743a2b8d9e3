# /gas_estimator/core/pricing.py
from decimal import Decimal

from gas_estimator.core.gas_cache import GasPriceCache
from gas_estimator.core.logger import get_logger
from gas_estimator.core.models import TransactionClass
from gas_estimator.core.parsing import ParsedTransaction

log = get_logger(__name__)

DEFAULT_PRIORITY_FEE = int(Decimal("1.5") * 10**9)  # 1.5 gwei


class PricingStrategy:
    """
    Derives the effective gas price of a classified transaction.

    Legacy transactions use the caller's gasPrice when given, otherwise the
    shared cached network price. Fee-market transactions quote
    max(eth_gasPrice, priority fee); eth_gasPrice stands in for the base fee,
    which is not read from the block.
    """
    def __init__(self, rpc, cache: GasPriceCache, cache_ttl: float):
        self.rpc = rpc
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def price_for(self, tx_class: TransactionClass, tx: ParsedTransaction) -> int:
        if tx_class is TransactionClass.FEE_MARKET:
            return await self._fee_market_price(tx)
        return await self._legacy_price(tx)

    async def _legacy_price(self, tx: ParsedTransaction) -> int:
        if tx.gas_price is not None:
            return tx.gas_price
        return await self.cache.get_or_refresh(self.cache_ttl)

    async def _fee_market_price(self, tx: ParsedTransaction) -> int:
        priority_fee = tx.max_priority_fee_per_gas
        if priority_fee is None:
            priority_fee = DEFAULT_PRIORITY_FEE
        market_price = await self.rpc.get_gas_price()
        log.debug("FEE_MARKET_PRICE", market_price=market_price, priority_fee=priority_fee)
        return max(market_price, priority_fee)
