# /gas_estimator/core/classifier.py
from gas_estimator.core.models import TransactionClass, TransactionInput


def classify(tx: TransactionInput) -> TransactionClass:
    """Fee-market fields win over gasPrice when both are given."""
    if tx.max_fee_per_gas is not None or tx.max_priority_fee_per_gas is not None:
        return TransactionClass.FEE_MARKET
    return TransactionClass.LEGACY
