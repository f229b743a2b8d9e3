# /gas_estimator/core/models.py
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TransactionClass(str, Enum):
    LEGACY = "legacy"
    FEE_MARKET = "eip1559"

    def __str__(self) -> str:
        return self.value


class TransactionInput(BaseModel):
    """
    A transaction as supplied by the caller. Every field is an untrusted string;
    typed values come out of ``parsing.parse_transaction``.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: str = Field(default="", alias="from")
    to: str = ""
    data: Optional[str] = None
    value: Optional[str] = None
    gas_price: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("gasPrice", "gas_price")
    )
    max_fee_per_gas: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("maxFeePerGas", "max_fee_per_gas")
    )
    max_priority_fee_per_gas: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("maxPriorityFeePerGas", "max_priority_fee_per_gas"),
    )
    # Accepted for wire compatibility; nonce management is not done here.
    nonce: Optional[int] = None


class GasEstimation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    gas_limit: str = Field(alias="gasLimit")
    gas_price: str = Field(alias="gasPrice")
    estimated_cost_wei: str = Field(alias="estimatedCostWei")
    estimated_cost_eth: str = Field(alias="estimatedCostEth")
    estimated_execution_time: Optional[str] = Field(default=None, alias="estimatedExecutionTime")
    transaction_class: TransactionClass = Field(alias="transactionClass")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
