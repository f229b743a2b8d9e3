# /gas_estimator/core/parsing.py
# Turns the untrusted strings of a TransactionInput into typed values before
# they reach pricing or the upstream node.

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from web3 import Web3

from gas_estimator.core.errors import InvalidInputError
from gas_estimator.core.models import TransactionInput

UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1

_DECIMAL_RE = re.compile(r"[0-9]+")
_HEX_QUANTITY_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_HEX_DATA_RE = re.compile(r"(0[xX])?([0-9a-fA-F]{2})*")


@dataclass(frozen=True)
class ParsedTransaction:
    from_address: str
    to_address: str
    data: Optional[bytes] = None
    value: Optional[int] = None
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None

    def to_rpc_request(self) -> Dict[str, Any]:
        """Renders the eth_estimateGas call object, omitting absent fields."""
        request: Dict[str, Any] = {"from": self.from_address, "to": self.to_address}
        if self.data is not None:
            request["data"] = "0x" + self.data.hex()
        if self.value is not None:
            request["value"] = self.value
        if self.gas_price is not None:
            request["gasPrice"] = self.gas_price
        if self.max_fee_per_gas is not None:
            request["maxFeePerGas"] = self.max_fee_per_gas
        if self.max_priority_fee_per_gas is not None:
            request["maxPriorityFeePerGas"] = self.max_priority_fee_per_gas
        return request


def parse_address(text: str, field: str = "address") -> str:
    """
    Validates a 20-byte hex address and returns its checksummed form. Mixed-case
    input is accepted whether or not it carries a valid EIP-55 checksum.
    """
    if not text:
        raise InvalidInputError(f"Missing '{field}' address")
    if not Web3.is_address(text.lower()):
        raise InvalidInputError(f"Invalid address: {text}")
    return Web3.to_checksum_address(text.lower())


def parse_hex_bytes(text: str) -> bytes:
    if not _HEX_DATA_RE.fullmatch(text):
        raise InvalidInputError("Invalid transaction data")
    body = text[2:] if text[:2] in ("0x", "0X") else text
    return bytes.fromhex(body)


def parse_uint(text: str, field: str, bits: int = 128, allow_hex: bool = False) -> int:
    """
    Parses an unsigned integer of at most ``bits`` bits. Decimal digits only,
    unless ``allow_hex`` also admits a 0x-prefixed quantity.
    """
    error = InvalidInputError(f"Invalid {field}: must be an unsigned {bits}-bit integer")
    if _DECIMAL_RE.fullmatch(text):
        # Digit count is bounded before int() so huge inputs never reach the converter.
        if len(text.lstrip("0")) > len(str(2**bits - 1)):
            raise error
        number = int(text, 10)
    elif allow_hex and _HEX_QUANTITY_RE.fullmatch(text):
        if len(text[2:].lstrip("0")) > bits // 4:
            raise error
        number = int(text, 16)
    else:
        raise error
    if number > 2**bits - 1:
        raise error
    return number


def parse_transaction(tx: TransactionInput) -> ParsedTransaction:
    from_address = parse_address(tx.from_, "from")
    to_address = parse_address(tx.to, "to")

    return ParsedTransaction(
        from_address=from_address,
        to_address=to_address,
        data=parse_hex_bytes(tx.data) if tx.data is not None else None,
        value=parse_uint(tx.value, "value", bits=256, allow_hex=True) if tx.value is not None else None,
        gas_price=parse_uint(tx.gas_price, "gasPrice") if tx.gas_price is not None else None,
        max_fee_per_gas=(
            parse_uint(tx.max_fee_per_gas, "maxFeePerGas")
            if tx.max_fee_per_gas is not None else None
        ),
        max_priority_fee_per_gas=(
            parse_uint(tx.max_priority_fee_per_gas, "maxPriorityFeePerGas")
            if tx.max_priority_fee_per_gas is not None else None
        ),
    )
