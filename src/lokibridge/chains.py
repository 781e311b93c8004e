"""Chain and swap-direction definitions.

The bridge connects two ledgers:
- BNB: account-model chain, one shared deposit address, payments told
  apart by memo
- LOKI: subaddress chain (BDX), one derived subaddress index per swap
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChainType(str, Enum):
    """Chains supported by the bridge."""

    BNB = "bnb"
    LOKI = "loki"


class SwapType(str, Enum):
    """Supported swap directions.

    Values are the literals clients send in the ``type`` field.
    """

    LOKI_TO_BLOKI = "loki_to_bloki"
    BLOKI_TO_LOKI = "bloki_to_loki"

    @classmethod
    def parse(cls, value) -> Optional["SwapType"]:
        """Return the member for ``value`` or None if it is not a swap type."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def deposit_chain(self) -> ChainType:
        """Chain the user sends funds on."""
        return SWAP_DIRECTIONS[self].deposit

    @property
    def destination_chain(self) -> ChainType:
        """Chain the payout goes to; the swap address belongs to it."""
        return SWAP_DIRECTIONS[self].destination


@dataclass(frozen=True)
class SwapDirection:
    """Deposit and destination chain for a swap type."""

    deposit: ChainType
    destination: ChainType


SWAP_DIRECTIONS: dict[SwapType, SwapDirection] = {
    SwapType.LOKI_TO_BLOKI: SwapDirection(deposit=ChainType.LOKI, destination=ChainType.BNB),
    SwapType.BLOKI_TO_LOKI: SwapDirection(deposit=ChainType.BNB, destination=ChainType.LOKI),
}

# Error shown when an address fails the destination chain's validator
INVALID_ADDRESS_MESSAGES: dict[ChainType, str] = {
    ChainType.LOKI: "address must be a BDX address",
    ChainType.BNB: "address must be a BNB address",
}
