"""Base interfaces for chain clients.

Chain clients are the bridge's view of each ledger: they validate
destination addresses and list incoming transactions. Transport and RPC
failures are raised to the caller; retrying is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Optional, Union


class ChainClientError(Exception):
    """Base exception for chain client failures."""


class ExplorerAPIError(ChainClientError):
    """BNB explorer API returned an unusable response."""


class WalletRPCError(ChainClientError):
    """LOKI wallet RPC returned a JSON-RPC error."""

    def __init__(self, method: str, code: Optional[int], message: str):
        self.method = method
        self.code = code
        self.message = message
        super().__init__(f"{method} failed ({code}): {message}")


class AddressValidator(ABC):
    """Capability to check an address for a single chain.

    Implementations may answer synchronously or return an awaitable.
    """

    @abstractmethod
    def validate_address(self, address: str) -> Union[bool, Awaitable[bool]]:
        """Return whether ``address`` is valid on this chain."""
        raise NotImplementedError()


class BNBClient(AddressValidator):
    """Account-model chain client."""

    @abstractmethod
    async def get_incoming_transactions(
        self, address: str, since: Optional[int] = None
    ) -> list[dict[str, Any]]:
        """List transfers received by ``address``.

        Args:
            address: Receiving address
            since: Only include transactions after this time (unix ms)

        Returns:
            Raw rows with at least ``txHash``, ``value``, ``timeStamp``, ``memo``
        """
        raise NotImplementedError()


class LokiClient(AddressValidator):
    """Subaddress chain client."""

    @abstractmethod
    async def get_incoming_transactions(
        self, address_index: int, options: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """List transfers received on a subaddress.

        Args:
            address_index: Subaddress index in the bridge wallet
            options: Extra flags, currently ``pool`` to include mempool txs

        Returns:
            Raw rows with at least ``txid``, ``amount``, ``checkpointed``
        """
        raise NotImplementedError()
