"""BNB (Binance Chain) client using the explorer HTTP API.

Incoming transfers all land on one shared bridge address; the memo set by
the sender is what ties a transfer to a swap.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx
from bip_utils import Bech32Decoder
from bip_utils.bech32 import Bech32ChecksumError

from lokibridge.clients.base import BNBClient, ExplorerAPIError

logger = logging.getLogger(__name__)

BNB_API_MAINNET = "https://dex.binance.org"
BNB_API_TESTNET = "https://testnet-dex.binance.org"

# Bech32 payload length of a BNB account address
ADDRESS_PAYLOAD_LENGTH = 20


class BinanceChainClient(BNBClient):
    """BNB chain client.

    Address validation is a local bech32 check; transaction history comes
    from the ``/api/v1/transactions`` explorer endpoint.
    """

    def __init__(
        self,
        api_url: str = BNB_API_TESTNET,
        address_prefix: str = "tbnb",
        asset: str = "BNB",
        limit: int = 1000,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize BNB client.

        Args:
            api_url: Explorer API base URL
            address_prefix: Bech32 prefix (bnb for mainnet, tbnb for testnet)
            asset: Asset symbol to list transfers for
            limit: Max rows per request
            timeout: Request timeout in seconds
            http_client: Pre-built client (tests inject a mock transport)
        """
        self.api_url = api_url.rstrip("/")
        self.address_prefix = address_prefix
        self.asset = asset
        self.limit = limit
        self.timeout = timeout
        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    def validate_address(self, address: str) -> bool:
        """Check that ``address`` is a bech32 address for this network."""
        if not isinstance(address, str) or not address:
            return False
        try:
            payload = Bech32Decoder.Decode(self.address_prefix, address)
        except (ValueError, Bech32ChecksumError) as e:
            logger.debug(f"Rejected BNB address {address!r}: {e}")
            return False
        return len(payload) == ADDRESS_PAYLOAD_LENGTH

    async def get_incoming_transactions(
        self, address: str, since: Optional[int] = None
    ) -> list[dict[str, Any]]:
        """Get transfers received by ``address``.

        ``value`` is converted to Decimal, every other field is returned as
        the API sent it.
        """
        params: dict[str, Any] = {
            "address": address,
            "side": "RECEIVE",
            "txType": "TRANSFER",
            "txAsset": self.asset,
            "limit": self.limit,
        }
        if since is not None:
            params["startTime"] = since

        client = await self._get_client()
        response = await client.get(f"{self.api_url}/api/v1/transactions", params=params)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("tx"), list):
            raise ExplorerAPIError(f"Unexpected transactions response: {data!r}")

        transactions = []
        for tx in data["tx"]:
            row = dict(tx)
            row["value"] = _to_decimal(tx.get("value"))
            transactions.append(row)

        logger.debug(f"Fetched {len(transactions)} incoming BNB transactions for {address}")
        return transactions


def _to_decimal(value: Any) -> Decimal:
    """Convert an API amount string to Decimal."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ExplorerAPIError(f"Invalid transaction value: {value!r}")
