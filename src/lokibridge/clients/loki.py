"""LOKI (BDX) client using the wallet JSON-RPC interface.

The bridge wallet hands out one subaddress per swap; deposits are listed
per subaddress index with ``get_transfers``.
"""

import logging
from typing import Any, Optional

import httpx

from lokibridge.clients.base import LokiClient, WalletRPCError

logger = logging.getLogger(__name__)

LOKI_WALLET_RPC_DEFAULT_URL = "http://127.0.0.1:19092"


class LokiWalletClient(LokiClient):
    """LOKI wallet RPC client.

    Address validation is asked of the wallet, so it is asynchronous.
    """

    def __init__(
        self,
        rpc_url: str = LOKI_WALLET_RPC_DEFAULT_URL,
        username: Optional[str] = None,
        password: Optional[str] = None,
        account_index: int = 0,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize wallet client.

        Args:
            rpc_url: Wallet RPC base URL
            username: Digest auth username (wallet started with --rpc-login)
            password: Digest auth password
            account_index: Wallet account holding the swap subaddresses
            timeout: Request timeout in seconds
            http_client: Pre-built client (tests inject a mock transport)
        """
        self.rpc_url = rpc_url.rstrip("/")
        self.account_index = account_index
        self.timeout = timeout
        self._auth = httpx.DigestAuth(username, password) if username and password else None
        self._client = http_client
        self._request_id = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, auth=self._auth)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _rpc(self, method: str, params: Optional[dict] = None) -> dict:
        """Make a wallet RPC call and return its ``result`` object."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": str(self._request_id),
            "method": method,
            "params": params or {},
        }

        client = await self._get_client()
        response = await client.post(f"{self.rpc_url}/json_rpc", json=payload)
        response.raise_for_status()

        data = response.json()
        error = data.get("error")
        if error:
            raise WalletRPCError(method, error.get("code"), error.get("message", ""))
        return data.get("result") or {}

    async def validate_address(self, address: str) -> bool:
        """Ask the wallet whether ``address`` is valid on its network."""
        if not isinstance(address, str) or not address:
            return False
        result = await self._rpc(
            "validate_address",
            {"address": address, "any_net_type": False},
        )
        return result.get("valid") is True

    async def get_incoming_transactions(
        self, address_index: int, options: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """Get transfers received on subaddress ``address_index``.

        Confirmed transfers come first, followed by mempool ones when
        ``options["pool"]`` is set.
        """
        options = options or {}
        params = {
            "in": True,
            "pool": bool(options.get("pool", False)),
            "account_index": self.account_index,
            "subaddr_indices": [address_index],
        }
        result = await self._rpc("get_transfers", params)

        transactions = list(result.get("in", [])) + list(result.get("pool", []))
        logger.debug(
            f"Fetched {len(transactions)} incoming LOKI transactions "
            f"for subaddress {address_index}"
        )
        return transactions
