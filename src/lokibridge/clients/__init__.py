"""Chain clients for the BNB and LOKI ledgers."""

from lokibridge.clients.base import (
    AddressValidator,
    BNBClient,
    ChainClientError,
    ExplorerAPIError,
    LokiClient,
    WalletRPCError,
)
from lokibridge.clients.binance import BinanceChainClient
from lokibridge.clients.factory import get_bnb_client, get_loki_client
from lokibridge.clients.loki import LokiWalletClient

__all__ = [
    "AddressValidator",
    "BNBClient",
    "BinanceChainClient",
    "ChainClientError",
    "ExplorerAPIError",
    "LokiClient",
    "LokiWalletClient",
    "WalletRPCError",
    "get_bnb_client",
    "get_loki_client",
]
