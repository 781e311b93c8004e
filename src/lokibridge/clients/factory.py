"""Factory for chain clients built from settings."""

from typing import Optional

from lokibridge.clients.binance import BinanceChainClient
from lokibridge.clients.loki import LokiWalletClient
from lokibridge.config import Settings, get_settings

# Cache for client instances
_bnb_client: Optional[BinanceChainClient] = None
_loki_client: Optional[LokiWalletClient] = None


def get_bnb_client(settings: Optional[Settings] = None) -> BinanceChainClient:
    """Get the BNB chain client."""
    global _bnb_client

    if _bnb_client is None:
        settings = settings or get_settings()
        _bnb_client = BinanceChainClient(
            api_url=settings.bnb_api_url,
            address_prefix=settings.bnb_address_prefix,
            asset=settings.bnb_asset,
            limit=settings.bnb_tx_limit,
            timeout=settings.http_timeout,
        )
    return _bnb_client


def get_loki_client(settings: Optional[Settings] = None) -> LokiWalletClient:
    """Get the LOKI wallet RPC client."""
    global _loki_client

    if _loki_client is None:
        settings = settings or get_settings()
        _loki_client = LokiWalletClient(
            rpc_url=settings.loki_wallet_rpc_url,
            username=settings.loki_wallet_rpc_username,
            password=settings.loki_wallet_rpc_password,
            timeout=settings.http_timeout,
        )
    return _loki_client


async def close_clients() -> None:
    """Close cached clients."""
    if _bnb_client is not None:
        await _bnb_client.aclose()
    if _loki_client is not None:
        await _loki_client.aclose()


def reset_clients() -> None:
    """Clear client cache (useful for testing)."""
    global _bnb_client, _loki_client
    _bnb_client = None
    _loki_client = None
