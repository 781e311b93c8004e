"""Application configuration using pydantic-settings.

Covers the two chains the bridge watches: the BNB account-model chain
(shared deposit address + memo) and the LOKI/BDX wallet RPC.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # BNB (account-model chain)
    # ======================
    bnb_api_url: str = Field(
        default="https://testnet-dex.binance.org",
        description="Binance Chain explorer / accelerated node API URL",
    )
    bnb_network: str = Field(default="testnet", description="BNB network: mainnet or testnet")
    bnb_our_address: str = Field(default="", description="Shared BNB deposit address")
    bnb_asset: str = Field(default="BNB", description="Asset symbol to watch on BNB chain")
    bnb_tx_limit: int = Field(default=1000, description="Max transactions per explorer request")

    # ======================
    # LOKI / BDX (subaddress chain)
    # ======================
    loki_wallet_rpc_url: str = Field(
        default="http://127.0.0.1:19092", description="LOKI wallet RPC URL"
    )
    loki_wallet_rpc_username: Optional[str] = Field(
        default=None, description="Wallet RPC digest auth username"
    )
    loki_wallet_rpc_password: Optional[str] = Field(
        default=None, description="Wallet RPC digest auth password"
    )

    # ======================
    # Polling / HTTP
    # ======================
    http_timeout: float = Field(default=30.0, description="Timeout for chain client requests")
    poll_interval: int = Field(default=60, description="Seconds between deposit polls")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def bnb_address_prefix(self) -> str:
        """Bech32 human-readable prefix for the configured BNB network."""
        return "bnb" if self.bnb_network.lower() == "mainnet" else "tbnb"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "chains": {
                "BNB": {
                    "api": self.bnb_api_url,
                    "network": self.bnb_network,
                    "our_address": self.bnb_our_address or "(not set)",
                    "asset": self.bnb_asset,
                },
                "LOKI": {
                    "rpc": self._redact_url(self.loki_wallet_rpc_url),
                    "auth": "***" if self.loki_wallet_rpc_password else "(not set)",
                },
            },
            "http_timeout": self.http_timeout,
            "poll_interval": self.poll_interval,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact credentials embedded in a URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
