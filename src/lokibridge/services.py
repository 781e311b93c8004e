"""Wiring of validators and reconcilers to the configured chain clients."""

from typing import Optional

from lokibridge.chains import ChainType
from lokibridge.clients.factory import get_bnb_client, get_loki_client
from lokibridge.config import Settings, get_settings
from lokibridge.transactions import (
    BNBChainConfig,
    LokiChainConfig,
    TransactionConfig,
    TransactionReconciler,
)
from lokibridge.validation import SwapRequestValidator


def build_swap_validator(settings: Optional[Settings] = None) -> SwapRequestValidator:
    """Swap validator backed by the configured chain clients."""
    settings = settings or get_settings()
    return SwapRequestValidator(
        {
            ChainType.BNB: get_bnb_client(settings),
            ChainType.LOKI: get_loki_client(settings),
        }
    )


def build_reconciler(settings: Optional[Settings] = None) -> TransactionReconciler:
    """Reconciler backed by the configured chain clients."""
    settings = settings or get_settings()
    if not settings.bnb_our_address:
        raise ValueError("BNB_OUR_ADDRESS must be set")
    return TransactionReconciler(
        TransactionConfig(
            bnb=BNBChainConfig(client=get_bnb_client(settings), our_address=settings.bnb_our_address),
            loki=LokiChainConfig(client=get_loki_client(settings)),
        )
    )
