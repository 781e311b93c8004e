"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["BNB_OUR_ADDRESS"] = "tbnb1bridgeaddress"

from lokibridge.api.dependencies import get_swap_validator, get_transaction_reconciler
from lokibridge.chains import ChainType
from lokibridge.clients.factory import reset_clients
from lokibridge.config import get_settings
from lokibridge.transactions import (
    BNBChainConfig,
    LokiChainConfig,
    TransactionConfig,
    TransactionReconciler,
)
from lokibridge.validation import SwapRequestValidator


@pytest.fixture(autouse=True)
def clear_caches():
    """Start each test with fresh settings and clients."""
    get_settings.cache_clear()
    get_swap_validator.cache_clear()
    get_transaction_reconciler.cache_clear()
    reset_clients()
    yield
    get_settings.cache_clear()
    reset_clients()


@pytest.fixture
def bnb_client():
    """BNB client stub: synchronous validator, async transaction listing."""
    client = MagicMock()
    client.validate_address = MagicMock(return_value=True)
    client.get_incoming_transactions = AsyncMock(return_value=[])
    return client


@pytest.fixture
def loki_client():
    """LOKI client stub: asynchronous validator and transaction listing."""
    client = MagicMock()
    client.validate_address = AsyncMock(return_value=True)
    client.get_incoming_transactions = AsyncMock(return_value=[])
    return client


@pytest.fixture
def swap_validator(bnb_client, loki_client) -> SwapRequestValidator:
    """Swap validator wired to the stub clients."""
    return SwapRequestValidator({ChainType.BNB: bnb_client, ChainType.LOKI: loki_client})


@pytest.fixture
def reconciler(bnb_client, loki_client) -> TransactionReconciler:
    """Transaction reconciler wired to the stub clients."""
    return TransactionReconciler(
        TransactionConfig(
            bnb=BNBChainConfig(client=bnb_client, our_address="tbnb1bridgeaddress"),
            loki=LokiChainConfig(client=loki_client),
        )
    )
