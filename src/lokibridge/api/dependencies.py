"""Shared FastAPI dependencies."""

from functools import lru_cache

from lokibridge.services import build_reconciler, build_swap_validator
from lokibridge.transactions import TransactionReconciler
from lokibridge.validation import SwapRequestValidator


@lru_cache
def get_swap_validator() -> SwapRequestValidator:
    """Cached swap validator."""
    return build_swap_validator()


@lru_cache
def get_transaction_reconciler() -> TransactionReconciler:
    """Cached transaction reconciler."""
    return build_reconciler()
