"""Incoming transaction reconciliation.

Turns the chain clients' raw transaction rows into one canonical shape
the settlement side can work with, keeping only transactions that belong
to the swap account and are safe to act on.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Union

from lokibridge.chains import ChainType
from lokibridge.clients.base import BNBClient, LokiClient

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_FRACTION = re.compile(r"\.(\d+)")


@dataclass(frozen=True)
class CanonicalTransaction:
    """Chain-agnostic incoming transaction."""

    hash: str
    amount: Union[int, Decimal]
    timestamp: Optional[int] = None


@dataclass(frozen=True)
class BNBAccount:
    """Swap account on BNB: payments go to the shared address with this memo."""

    memo: str
    since: Optional[int] = None  # unix ms cursor for incremental polling


@dataclass(frozen=True)
class LokiAccount:
    """Swap account on LOKI: a subaddress of the bridge wallet."""

    address_index: int
    options: Optional[dict[str, Any]] = None  # e.g. {"pool": True}


@dataclass
class BNBChainConfig:
    """BNB client plus the shared deposit address."""

    client: BNBClient
    our_address: str


@dataclass
class LokiChainConfig:
    """LOKI wallet client."""

    client: LokiClient


@dataclass
class TransactionConfig:
    """Configuration for TransactionReconciler."""

    bnb: Optional[BNBChainConfig]
    loki: Optional[LokiChainConfig]


def parse_bnb_timestamp(value: str) -> int:
    """Convert a BNB API timestamp string to whole unix seconds, rounding down.

    Timestamps without an offset are taken as UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 fraction digits
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    # timedelta keeps whole seconds separate from microseconds, so this floors
    delta = parsed - EPOCH
    return delta.days * 86400 + delta.seconds


class Reconciler(ABC):
    """Fetches and normalizes incoming transactions for one chain."""

    chain: ChainType

    @abstractmethod
    async def reconcile(self, account: Any) -> list[CanonicalTransaction]:
        """Return canonical incoming transactions for ``account``."""
        raise NotImplementedError()


class BNBReconciler(Reconciler):
    """Matches transfers to the shared address by memo."""

    chain = ChainType.BNB

    def __init__(self, reconciler: "TransactionReconciler"):
        self.reconciler = reconciler

    async def reconcile(self, account: Any) -> list[CanonicalTransaction]:
        memo = _account_field(account, "memo")
        if memo is None:
            raise ValueError("BNB account requires a memo")
        expected = str(memo).strip()

        transactions = await self.reconciler.bnb.get_incoming_transactions(
            self.reconciler.our_bnb_address, _account_field(account, "since")
        )
        # Other senders' rows are dropped before any of their fields are parsed
        matching = [tx for tx in transactions if _memo(tx) == expected]
        return [
            CanonicalTransaction(
                hash=tx["txHash"],
                amount=tx["value"],
                timestamp=parse_bnb_timestamp(tx["timeStamp"]),
            )
            for tx in matching
        ]


class LokiReconciler(Reconciler):
    """Keeps checkpointed transfers to the account's subaddress."""

    chain = ChainType.LOKI

    def __init__(self, reconciler: "TransactionReconciler"):
        self.reconciler = reconciler

    async def reconcile(self, account: Any) -> list[CanonicalTransaction]:
        address_index = _account_field(account, "address_index")
        if address_index is None:
            raise ValueError("LOKI account requires an address_index")

        # Only checkpointed transfers are final
        transactions = await self.reconciler.get_incoming_loki_transactions(
            address_index, _account_field(account, "options")
        )
        return [
            CanonicalTransaction(hash=tx["hash"], amount=tx["amount"], timestamp=tx.get("timestamp"))
            for tx in transactions
            if tx["confirmed"] is True
        ]


class TransactionReconciler:
    """Reconciles incoming transactions on both chains."""

    def __init__(self, config: TransactionConfig):
        """Create a reconciler.

        Args:
            config: Clients for both chains and the shared BNB address

        Raises:
            ValueError: If either chain is not configured
        """
        if config is None or config.bnb is None or config.loki is None:
            raise ValueError("Transaction reconciler requires both bnb and loki config")

        self.bnb = config.bnb.client
        self.our_bnb_address = config.bnb.our_address
        self.loki = config.loki.client

        self.reconcilers: dict[ChainType, Reconciler] = {
            reconciler.chain: reconciler
            for reconciler in (BNBReconciler(self), LokiReconciler(self))
        }

    async def get_incoming_transactions(
        self, account: Any, chain_type: Union[ChainType, str]
    ) -> list[CanonicalTransaction]:
        """Get incoming transactions to a swap account.

        Args:
            account: BNBAccount / LokiAccount (or a mapping with the same fields)
            chain_type: Chain the account lives on

        Returns:
            Canonical transactions in the order the chain client returned
            them; empty for an unknown chain type
        """
        try:
            chain = ChainType(chain_type)
        except ValueError:
            logger.warning(f"No reconciler for chain type {chain_type!r}")
            return []

        reconciler = self.reconcilers.get(chain)
        if reconciler is None:
            return []
        return await reconciler.reconcile(account)

    async def get_incoming_bnb_transactions(
        self, address: str, since: Optional[int] = None
    ) -> list[dict[str, Any]]:
        """Get incoming transactions to a BNB address.

        Args:
            address: BNB address
            since: Only include transactions after this time (unix ms)

        Returns:
            Raw rows with ``hash``, ``amount`` and ``timestamp`` (seconds) added
        """
        transactions = await self.bnb.get_incoming_transactions(address, since)
        return [
            {
                **tx,
                "hash": tx["txHash"],
                "amount": tx["value"],
                "timestamp": parse_bnb_timestamp(tx["timeStamp"]),
            }
            for tx in transactions
        ]

    async def get_incoming_loki_transactions(
        self, address_index: int, options: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """Get incoming transactions to a LOKI subaddress.

        Args:
            address_index: Subaddress index
            options: Passed through to the client, e.g. ``{"pool": True}``

        Returns:
            Raw rows with ``hash``, ``amount`` and ``confirmed`` added
        """
        transactions = await self.loki.get_incoming_transactions(address_index, options or {})
        return [
            {
                **tx,
                "confirmed": tx.get("checkpointed") is True,
                "hash": tx["txid"],
                "amount": tx["amount"],
            }
            for tx in transactions
        ]


def _account_field(account: Any, name: str) -> Any:
    """Read a field from an account dataclass or mapping."""
    if isinstance(account, dict):
        return account.get(name)
    return getattr(account, name, None)


def _memo(tx: dict[str, Any]) -> str:
    """Trimmed memo of a raw BNB row; missing memo is empty."""
    return str(tx.get("memo") or "").strip()
