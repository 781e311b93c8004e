"""Deposit poller.

Periodically reconciles a set of swap deposit accounts and hands each
newly seen canonical transaction to a callback. Settlement itself lives
elsewhere; the default callback only logs.

Usage:
    python -m lokibridge.poller --accounts accounts.json --interval 30

The accounts file is a JSON list of objects like:
    {"uuid": "...", "chain": "bnb", "memo": "..."}
    {"uuid": "...", "chain": "loki", "address_index": 3}
"""

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from lokibridge.chains import ChainType
from lokibridge.clients.factory import close_clients
from lokibridge.config import get_settings
from lokibridge.services import build_reconciler
from lokibridge.transactions import BNBAccount, CanonicalTransaction, LokiAccount, TransactionReconciler

logger = logging.getLogger(__name__)

DepositCallback = Callable[["WatchedAccount", CanonicalTransaction], Awaitable[None]]


@dataclass(frozen=True)
class WatchedAccount:
    """A swap deposit account being polled."""

    uuid: str
    chain: ChainType
    account: Union[BNBAccount, LokiAccount]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatchedAccount":
        """Build from an accounts-file entry."""
        chain = ChainType(data["chain"])
        if chain == ChainType.BNB:
            account = BNBAccount(memo=data["memo"])
        else:
            account = LokiAccount(address_index=int(data["address_index"]))
        return cls(uuid=str(data["uuid"]), chain=chain, account=account)


async def log_deposit(watched: WatchedAccount, tx: CanonicalTransaction) -> None:
    """Default callback: log the deposit."""
    logger.info(
        f"Deposit for swap {watched.uuid}: {tx.amount} on {watched.chain.value} "
        f"(hash: {tx.hash[:16]}..., timestamp: {tx.timestamp})"
    )


class DepositPoller:
    """Polls deposit accounts for incoming transactions."""

    def __init__(
        self,
        reconciler: TransactionReconciler,
        accounts: list[WatchedAccount],
        on_deposit: Optional[DepositCallback] = None,
        interval: int = 60,
    ):
        """Initialize poller.

        Args:
            reconciler: Reconciler to query
            accounts: Accounts to poll
            on_deposit: Called once per new transaction
            interval: Seconds between poll cycles
        """
        self.reconciler = reconciler
        self.accounts = accounts
        self.on_deposit = on_deposit or log_deposit
        self.interval = interval
        self._seen: set[tuple[str, str]] = set()
        self._running = False

    async def poll_account(self, watched: WatchedAccount) -> int:
        """Poll one account. Returns the number of new transactions."""
        transactions = await self.reconciler.get_incoming_transactions(
            watched.account, watched.chain
        )

        new = 0
        for tx in transactions:
            key = (watched.uuid, tx.hash)
            if key in self._seen:
                continue
            await self.on_deposit(watched, tx)
            self._seen.add(key)
            new += 1
        return new

    async def poll_once(self) -> int:
        """Run a single poll cycle over all accounts.

        A failing account is logged and skipped so the others still get
        polled.

        Returns:
            Number of new transactions found
        """
        found = 0
        for watched in self.accounts:
            try:
                found += await self.poll_account(watched)
            except Exception as e:
                logger.error(f"Error polling {watched.chain.value} account for swap {watched.uuid}: {e}")
        return found

    async def run(self) -> None:
        """Run continuous polling loop."""
        self._running = True
        logger.info(
            f"Starting deposit poller ({len(self.accounts)} accounts, interval: {self.interval}s)"
        )

        while self._running:
            found = await self.poll_once()
            if found:
                logger.info(f"Found {found} new deposits")
            await asyncio.sleep(self.interval)

    def stop(self) -> None:
        """Stop the polling loop."""
        self._running = False
        logger.info("Stopping deposit poller")


def load_accounts(path: Path) -> list[WatchedAccount]:
    """Load watched accounts from a JSON file."""
    with path.open(encoding="utf-8") as f:
        entries = json.load(f)
    return [WatchedAccount.from_dict(entry) for entry in entries]


async def main():
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Poll swap deposit accounts")
    parser.add_argument(
        "--accounts",
        type=Path,
        required=True,
        help="JSON file listing deposit accounts",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=settings.poll_interval,
        help=f"Seconds between polls (default: {settings.poll_interval})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll once and exit",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    poller = DepositPoller(
        reconciler=build_reconciler(),
        accounts=load_accounts(args.accounts),
        interval=args.interval,
    )

    try:
        if args.once:
            found = await poller.poll_once()
            print(f"Found {found} deposits")
        else:
            await poller.run()
    finally:
        await close_clients()


if __name__ == "__main__":
    asyncio.run(main())
