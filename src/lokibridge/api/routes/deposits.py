"""Incoming deposit lookup endpoints."""

import logging
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, Field

from lokibridge.api.dependencies import get_transaction_reconciler
from lokibridge.chains import ChainType, SwapType
from lokibridge.clients.base import ChainClientError
from lokibridge.transactions import BNBAccount, LokiAccount, TransactionReconciler
from lokibridge.validation import TYPE_INVALID, validate_uuid_present

logger = logging.getLogger(__name__)

router = APIRouter()


class IncomingTransaction(BaseModel):
    """Canonical incoming transaction."""

    hash: str
    amount: str
    timestamp: Optional[int] = None


class IncomingDepositsResponse(BaseModel):
    """Incoming transactions for a swap's deposit account."""

    uuid: str
    chain: str
    transactions: list[IncomingTransaction] = Field(default_factory=list)


def _build_account(chain: ChainType, body: dict[str, Any]):
    """Build the deposit account descriptor for ``chain`` from the body."""
    if chain == ChainType.BNB:
        memo = body.get("memo")
        if not isinstance(memo, str) or not memo.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="memo is required")
        return BNBAccount(memo=memo)

    address_index = body.get("address_index")
    if isinstance(address_index, bool) or not isinstance(address_index, int) or address_index < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="address_index is required"
        )
    return LokiAccount(address_index=address_index)


@router.post("/deposits/incoming", response_model=IncomingDepositsResponse)
async def incoming_deposits(
    body: Optional[Any] = Body(default=None),
    reconciler: TransactionReconciler = Depends(get_transaction_reconciler),
):
    """
    List confirmed incoming transactions for a swap's deposit account.

    The deposit chain follows from the swap type: LOKI deposits are looked
    up by subaddress index, BNB deposits by memo.
    """
    error = await validate_uuid_present(body)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    swap_type = SwapType.parse(body.get("type"))
    if swap_type is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=TYPE_INVALID)

    chain = swap_type.deposit_chain
    account = _build_account(chain, body)

    try:
        transactions = await reconciler.get_incoming_transactions(account, chain)
    except (ChainClientError, httpx.HTTPError) as e:
        logger.error(f"Failed to fetch {chain.value} deposits for swap {body['uuid']}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Unable to reach {chain.value} chain",
        )

    return IncomingDepositsResponse(
        uuid=str(body["uuid"]),
        chain=chain.value,
        transactions=[
            IncomingTransaction(hash=tx.hash, amount=str(tx.amount), timestamp=tx.timestamp)
            for tx in transactions
        ],
    )
