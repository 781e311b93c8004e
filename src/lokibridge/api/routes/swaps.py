"""Swap request endpoints."""

import logging
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, status

from lokibridge.api.dependencies import get_swap_validator
from lokibridge.chains import SwapType
from lokibridge.clients.base import ChainClientError
from lokibridge.validation import SwapRequestValidator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/swaps/validate")
async def validate_swap(
    body: Optional[Any] = Body(default=None),
    validator: SwapRequestValidator = Depends(get_swap_validator),
):
    """
    Check a swap request before it is created.

    Returns 400 with the validation message when the request is rejected,
    502 when the destination chain cannot be reached.
    """
    try:
        error = await validator.validate_swap(body)
    except (ChainClientError, httpx.HTTPError) as e:
        logger.error(f"Address validation failed for swap request: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to validate address",
        )

    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    swap_type = SwapType(body["type"])
    return {
        "valid": True,
        "type": swap_type.value,
        "deposit_chain": swap_type.deposit_chain.value,
        "destination_chain": swap_type.destination_chain.value,
    }
