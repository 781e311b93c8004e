"""Request validation for the swap API.

Validators return an error message or None; they never raise for bad
input. Messages are shown to API users as-is.
"""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Optional

from lokibridge.chains import INVALID_ADDRESS_MESSAGES, ChainType, SwapType
from lokibridge.clients.base import AddressValidator

logger = logging.getLogger(__name__)

INVALID_PARAMS = "invalid params"
ADDRESS_REQUIRED = "address is required"
TYPE_INVALID = "type is invalid"
UUID_REQUIRED = "uuid is required"


async def check_address(validator: AddressValidator, address: str) -> bool:
    """Run an address validator, awaiting it if it is asynchronous."""
    result = validator.validate_address(address)
    if inspect.isawaitable(result):
        result = await result
    return result is True


class SwapRequestValidator:
    """Validates swap creation requests.

    Address validators are injected per destination chain so that only
    the chain the payout goes to is ever asked about the address.
    """

    def __init__(self, address_validators: Mapping[ChainType, AddressValidator]):
        missing = [chain.value for chain in ChainType if chain not in address_validators]
        if missing:
            raise ValueError(f"Missing address validators for: {', '.join(missing)}")
        self.address_validators = dict(address_validators)

    async def validate_swap(self, body: Optional[Mapping[str, Any]]) -> Optional[str]:
        """Validate a swap request body.

        Args:
            body: Request body with ``type`` and ``address``

        Returns:
            Error message, or None if the request is valid
        """
        if body is None or not isinstance(body, Mapping):
            return INVALID_PARAMS

        address = body.get("address")
        if address is None or address == "":
            return ADDRESS_REQUIRED

        swap_type = SwapType.parse(body.get("type"))
        if swap_type is None:
            return TYPE_INVALID

        chain = swap_type.destination_chain
        validator = self.address_validators[chain]
        if not isinstance(address, str) or not await check_address(validator, address):
            logger.debug(f"Rejected {chain.value} destination address for {swap_type.value}")
            return INVALID_ADDRESS_MESSAGES[chain]

        return None


async def validate_uuid_present(body: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Validate that a request body references a swap by uuid.

    Returns:
        Error message, or None if ``uuid`` is present
    """
    if body is None or not isinstance(body, Mapping):
        return INVALID_PARAMS

    uuid = body.get("uuid")
    if uuid is None or uuid == "":
        return UUID_REQUIRED

    return None
