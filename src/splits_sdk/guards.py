"""Precondition checks run before an operation touches the chain."""

import logging
from collections.abc import Sequence
from typing import Any

from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3

from ._exceptions import InvalidAuthError, MissingProviderError, MissingSignerError
from .abi import OWNABLE_ABI

logger = logging.getLogger(__name__)


def require_provider(w3: AsyncWeb3 | None) -> AsyncWeb3:
    """Fail with MissingProviderError unless a chain connection is configured."""
    if w3 is None:
        raise MissingProviderError("A chain connection (w3) is required for this action")
    return w3


def require_signer(w3: AsyncWeb3 | None, account: LocalAccount | None) -> LocalAccount:
    """Fail unless both a chain connection and a signing account are configured."""
    require_provider(w3)
    if account is None:
        raise MissingSignerError("A signing account is required for this action")
    return account


async def require_owner(
    w3: AsyncWeb3 | None,
    account: LocalAccount | None,
    entity_id: str,
    abi: Sequence[dict[str, Any]] = OWNABLE_ABI,
    function_name: str = "owner",
    args: Sequence[Any] = (),
    contract_address: str | None = None,
) -> None:
    """
    Check that the signing account owns ``entity_id``.

    The owner is read live on every call. Ownership is transferable, so a
    previous check is never reused.

    Args:
        w3: Chain connection
        account: Signing account
        entity_id: Address of the owned contract
        abi: ABI containing the owner getter
        function_name: Owner getter name (``owner`` for Ownable contracts)
        args: Getter arguments, e.g. the split address for ``getController``
        contract_address: Contract holding the getter, when it is not the
            entity itself (split main for v1 splits)

    Raises:
        MissingProviderError: No chain connection
        MissingSignerError: No signing account
        InvalidAuthError: The signing account is not the owner
    """
    w3 = require_provider(w3)
    signer = require_signer(w3, account)

    target = AsyncWeb3.to_checksum_address(contract_address or entity_id)
    contract = w3.eth.contract(address=target, abi=list(abi))
    owner = await getattr(contract.functions, function_name)(*args).call()
    logger.debug("Owner of %s is %s", entity_id, owner)

    if str(owner).lower() != signer.address.lower():
        raise InvalidAuthError(
            f"Action only available to the owner of {entity_id}. "
            f"Owner: {owner}, signer: {signer.address}"
        )
