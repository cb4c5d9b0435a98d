"""Helper functions for splits-sdk."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, cast

from eth_typing import ChecksumAddress
from web3 import AsyncWeb3
from web3.contract.async_contract import AsyncContractFunction

from .constants import PERCENTAGE_SCALE
from .types import SplitRecipient, TransactionOverrides

# Type alias for transaction params
TxParams = dict[str, Any]

DEFAULT_PRIORITY_FEE = 1_000_000_000  # 1 gwei
GAS_BUFFER = 1.2

# Providers known to serve unbounded eth_getLogs over full history
_LOGS_PROVIDER_HOSTS = ("alchemy.com", "alchemyapi.io", "infura.io")


def get_big_int_from_percent(value: Decimal | float | int) -> int:
    """
    Convert a percent (0-100) to the split contracts' 1e6 scale.

    Example:
        >>> get_big_int_from_percent(10)
        100000
    """
    scaled = Decimal(str(value)) * PERCENTAGE_SCALE / 100
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_big_int_to_percent(value: int | str) -> Decimal:
    """
    Convert a 1e6-scale value back to a percent (0-100).

    Example:
        >>> from_big_int_to_percent(600000)
        Decimal('60')
    """
    percent = Decimal(str(value)) * 100 / PERCENTAGE_SCALE
    if percent == percent.to_integral_value():
        return percent.quantize(Decimal(1))
    return percent.normalize()


def get_recipient_sorted_addresses_and_allocations(
    recipients: Sequence[SplitRecipient],
) -> tuple[list[str], list[int]]:
    """
    Sort recipients by lowercased address, as split main requires.

    Returns the sorted addresses and their allocations (1e6 scale) in the
    same order.
    """
    ordered = sorted(recipients, key=lambda r: r.address.lower())
    return (
        [r.address for r in ordered],
        [get_big_int_from_percent(r.percent_allocation) for r in ordered],
    )


def get_formatted_scaled_offer_factor(percent: Decimal | float | int) -> int:
    """
    Convert a discount percent to the swapper's scaled offer factor.

    A 1% discount becomes 990000 (99% of the oracle quote, 1e6 scale).
    """
    return get_big_int_from_percent(Decimal(100) - Decimal(str(percent)))


def from_big_int_to_token_value(amount: int, decimals: int) -> str:
    """
    Format an integer token amount as a decimal string.

    Example:
        >>> from_big_int_to_token_value(1_500_000, 6)
        '1.5'
    """
    if amount < 0:
        raise ValueError(f"Token amounts cannot be negative, got {amount}")
    if decimals == 0:
        return str(amount)
    whole, fraction = divmod(amount, 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{fraction_str}" if fraction_str else str(whole)


def from_token_value_to_big_int(value: Decimal | float | int, decimals: int) -> int:
    """Convert a whole-unit token amount to its integer representation."""
    scaled = Decimal(str(value)).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{value} has more than {decimals} decimals")
    return int(scaled)


def is_logs_provider(w3: AsyncWeb3) -> bool:
    """Check whether the connected RPC can scan historical logs."""
    endpoint = getattr(w3.provider, "endpoint_uri", None) or ""
    return any(host in str(endpoint) for host in _LOGS_PROVIDER_HOSTS)


async def build_tx_params(
    w3: AsyncWeb3,
    sender: ChecksumAddress | str,
    chain_id: int,
    overrides: TransactionOverrides | None = None,
    contract_call: AsyncContractFunction | None = None,
    value: int = 0,
) -> TxParams:
    """
    Build transaction parameters with gas options.

    Handles:
    - Gas estimation (with 20% buffer) unless gas_limit is set
    - EIP-1559 type 2 transactions when max_fee_per_gas is set
    - Fallback to legacy transactions otherwise

    Args:
        w3: AsyncWeb3 instance
        sender: Sender address
        chain_id: Chain ID
        overrides: Optional gas configuration
        contract_call: Contract function call for estimation
        value: Native token value attached to the call

    Returns:
        Transaction parameters dict
    """
    nonce = await w3.eth.get_transaction_count(cast(ChecksumAddress, sender))

    tx_params: TxParams = {
        "from": sender,
        "nonce": nonce,
        "chainId": chain_id,
    }
    if value:
        tx_params["value"] = value

    opts = overrides or TransactionOverrides()

    # Determine gas limit
    if opts.gas_limit is not None:
        tx_params["gas"] = opts.gas_limit
    elif opts.estimate_gas and contract_call is not None:
        estimate_params: TxParams = {"from": sender}
        if value:
            estimate_params["value"] = value
        estimated = await contract_call.estimate_gas(estimate_params)
        tx_params["gas"] = int(estimated * GAS_BUFFER)

    # EIP-1559 or legacy
    if opts.max_fee_per_gas is not None:
        tx_params["type"] = "0x2"
        tx_params["maxFeePerGas"] = opts.max_fee_per_gas
        tx_params["maxPriorityFeePerGas"] = (
            opts.max_priority_fee_per_gas if opts.max_priority_fee_per_gas is not None else DEFAULT_PRIORITY_FEE
        )

    return tx_params
