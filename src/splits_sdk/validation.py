"""Input validation run before any call descriptor is built.

Every failure raises InvalidArgumentError naming the offending field.
"""

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation

from eth_utils import is_address, is_hex

from ._exceptions import InvalidArgumentError
from .constants import (
    MAX_DISTRIBUTOR_FEE_PERCENT,
    MAX_SCALED_OFFER_FACTOR_PERCENT,
    MIN_RECIPIENTS,
    SPLITS_MAX_PRECISION_DECIMALS,
)
from .types import (
    ContractCall,
    OracleParams,
    ScaledOfferFactorOverride,
    SplitRecipient,
    UniV3FlashSwapInputAsset,
    WaterfallTrancheInput,
)


def validate_address(address: str, field: str = "address") -> None:
    """Fail unless ``address`` is a well-formed 20-byte hex address."""
    if not isinstance(address, str) or not is_address(address):
        raise InvalidArgumentError(f"Invalid address for {field}: {address}", field=field)


def validate_addresses(addresses: Sequence[str], field: str) -> None:
    if not addresses:
        raise InvalidArgumentError(f"{field} cannot be empty", field=field)
    for address in addresses:
        validate_address(address, field)


def _to_finite_decimal(value: Decimal | float | int, field: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidArgumentError(f"Invalid number for {field}: {value}", field=field) from e
    if not number.is_finite():
        raise InvalidArgumentError(f"{field} must be a finite number, got {value}", field=field)
    return number


def _decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


def validate_split_recipients(recipients: Sequence[SplitRecipient]) -> None:
    """
    Check recipient count, addresses, allocation bounds, precision and the 100% total.

    Raises:
        InvalidArgumentError: On the first violated rule
    """
    if len(recipients) < MIN_RECIPIENTS:
        raise InvalidArgumentError(
            f"At least {MIN_RECIPIENTS} recipients are required, got {len(recipients)}",
            field="recipients",
        )

    seen: set[str] = set()
    for recipient in recipients:
        validate_address(recipient.address, "recipients")
        lowered = recipient.address.lower()
        if lowered in seen:
            raise InvalidArgumentError(
                f"Duplicate recipient address: {recipient.address}", field="recipients"
            )
        seen.add(lowered)
        allocation = _to_finite_decimal(recipient.percent_allocation, "percent_allocation")
        if allocation <= 0 or allocation > 100:
            raise InvalidArgumentError(
                f"Percent allocation must be greater than 0 and at most 100, got {allocation}",
                field="percent_allocation",
            )
        if _decimal_places(recipient.percent_allocation) > SPLITS_MAX_PRECISION_DECIMALS:
            raise InvalidArgumentError(
                f"Percent allocation {recipient.percent_allocation} has more than "
                f"{SPLITS_MAX_PRECISION_DECIMALS} decimals",
                field="percent_allocation",
            )

    total = sum((r.percent_allocation for r in recipients), Decimal(0))
    if total != 100:
        raise InvalidArgumentError(
            f"Percent allocations must sum to 100, got {total}", field="percent_allocation"
        )


def validate_distributor_fee_percent(fee: Decimal | float | int) -> None:
    fee = _to_finite_decimal(fee, "distributor_fee_percent")
    if fee < 0 or fee > MAX_DISTRIBUTOR_FEE_PERCENT:
        raise InvalidArgumentError(
            f"Distributor fee must be between 0 and {MAX_DISTRIBUTOR_FEE_PERCENT}, got {fee}",
            field="distributor_fee_percent",
        )
    if _decimal_places(fee) > SPLITS_MAX_PRECISION_DECIMALS:
        raise InvalidArgumentError(
            f"Distributor fee {fee} has more than {SPLITS_MAX_PRECISION_DECIMALS} decimals",
            field="distributor_fee_percent",
        )


def validate_tranches(tranches: Sequence[WaterfallTrancheInput]) -> None:
    """Every tranche but the last needs a size; the last must not have one."""
    if not tranches:
        raise InvalidArgumentError("At least one tranche is required", field="tranches")

    for index, tranche in enumerate(tranches):
        validate_address(tranche.recipient, "tranches.recipient")
        is_last = index == len(tranches) - 1
        if is_last and tranche.size is not None:
            raise InvalidArgumentError(
                "The last tranche is the residual recipient and must not have a size",
                field="tranches.size",
            )
        if not is_last and tranche.size is None:
            raise InvalidArgumentError(
                f"Tranche {index} needs a size (only the last tranche may omit it)",
                field="tranches.size",
            )
        if not is_last and _to_finite_decimal(tranche.size, "tranches.size") <= 0:
            raise InvalidArgumentError(
                f"Tranche {index} size must be positive, got {tranche.size}", field="tranches.size"
            )


def validate_scaled_offer_factor(percent: Decimal | float | int, field: str = "scaled_offer_factor_percent") -> None:
    percent = _to_finite_decimal(percent, field)
    if percent < 0 or percent > MAX_SCALED_OFFER_FACTOR_PERCENT:
        raise InvalidArgumentError(
            f"Scaled offer factor percent must be between 0 and {MAX_SCALED_OFFER_FACTOR_PERCENT}, got {percent}",
            field=field,
        )
    if _decimal_places(percent) > SPLITS_MAX_PRECISION_DECIMALS:
        raise InvalidArgumentError(
            f"Scaled offer factor percent {percent} has more than {SPLITS_MAX_PRECISION_DECIMALS} decimals",
            field=field,
        )


def validate_scaled_offer_factor_overrides(overrides: Sequence[ScaledOfferFactorOverride]) -> None:
    for override in overrides:
        validate_address(override.base_token, "scaled_offer_factor_overrides.base_token")
        validate_address(override.quote_token, "scaled_offer_factor_overrides.quote_token")
        validate_scaled_offer_factor(
            override.scaled_offer_factor_percent,
            "scaled_offer_factor_overrides.scaled_offer_factor_percent",
        )


def validate_oracle_params(oracle_params: OracleParams) -> None:
    """Exactly one of an existing oracle address or create params is required."""
    has_address = oracle_params.address is not None
    has_create = oracle_params.create_oracle_params is not None
    if has_address == has_create:
        raise InvalidArgumentError(
            "Oracle params need either an oracle address or create oracle params",
            field="oracle_params",
        )
    if oracle_params.address is not None:
        validate_address(oracle_params.address, "oracle_params.address")
    if oracle_params.create_oracle_params is not None:
        validate_address(oracle_params.create_oracle_params.factory, "oracle_params.factory")
        validate_hex(oracle_params.create_oracle_params.data, "oracle_params.data")


def validate_hex(value: str, field: str) -> None:
    if not isinstance(value, str) or not value.startswith("0x") or not is_hex(value):
        raise InvalidArgumentError(f"Invalid hex data for {field}: {value}", field=field)


def validate_contract_calls(calls: Sequence[ContractCall]) -> None:
    if not calls:
        raise InvalidArgumentError("At least one call is required", field="calls")
    for call in calls:
        validate_address(call.to, "calls.to")
        validate_hex(call.data, "calls.data")


def validate_uni_v3_swap_input_assets(input_assets: Sequence[UniV3FlashSwapInputAsset]) -> None:
    if not input_assets:
        raise InvalidArgumentError("At least one input asset is required", field="input_assets")
    for asset in input_assets:
        validate_address(asset.token, "input_assets.token")
        if asset.encoded_path is not None:
            validate_hex(asset.encoded_path, "input_assets.encoded_path")


def validate_vesting_period(vesting_period_seconds: int) -> None:
    if vesting_period_seconds <= 0:
        raise InvalidArgumentError(
            f"Vesting period must be positive, got {vesting_period_seconds}",
            field="vesting_period_seconds",
        )
