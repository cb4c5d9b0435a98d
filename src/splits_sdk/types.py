"""Type definitions for splits-sdk."""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from eth_utils import to_checksum_address
from pydantic import BaseModel, Field, field_validator, model_validator


class ExecutionStrategy(str, Enum):
    """How a client executes its contract calls. Fixed per client instance."""

    SEND = "send"
    ESTIMATE = "estimate"
    ENCODE = "encode"


class BalanceSource(str, Enum):
    """Where a token balance was reported from."""

    WITHDRAWN = "withdrawn"
    INTERNAL = "internal"
    ACTIVE = "active"


class TransactionOverrides(BaseModel):
    """
    Gas configuration for transactions.

    By default, gas is estimated by the node and prices are left to the RPC.
    Set a fixed limit, or EIP-1559 fees explicitly.

    Example:
        TransactionOverrides(gas_limit=500_000)
        TransactionOverrides(max_fee_per_gas=50_000_000_000)  # 50 gwei max fee
    """

    estimate_gas: bool = True
    """Estimate gas dynamically (adds 20% buffer). Ignored when gas_limit is set."""

    gas_limit: int | None = Field(default=None, gt=0)
    """Override gas limit."""

    max_fee_per_gas: int | None = Field(default=None, gt=0)
    """EIP-1559 max fee per gas in wei. If set, uses type 2 transactions."""

    max_priority_fee_per_gas: int | None = Field(default=None, ge=0)
    """EIP-1559 priority fee per gas in wei. Defaults to 1 gwei if max_fee is set."""

    model_config = {"frozen": True}


class CallDescriptor(BaseModel):
    """
    A single contract function invocation: target, ABI, function and arguments.

    The argument count must match the named function's inputs.
    """

    address: str
    abi: list[dict[str, Any]]
    function_name: str
    args: tuple[Any, ...] = ()
    value: int = Field(default=0, ge=0)
    overrides: TransactionOverrides | None = None

    model_config = {"frozen": True}

    @field_validator("address")
    @classmethod
    def _checksum_address(cls, value: str) -> str:
        return to_checksum_address(value)

    @model_validator(mode="after")
    def _check_arity(self) -> "CallDescriptor":
        candidates = [
            item
            for item in self.abi
            if item.get("type") == "function" and item.get("name") == self.function_name
        ]
        if not candidates:
            raise ValueError(f"Function {self.function_name} not found in ABI")
        if not any(len(item.get("inputs", [])) == len(self.args) for item in candidates):
            expected = ", ".join(str(len(item.get("inputs", []))) for item in candidates)
            raise ValueError(
                f"{self.function_name} expects {expected} argument(s), got {len(self.args)}"
            )
        return self

    @property
    def function_abi(self) -> dict[str, Any]:
        """The ABI fragment of the function being called."""
        for item in self.abi:
            if (
                item.get("type") == "function"
                and item.get("name") == self.function_name
                and len(item.get("inputs", [])) == len(self.args)
            ):
                return item
        raise LookupError(self.function_name)


class SendResult(BaseModel):
    """A broadcast transaction (not yet confirmed)."""

    kind: Literal["send"] = "send"
    tx_hash: str

    model_config = {"frozen": True}


class EstimateResult(BaseModel):
    """A gas estimate. Nothing was broadcast."""

    kind: Literal["estimate"] = "estimate"
    gas: int

    model_config = {"frozen": True}


class EncodeResult(BaseModel):
    """Encoded call data for an externally assembled transaction or multicall."""

    kind: Literal["encode"] = "encode"
    address: str
    data: str
    value: int = 0
    function_name: str | None = None

    model_config = {"frozen": True}


ExecutionResult = Annotated[
    SendResult | EstimateResult | EncodeResult,
    Field(discriminator="kind"),
]


class EventRecord(BaseModel):
    """A log entry from a confirmed transaction, decoded when its ABI is known."""

    name: str | None
    topic: str
    address: str
    args: dict[str, Any] = Field(default_factory=dict)
    log_index: int | None = None
    tx_hash: str | None = None

    model_config = {"frozen": True}


class CreateResult(BaseModel):
    """Result of a Send-strategy create operation."""

    entity_id: str
    event: EventRecord
    tx_hash: str

    model_config = {"frozen": True}


class TransactionResult(BaseModel):
    """Result of a Send-strategy mutation: all matching events, first one first."""

    tx_hash: str
    events: list[EventRecord]

    model_config = {"frozen": True}

    @property
    def event(self) -> EventRecord:
        return self.events[0]


class MulticallResult(BaseModel):
    """Result of a Send-strategy multicall: every log in the transaction."""

    tx_hash: str
    events: list[EventRecord]

    model_config = {"frozen": True}


# Token balances keyed by checksummed token address (zero address = native token)
TokenBalances = dict[str, int]


class TokenData(BaseModel):
    """Symbol and decimal count of a token."""

    symbol: str
    decimals: int

    model_config = {"frozen": True}


class FormattedTokenBalance(BaseModel):
    """A raw balance enriched with token metadata."""

    raw_amount: int = Field(ge=0)
    symbol: str
    decimals: int
    formatted_amount: str

    model_config = {"frozen": True}


FormattedTokenBalances = dict[str, FormattedTokenBalance]


class AccountBalances(BaseModel):
    """Withdrawn and (optionally) active balances of an account."""

    withdrawn: TokenBalances
    active_balances: TokenBalances | None = None

    model_config = {"frozen": True}


class FormattedAccountBalances(BaseModel):
    """AccountBalances with every entry formatted."""

    withdrawn: FormattedTokenBalances
    active_balances: FormattedTokenBalances | None = None

    model_config = {"frozen": True}


# Earnings of one user keyed by contract address
EarningsByContract = dict[str, TokenBalances]
FormattedEarningsByContract = dict[str, FormattedTokenBalances]


class SplitRecipient(BaseModel):
    """
    A split recipient with a percent allocation (0-100, up to 4 decimals).

    Allocations must sum to exactly 100 across all recipients.

    Example:
        SplitRecipient(address="0xAlice...", percent_allocation=60)
    """

    address: str
    percent_allocation: Decimal = Field(allow_inf_nan=True)

    model_config = {"frozen": True}


class Split(BaseModel):
    """Split metadata as reported by the indexer."""

    id: str
    controller: str | None
    distributor_fee_percent: Decimal
    recipients: list[SplitRecipient]

    model_config = {"frozen": True}


class WaterfallTrancheInput(BaseModel):
    """
    A waterfall tranche. ``size`` is a token amount in whole units.

    The last tranche must omit ``size``; it receives everything above the
    preceding thresholds.
    """

    recipient: str
    size: Decimal | None = Field(default=None, allow_inf_nan=True)

    model_config = {"frozen": True}


class WaterfallTranche(BaseModel):
    """A waterfall tranche as reported by the indexer."""

    recipient_address: str
    start_amount: Decimal
    size: Decimal | None = None

    model_config = {"frozen": True}


class WaterfallModule(BaseModel):
    """Waterfall module metadata."""

    id: str
    token: str
    token_symbol: str
    token_decimals: int
    non_waterfall_recipient: str
    distributed_funds: Decimal
    tranches: list[WaterfallTranche]

    model_config = {"frozen": True}


class ContractCall(BaseModel):
    """An arbitrary call executed by a wallet-like contract (execCalls)."""

    to: str
    value: int = Field(default=0, ge=0)
    data: str = "0x"

    model_config = {"frozen": True}


class CreateOracleParams(BaseModel):
    """Deploy a new oracle from ``factory`` with init ``data``."""

    factory: str
    data: str = "0x"

    model_config = {"frozen": True}


class OracleParams(BaseModel):
    """Either an existing oracle address, or params to create one."""

    address: str | None = None
    create_oracle_params: CreateOracleParams | None = None

    model_config = {"frozen": True}


class ScaledOfferFactorOverride(BaseModel):
    """Per-pair override of the swapper's default discount/premium."""

    base_token: str
    quote_token: str
    scaled_offer_factor_percent: Decimal = Field(allow_inf_nan=True)

    model_config = {"frozen": True}


class UniV3FlashSwapInputAsset(BaseModel):
    """A token the swapper holds and the amount of it to sell."""

    token: str
    amount_in: int = Field(gt=0)
    amount_out_min: int = Field(default=0, ge=0)
    encoded_path: str | None = None

    model_config = {"frozen": True}
