"""Client for swappers: oracle-priced token swaps paid to a beneficiary."""

import time
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from web3 import AsyncWeb3

from ._exceptions import InvalidArgumentError
from .abi import SWAPPER_ABI, SWAPPER_FACTORY_ABI, UNI_V3_SWAP_ABI
from .base import BaseClient
from .codec import get_event_abi
from .constants import ADDRESS_ZERO
from .helpers import from_big_int_to_percent, get_formatted_scaled_offer_factor
from .types import (
    ContractCall,
    CreateResult,
    EncodeResult,
    EstimateResult,
    OracleParams,
    ScaledOfferFactorOverride,
    TransactionOverrides,
    TransactionResult,
    UniV3FlashSwapInputAsset,
)
from .validation import (
    validate_address,
    validate_contract_calls,
    validate_oracle_params,
    validate_scaled_offer_factor,
    validate_scaled_offer_factor_overrides,
    validate_uni_v3_swap_input_assets,
)

DEFAULT_TRANSACTION_TIME_LIMIT = 30  # seconds


def format_oracle_params(oracle_params: OracleParams) -> tuple[str, tuple[str, bytes]]:
    """(oracle, (factory, data)) as createSwapper expects; unused half is zeroed."""
    if oracle_params.address is not None:
        return AsyncWeb3.to_checksum_address(oracle_params.address), (ADDRESS_ZERO, b"")
    create = oracle_params.create_oracle_params
    if create is None:
        raise InvalidArgumentError("Oracle params need an oracle address or create params", field="oracle_params")
    return ADDRESS_ZERO, (AsyncWeb3.to_checksum_address(create.factory), AsyncWeb3.to_bytes(hexstr=create.data))


def format_scaled_offer_factor_overrides(
    overrides: Sequence[ScaledOfferFactorOverride],
) -> list[tuple[tuple[str, str], int]]:
    return [
        (
            (AsyncWeb3.to_checksum_address(o.base_token), AsyncWeb3.to_checksum_address(o.quote_token)),
            get_formatted_scaled_offer_factor(o.scaled_offer_factor_percent),
        )
        for o in overrides
    ]


def format_calls(calls: Sequence[ContractCall]) -> list[tuple[str, int, bytes]]:
    return [(AsyncWeb3.to_checksum_address(c.to), c.value, AsyncWeb3.to_bytes(hexstr=c.data)) for c in calls]


class SwapperClient(BaseClient):
    """
    Create and manage swappers.

    Discounts are given as ``*_scaled_offer_factor_percent``: 1 means traders
    receive 99% of the oracle quote.
    """

    @property
    def factory_address(self) -> str:
        return self._product_address("swapper_factory_address")

    @property
    def uni_v3_swap_address(self) -> str:
        return self._product_address("uni_v3_swap_address")

    def _event_abis(self) -> list[Mapping[str, Any]]:
        return [item for item in [*SWAPPER_FACTORY_ABI, *SWAPPER_ABI] if item["type"] == "event"]

    async def create_swapper(
        self,
        owner: str,
        beneficiary: str,
        token_to_beneficiary: str,
        oracle_params: OracleParams,
        default_scaled_offer_factor_percent: Decimal | float | int = 0,
        scaled_offer_factor_overrides: Sequence[ScaledOfferFactorOverride] = (),
        paused: bool = False,
        overrides: TransactionOverrides | None = None,
    ) -> CreateResult | EstimateResult | EncodeResult:
        """
        Deploy a swapper.

        Args:
            owner: Account allowed to reconfigure the swapper
            beneficiary: Receives ``token_to_beneficiary`` from every swap
            token_to_beneficiary: Output token (zero address for native)
            oracle_params: Existing oracle, or factory params to create one
            default_scaled_offer_factor_percent: Default discount, 0-99
            scaled_offer_factor_overrides: Per-pair discounts
            paused: Start paused
            overrides: Gas overrides
        """
        validate_address(owner, "owner")
        validate_address(beneficiary, "beneficiary")
        validate_address(token_to_beneficiary, "token_to_beneficiary")
        validate_oracle_params(oracle_params)
        validate_scaled_offer_factor(default_scaled_offer_factor_percent)
        validate_scaled_offer_factor_overrides(scaled_offer_factor_overrides)
        self._require_write()

        params = (
            AsyncWeb3.to_checksum_address(owner),
            paused,
            AsyncWeb3.to_checksum_address(beneficiary),
            AsyncWeb3.to_checksum_address(token_to_beneficiary),
            format_oracle_params(oracle_params),
            get_formatted_scaled_offer_factor(default_scaled_offer_factor_percent),
            format_scaled_offer_factor_overrides(scaled_offer_factor_overrides),
        )
        descriptor = self._descriptor(
            self.factory_address, SWAPPER_FACTORY_ABI, "createSwapper", params, overrides=overrides
        )
        return await self._execute_create(descriptor, get_event_abi(SWAPPER_FACTORY_ABI, "CreateSwapper"), "swapper")

    async def uni_v3_flash_swap(
        self,
        swapper_id: str,
        output_token: str,
        input_assets: Sequence[UniV3FlashSwapInputAsset],
        excess_recipient: str | None = None,
        transaction_time_limit: int = DEFAULT_TRANSACTION_TIME_LIMIT,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """
        Sell the swapper's input assets through Uniswap V3 and pay the beneficiary.

        Assets with an ``encoded_path`` are routed through that path; excess
        output goes to ``excess_recipient`` (default: the signer).
        """
        validate_address(swapper_id, "swapper_id")
        validate_address(output_token, "output_token")
        validate_uni_v3_swap_input_assets(input_assets)
        if excess_recipient is not None:
            validate_address(excess_recipient, "excess_recipient")
        self._require_write()

        swap_router = self.uni_v3_swap_address
        excess = AsyncWeb3.to_checksum_address(
            excess_recipient or (self.account.address if self.account else ADDRESS_ZERO)
        )
        deadline = int(time.time()) + transaction_time_limit
        output = AsyncWeb3.to_checksum_address(output_token)

        quote_params = []
        exact_input_params = []
        for asset in input_assets:
            token = AsyncWeb3.to_checksum_address(asset.token)
            quote_params.append(((token, output), asset.amount_in, b""))
            if asset.encoded_path:
                exact_input_params.append(
                    (
                        AsyncWeb3.to_bytes(hexstr=asset.encoded_path),
                        swap_router,
                        deadline,
                        asset.amount_in,
                        asset.amount_out_min,
                    )
                )

        flash_params = (quote_params, (exact_input_params, excess))
        descriptor = self._descriptor(
            swap_router,
            UNI_V3_SWAP_ABI,
            "initFlash",
            AsyncWeb3.to_checksum_address(swapper_id),
            flash_params,
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(SWAPPER_ABI, "Flash")])

    async def _owner_call(
        self,
        swapper_id: str,
        function_name: str,
        event_name: str,
        *args: Any,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        self._require_write()
        await self._require_owner(swapper_id, abi=SWAPPER_ABI)
        descriptor = self._descriptor(swapper_id, SWAPPER_ABI, function_name, *args, overrides=overrides)
        return await self._execute(descriptor, [get_event_abi(SWAPPER_ABI, event_name)])

    async def exec_calls(
        self,
        swapper_id: str,
        calls: Sequence[ContractCall],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Execute arbitrary calls from the swapper. Owner only."""
        validate_address(swapper_id, "swapper_id")
        validate_contract_calls(calls)
        return await self._owner_call(swapper_id, "execCalls", "ExecCalls", format_calls(calls), overrides=overrides)

    async def set_paused(
        self,
        swapper_id: str,
        paused: bool,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(swapper_id, "swapper_id")
        return await self._owner_call(swapper_id, "setPaused", "SetPaused", paused, overrides=overrides)

    async def set_beneficiary(
        self,
        swapper_id: str,
        beneficiary: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(swapper_id, "swapper_id")
        validate_address(beneficiary, "beneficiary")
        return await self._owner_call(
            swapper_id,
            "setBeneficiary",
            "SetBeneficiary",
            AsyncWeb3.to_checksum_address(beneficiary),
            overrides=overrides,
        )

    async def set_token_to_beneficiary(
        self,
        swapper_id: str,
        token_to_beneficiary: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(swapper_id, "swapper_id")
        validate_address(token_to_beneficiary, "token_to_beneficiary")
        return await self._owner_call(
            swapper_id,
            "setTokenToBeneficiary",
            "SetTokenToBeneficiary",
            AsyncWeb3.to_checksum_address(token_to_beneficiary),
            overrides=overrides,
        )

    async def set_oracle(
        self,
        swapper_id: str,
        oracle: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(swapper_id, "swapper_id")
        validate_address(oracle, "oracle")
        return await self._owner_call(
            swapper_id, "setOracle", "SetOracle", AsyncWeb3.to_checksum_address(oracle), overrides=overrides
        )

    async def set_default_scaled_offer_factor(
        self,
        swapper_id: str,
        default_scaled_offer_factor_percent: Decimal | float | int,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(swapper_id, "swapper_id")
        validate_scaled_offer_factor(default_scaled_offer_factor_percent)
        return await self._owner_call(
            swapper_id,
            "setDefaultScaledOfferFactor",
            "SetDefaultScaledOfferFactor",
            get_formatted_scaled_offer_factor(default_scaled_offer_factor_percent),
            overrides=overrides,
        )

    async def set_scaled_offer_factor_overrides(
        self,
        swapper_id: str,
        scaled_offer_factor_overrides: Sequence[ScaledOfferFactorOverride],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Set per-pair discounts, replacing the default for those pairs."""
        validate_address(swapper_id, "swapper_id")
        validate_scaled_offer_factor_overrides(scaled_offer_factor_overrides)
        return await self._owner_call(
            swapper_id,
            "setPairScaledOfferFactors",
            "SetPairScaledOfferFactors",
            format_scaled_offer_factor_overrides(scaled_offer_factor_overrides),
            overrides=overrides,
        )

    # Reads

    async def get_beneficiary(self, swapper_id: str) -> str:
        return await self._read(swapper_id, SWAPPER_ABI, "beneficiary")

    async def get_token_to_beneficiary(self, swapper_id: str) -> str:
        return await self._read(swapper_id, SWAPPER_ABI, "tokenToBeneficiary")

    async def get_oracle(self, swapper_id: str) -> str:
        return await self._read(swapper_id, SWAPPER_ABI, "oracle")

    async def get_default_scaled_offer_factor(self, swapper_id: str) -> Decimal:
        """Default discount as a percent (the inverse of the create-time conversion)."""
        raw = await self._read(swapper_id, SWAPPER_ABI, "defaultScaledOfferFactor")
        return Decimal(100) - from_big_int_to_percent(raw)

    async def get_paused(self, swapper_id: str) -> bool:
        return await self._read(swapper_id, SWAPPER_ABI, "paused")
