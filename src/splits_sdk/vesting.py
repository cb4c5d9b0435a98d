"""Client for vesting modules: linear vesting streams to one beneficiary."""

from collections.abc import Mapping, Sequence
from typing import Any

from web3 import AsyncWeb3

from ._exceptions import InvalidArgumentError
from .abi import VESTING_MODULE_ABI, VESTING_MODULE_FACTORY_ABI
from .base import BaseClient
from .codec import get_event_abi
from .types import (
    CreateResult,
    EncodeResult,
    EstimateResult,
    TransactionOverrides,
    TransactionResult,
)
from .validation import validate_address, validate_addresses, validate_vesting_period


class VestingClient(BaseClient):
    """
    Create vesting modules, start streams and release vested funds.

    Every token balance sitting in a module can be turned into a stream that
    vests linearly over the module's vesting period.
    """

    @property
    def factory_address(self) -> str:
        return self._product_address("vesting_factory_address")

    def _event_abis(self) -> list[Mapping[str, Any]]:
        return [
            item
            for item in [*VESTING_MODULE_FACTORY_ABI, *VESTING_MODULE_ABI]
            if item["type"] == "event"
        ]

    async def create_vesting_module(
        self,
        beneficiary: str,
        vesting_period_seconds: int,
        overrides: TransactionOverrides | None = None,
    ) -> CreateResult | EstimateResult | EncodeResult:
        validate_address(beneficiary, "beneficiary")
        validate_vesting_period(vesting_period_seconds)
        self._require_write()

        descriptor = self._descriptor(
            self.factory_address,
            VESTING_MODULE_FACTORY_ABI,
            "createVestingModule",
            AsyncWeb3.to_checksum_address(beneficiary),
            vesting_period_seconds,
            overrides=overrides,
        )
        return await self._execute_create(
            descriptor,
            get_event_abi(VESTING_MODULE_FACTORY_ABI, "CreateVestingModule"),
            "vestingModule",
        )

    async def start_vest(
        self,
        vesting_module_id: str,
        tokens: Sequence[str],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Open a stream for each token's unvested balance (permissionless)."""
        validate_address(vesting_module_id, "vesting_module_id")
        validate_addresses(tokens, "tokens")
        self._require_write()

        descriptor = self._descriptor(
            vesting_module_id,
            VESTING_MODULE_ABI,
            "createVestingStreams",
            [AsyncWeb3.to_checksum_address(t) for t in tokens],
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(VESTING_MODULE_ABI, "CreateVestingStream")])

    async def release_vested_funds(
        self,
        vesting_module_id: str,
        stream_ids: Sequence[int],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Send what has vested so far on each stream to the beneficiary."""
        validate_address(vesting_module_id, "vesting_module_id")
        if not stream_ids:
            raise InvalidArgumentError("At least one stream id is required", field="stream_ids")
        self._require_write()

        descriptor = self._descriptor(
            vesting_module_id,
            VESTING_MODULE_ABI,
            "releaseFromVesting",
            [int(i) for i in stream_ids],
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(VESTING_MODULE_ABI, "ReleaseFromVestingStream")])

    # Reads

    async def predict_vesting_module_address(self, beneficiary: str, vesting_period_seconds: int) -> tuple[str, bool]:
        """Deterministic module address, and whether it is already deployed."""
        validate_address(beneficiary, "beneficiary")
        validate_vesting_period(vesting_period_seconds)
        address, exists = await self._read(
            self.factory_address,
            VESTING_MODULE_FACTORY_ABI,
            "predictVestingModuleAddress",
            AsyncWeb3.to_checksum_address(beneficiary),
            vesting_period_seconds,
        )
        return address, exists

    async def get_beneficiary(self, vesting_module_id: str) -> str:
        return await self._read(vesting_module_id, VESTING_MODULE_ABI, "beneficiary")

    async def get_vesting_period(self, vesting_module_id: str) -> int:
        return await self._read(vesting_module_id, VESTING_MODULE_ABI, "vestingPeriod")

    async def get_vested_amount(self, vesting_module_id: str, stream_id: int) -> int:
        return await self._read(vesting_module_id, VESTING_MODULE_ABI, "vested", stream_id)

    async def get_vested_and_unreleased_amount(self, vesting_module_id: str, stream_id: int) -> int:
        return await self._read(vesting_module_id, VESTING_MODULE_ABI, "vestedAndUnreleased", stream_id)
