"""Client for pass-through wallets: forward received tokens to a set address."""

from collections.abc import Mapping, Sequence
from typing import Any

from web3 import AsyncWeb3

from .abi import PASS_THROUGH_WALLET_ABI, PASS_THROUGH_WALLET_FACTORY_ABI
from .base import BaseClient
from .codec import get_event_abi
from .swapper import format_calls
from .types import (
    ContractCall,
    CreateResult,
    EncodeResult,
    EstimateResult,
    TransactionOverrides,
    TransactionResult,
)
from .validation import validate_address, validate_addresses, validate_contract_calls


class PassThroughWalletClient(BaseClient):
    """Create pass-through wallets and push their balances onward."""

    @property
    def factory_address(self) -> str:
        return self._product_address("pass_through_wallet_factory_address")

    def _event_abis(self) -> list[Mapping[str, Any]]:
        return [
            item
            for item in [*PASS_THROUGH_WALLET_FACTORY_ABI, *PASS_THROUGH_WALLET_ABI]
            if item["type"] == "event"
        ]

    async def create_pass_through_wallet(
        self,
        owner: str,
        pass_through: str,
        paused: bool = False,
        overrides: TransactionOverrides | None = None,
    ) -> CreateResult | EstimateResult | EncodeResult:
        validate_address(owner, "owner")
        validate_address(pass_through, "pass_through")
        self._require_write()

        params = (
            AsyncWeb3.to_checksum_address(owner),
            paused,
            AsyncWeb3.to_checksum_address(pass_through),
        )
        descriptor = self._descriptor(
            self.factory_address,
            PASS_THROUGH_WALLET_FACTORY_ABI,
            "createPassThroughWallet",
            params,
            overrides=overrides,
        )
        return await self._execute_create(
            descriptor,
            get_event_abi(PASS_THROUGH_WALLET_FACTORY_ABI, "CreatePassThroughWallet"),
            "passThroughWallet",
        )

    async def pass_through_tokens(
        self,
        pass_through_wallet_id: str,
        tokens: Sequence[str],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Forward the wallet's balance of each token (permissionless)."""
        validate_address(pass_through_wallet_id, "pass_through_wallet_id")
        validate_addresses(tokens, "tokens")
        self._require_write()

        descriptor = self._descriptor(
            pass_through_wallet_id,
            PASS_THROUGH_WALLET_ABI,
            "passThroughTokens",
            [AsyncWeb3.to_checksum_address(t) for t in tokens],
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(PASS_THROUGH_WALLET_ABI, "PassThrough")])

    async def _owner_call(
        self,
        pass_through_wallet_id: str,
        function_name: str,
        event_name: str,
        *args: Any,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        self._require_write()
        await self._require_owner(pass_through_wallet_id, abi=PASS_THROUGH_WALLET_ABI)
        descriptor = self._descriptor(
            pass_through_wallet_id, PASS_THROUGH_WALLET_ABI, function_name, *args, overrides=overrides
        )
        return await self._execute(descriptor, [get_event_abi(PASS_THROUGH_WALLET_ABI, event_name)])

    async def set_pass_through(
        self,
        pass_through_wallet_id: str,
        pass_through: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Change where tokens are forwarded. Owner only."""
        validate_address(pass_through_wallet_id, "pass_through_wallet_id")
        validate_address(pass_through, "pass_through")
        return await self._owner_call(
            pass_through_wallet_id,
            "setPassThrough",
            "SetPassThrough",
            AsyncWeb3.to_checksum_address(pass_through),
            overrides=overrides,
        )

    async def set_paused(
        self,
        pass_through_wallet_id: str,
        paused: bool,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(pass_through_wallet_id, "pass_through_wallet_id")
        return await self._owner_call(pass_through_wallet_id, "setPaused", "SetPaused", paused, overrides=overrides)

    async def exec_calls(
        self,
        pass_through_wallet_id: str,
        calls: Sequence[ContractCall],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        validate_address(pass_through_wallet_id, "pass_through_wallet_id")
        validate_contract_calls(calls)
        return await self._owner_call(
            pass_through_wallet_id, "execCalls", "ExecCalls", format_calls(calls), overrides=overrides
        )

    # Reads

    async def get_pass_through(self, pass_through_wallet_id: str) -> str:
        return await self._read(pass_through_wallet_id, PASS_THROUGH_WALLET_ABI, "passThrough")
