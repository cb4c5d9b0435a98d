"""Client for waterfall modules: pay tranches in order up to fixed thresholds."""

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from web3 import AsyncWeb3

from ._exceptions import InvalidArgumentError
from .abi import WATERFALL_MODULE_ABI, WATERFALL_MODULE_FACTORY_ABI
from .base import BaseClient
from .codec import get_event_abi
from .constants import ADDRESS_ZERO
from .helpers import from_big_int_to_token_value, from_token_value_to_big_int
from .types import (
    CreateResult,
    EncodeResult,
    EstimateResult,
    TransactionOverrides,
    TransactionResult,
    WaterfallModule,
    WaterfallTranche,
    WaterfallTrancheInput,
)
from .validation import validate_address, validate_tranches


class WaterfallClient(BaseClient):
    """
    Create and operate waterfall modules.

    Tranche sizes are whole-token amounts (``Decimal("1.5")`` USDC); they are
    converted with the token's decimals into the cumulative thresholds the
    factory expects.
    """

    @property
    def factory_address(self) -> str:
        return self._product_address("waterfall_factory_address")

    def _event_abis(self) -> list[Mapping[str, Any]]:
        return [
            item
            for item in [*WATERFALL_MODULE_FACTORY_ABI, *WATERFALL_MODULE_ABI]
            if item["type"] == "event"
        ]

    async def get_tranche_recipients_and_thresholds(
        self,
        token: str,
        tranches: Sequence[WaterfallTrancheInput],
    ) -> tuple[list[str], list[int]]:
        """
        Convert tranche sizes into cumulative thresholds in token base units.

        The last tranche has no threshold, so there is one fewer threshold
        than recipients.
        """
        validate_tranches(tranches)
        decimals = (await self.balances.fetch_token_data(AsyncWeb3.to_checksum_address(token))).decimals

        recipients = [AsyncWeb3.to_checksum_address(t.recipient) for t in tranches]
        thresholds: list[int] = []
        running = 0
        for tranche in tranches[:-1]:
            running += from_token_value_to_big_int(tranche.size or 0, decimals)
            thresholds.append(running)
        return recipients, thresholds

    async def create_waterfall_module(
        self,
        token: str,
        tranches: Sequence[WaterfallTrancheInput],
        non_waterfall_recipient: str = ADDRESS_ZERO,
        overrides: TransactionOverrides | None = None,
    ) -> CreateResult | EstimateResult | EncodeResult:
        """
        Create a waterfall module for ``token``.

        Args:
            token: Waterfall token (zero address for the native token)
            tranches: Ordered tranches; every one but the last needs a size
            non_waterfall_recipient: Who may receive other tokens sent to the
                module. Zero address lets any tranche recipient recover them.
            overrides: Gas overrides
        """
        validate_address(token, "token")
        validate_tranches(tranches)
        validate_address(non_waterfall_recipient, "non_waterfall_recipient")
        self._require_write()

        try:
            recipients, thresholds = await self.get_tranche_recipients_and_thresholds(token, tranches)
        except ValueError as e:
            raise InvalidArgumentError(str(e), field="tranches.size") from e

        descriptor = self._descriptor(
            self.factory_address,
            WATERFALL_MODULE_FACTORY_ABI,
            "createWaterfallModule",
            AsyncWeb3.to_checksum_address(token),
            AsyncWeb3.to_checksum_address(non_waterfall_recipient),
            recipients,
            thresholds,
            overrides=overrides,
        )
        return await self._execute_create(
            descriptor,
            get_event_abi(WATERFALL_MODULE_FACTORY_ABI, "CreateWaterfallModule"),
            "waterfallModule",
        )

    async def waterfall_funds(
        self,
        waterfall_module_id: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Pay out the module's balance through its tranches (permissionless)."""
        validate_address(waterfall_module_id, "waterfall_module_id")
        self._require_write()

        descriptor = self._descriptor(
            waterfall_module_id, WATERFALL_MODULE_ABI, "waterfallFunds", overrides=overrides
        )
        return await self._execute(descriptor, [get_event_abi(WATERFALL_MODULE_ABI, "WaterfallFunds")])

    async def recover_non_waterfall_funds(
        self,
        waterfall_module_id: str,
        token: str,
        recipient: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """
        Send a token other than the waterfall token to a tranche recipient.

        Raises:
            InvalidArgumentError: ``token`` is the waterfall token, or
                ``recipient`` is not in any tranche
        """
        validate_address(waterfall_module_id, "waterfall_module_id")
        validate_address(token, "token")
        validate_address(recipient, "recipient")
        self._require_write()
        await self._validate_recover_tokens(waterfall_module_id, token, recipient)

        descriptor = self._descriptor(
            waterfall_module_id,
            WATERFALL_MODULE_ABI,
            "recoverNonWaterfallFunds",
            AsyncWeb3.to_checksum_address(token),
            AsyncWeb3.to_checksum_address(recipient),
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(WATERFALL_MODULE_ABI, "RecoverNonWaterfallFunds")])

    async def _validate_recover_tokens(self, waterfall_module_id: str, token: str, recipient: str) -> None:
        metadata = await self.get_waterfall_metadata(waterfall_module_id)

        if token.lower() == metadata.token.lower():
            raise InvalidArgumentError(
                "You must call recover tokens with a token other than the given waterfall's primary token. "
                f"Primary token: {metadata.token}, given token: {token}",
                field="token",
            )
        if not any(t.recipient_address.lower() == recipient.lower() for t in metadata.tranches):
            raise InvalidArgumentError(
                f"Address {recipient} not found in any tranche for waterfall {waterfall_module_id}",
                field="recipient",
            )

    async def withdraw_pull_funds(
        self,
        waterfall_module_id: str,
        address: str,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Withdraw funds the module is holding for ``address`` (pull flow)."""
        validate_address(waterfall_module_id, "waterfall_module_id")
        validate_address(address, "address")
        self._require_write()

        descriptor = self._descriptor(
            waterfall_module_id,
            WATERFALL_MODULE_ABI,
            "withdraw",
            AsyncWeb3.to_checksum_address(address),
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(WATERFALL_MODULE_ABI, "Withdrawal")])

    # Reads

    async def get_waterfall_metadata(self, waterfall_module_id: str) -> WaterfallModule:
        """Token, tranches and distributed total from the indexer, in whole-token units."""
        validate_address(waterfall_module_id, "waterfall_module_id")
        record = await self._require_indexer().get_waterfall_module(waterfall_module_id, self.chain_id)
        self._require_provider()

        token = AsyncWeb3.to_checksum_address(record["token"]["id"])
        token_data = await self.balances.fetch_token_data(token)

        def to_units(raw: Any) -> Decimal:
            return Decimal(from_big_int_to_token_value(int(raw), token_data.decimals))

        return WaterfallModule(
            id=AsyncWeb3.to_checksum_address(record["id"]),
            token=token,
            token_symbol=token_data.symbol,
            token_decimals=token_data.decimals,
            non_waterfall_recipient=AsyncWeb3.to_checksum_address(record.get("nonWaterfallRecipient") or ADDRESS_ZERO),
            distributed_funds=to_units(record.get("distributedFunds") or 0),
            tranches=[
                WaterfallTranche(
                    recipient_address=AsyncWeb3.to_checksum_address(t["recipient"]["id"]),
                    start_amount=to_units(t["startAmount"]),
                    size=to_units(t["size"]) if t.get("size") is not None else None,
                )
                for t in record.get("tranches") or []
            ],
        )

    async def get_distributed_funds(self, waterfall_module_id: str) -> int:
        return await self._read(waterfall_module_id, WATERFALL_MODULE_ABI, "distributedFunds")

    async def get_funds_pending_withdrawal(self, waterfall_module_id: str) -> int:
        return await self._read(waterfall_module_id, WATERFALL_MODULE_ABI, "fundsPendingWithdrawal")

    async def get_tranches(self, waterfall_module_id: str) -> tuple[list[str], list[int]]:
        """On-chain tranche recipients and cumulative thresholds."""
        recipients, thresholds = await self._read(waterfall_module_id, WATERFALL_MODULE_ABI, "getTranches")
        return list(recipients), list(thresholds)

    async def get_pull_balance(self, waterfall_module_id: str, address: str) -> int:
        validate_address(address, "address")
        return await self._read(
            waterfall_module_id,
            WATERFALL_MODULE_ABI,
            "getPullBalance",
            AsyncWeb3.to_checksum_address(address),
        )
