"""Client for v1 splits managed by split main."""

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from web3 import AsyncWeb3

from .abi import SPLIT_MAIN_ABI
from .base import BaseClient
from .codec import get_event_abi
from .constants import ADDRESS_ZERO
from .helpers import (
    from_big_int_to_percent,
    get_big_int_from_percent,
    get_recipient_sorted_addresses_and_allocations,
)
from .types import (
    AccountBalances,
    CreateResult,
    EncodeResult,
    EstimateResult,
    FormattedAccountBalances,
    Split,
    SplitRecipient,
    TransactionOverrides,
    TransactionResult,
)
from .validation import (
    validate_address,
    validate_addresses,
    validate_distributor_fee_percent,
    validate_split_recipients,
)


class SplitV1Client(BaseClient):
    """
    Create, update, distribute and withdraw from v1 splits.

    Example:
        >>> client = SplitV1Client(chain_id=1, w3=w3, account=account)
        >>> result = await client.create_split(
        ...     recipients=[
        ...         SplitRecipient(address="0xAlice...", percent_allocation=60),
        ...         SplitRecipient(address="0xBob...", percent_allocation=40),
        ...     ],
        ...     distributor_fee_percent=1,
        ... )
        >>> result.entity_id
        '0x...'
    """

    @property
    def split_main_address(self) -> str:
        return self._product_address("split_main_address")

    def _event_abis(self) -> list[Mapping[str, Any]]:
        return [item for item in SPLIT_MAIN_ABI if item["type"] == "event"]

    async def create_split(
        self,
        recipients: Sequence[SplitRecipient],
        distributor_fee_percent: Decimal | float | int = 0,
        controller: str = ADDRESS_ZERO,
        overrides: TransactionOverrides | None = None,
    ) -> CreateResult | EstimateResult | EncodeResult:
        """
        Create a split. A zero-address controller makes it immutable.

        Returns:
            CreateResult with the new split address on Send
        """
        validate_split_recipients(recipients)
        validate_distributor_fee_percent(distributor_fee_percent)
        validate_address(controller, "controller")
        self._require_write()

        accounts, allocations = get_recipient_sorted_addresses_and_allocations(recipients)
        descriptor = self._descriptor(
            self.split_main_address,
            SPLIT_MAIN_ABI,
            "createSplit",
            accounts,
            allocations,
            get_big_int_from_percent(distributor_fee_percent),
            AsyncWeb3.to_checksum_address(controller),
            overrides=overrides,
        )
        return await self._execute_create(descriptor, get_event_abi(SPLIT_MAIN_ABI, "CreateSplit"), "split")

    async def update_split(
        self,
        split_id: str,
        recipients: Sequence[SplitRecipient],
        distributor_fee_percent: Decimal | float | int = 0,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Replace a mutable split's recipients and fee. Controller only."""
        validate_address(split_id, "split_id")
        validate_split_recipients(recipients)
        validate_distributor_fee_percent(distributor_fee_percent)
        self._require_write()
        await self._require_owner(
            split_id,
            abi=SPLIT_MAIN_ABI,
            function_name="getController",
            args=(AsyncWeb3.to_checksum_address(split_id),),
            contract_address=self.split_main_address,
        )

        accounts, allocations = get_recipient_sorted_addresses_and_allocations(recipients)
        descriptor = self._descriptor(
            self.split_main_address,
            SPLIT_MAIN_ABI,
            "updateSplit",
            AsyncWeb3.to_checksum_address(split_id),
            accounts,
            allocations,
            get_big_int_from_percent(distributor_fee_percent),
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(SPLIT_MAIN_ABI, "UpdateSplit")])

    async def distribute_token(
        self,
        split_id: str,
        token: str = ADDRESS_ZERO,
        distributor_address: str | None = None,
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """
        Distribute a split's balance of ``token`` to its recipients.

        The current recipients and fee are read from the indexer, since split
        main only stores their hash. The distributor fee goes to
        ``distributor_address`` (default: the signer).
        """
        validate_address(split_id, "split_id")
        validate_address(token, "token")
        if distributor_address is not None:
            validate_address(distributor_address, "distributor_address")
        self._require_write()

        split = await self.get_split_metadata(split_id)
        accounts, allocations = get_recipient_sorted_addresses_and_allocations(split.recipients)
        fee = get_big_int_from_percent(split.distributor_fee_percent)
        distributor = AsyncWeb3.to_checksum_address(
            distributor_address or (self.account.address if self.account else ADDRESS_ZERO)
        )
        split_address = AsyncWeb3.to_checksum_address(split_id)

        if token.lower() == ADDRESS_ZERO:
            descriptor = self._descriptor(
                self.split_main_address,
                SPLIT_MAIN_ABI,
                "distributeETH",
                split_address,
                accounts,
                allocations,
                fee,
                distributor,
                overrides=overrides,
            )
            event_abi = get_event_abi(SPLIT_MAIN_ABI, "DistributeETH")
        else:
            descriptor = self._descriptor(
                self.split_main_address,
                SPLIT_MAIN_ABI,
                "distributeERC20",
                split_address,
                AsyncWeb3.to_checksum_address(token),
                accounts,
                allocations,
                fee,
                distributor,
                overrides=overrides,
            )
            event_abi = get_event_abi(SPLIT_MAIN_ABI, "DistributeERC20")
        return await self._execute(descriptor, [event_abi])

    async def withdraw_funds(
        self,
        address: str,
        tokens: Sequence[str],
        overrides: TransactionOverrides | None = None,
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Withdraw ``address``'s split main balances. The zero address stands for the native token."""
        validate_address(address, "address")
        validate_addresses(tokens, "tokens")
        self._require_write()

        withdraw_eth = 1 if any(t.lower() == ADDRESS_ZERO for t in tokens) else 0
        erc20s = [AsyncWeb3.to_checksum_address(t) for t in tokens if t.lower() != ADDRESS_ZERO]
        descriptor = self._descriptor(
            self.split_main_address,
            SPLIT_MAIN_ABI,
            "withdraw",
            AsyncWeb3.to_checksum_address(address),
            withdraw_eth,
            erc20s,
            overrides=overrides,
        )
        return await self._execute(descriptor, [get_event_abi(SPLIT_MAIN_ABI, "Withdrawal")])

    # Reads

    async def get_split_metadata(self, split_id: str) -> Split:
        """Recipients, controller and fee of a split, from the indexer."""
        validate_address(split_id, "split_id")
        record = await self._require_indexer().get_split(split_id, self.chain_id)

        controller = record.get("controller")
        if controller and controller.lower() == ADDRESS_ZERO:
            controller = None
        return Split(
            id=AsyncWeb3.to_checksum_address(record["id"]),
            controller=AsyncWeb3.to_checksum_address(controller) if controller else None,
            distributor_fee_percent=from_big_int_to_percent(record.get("distributorFee") or 0),
            recipients=[
                SplitRecipient(
                    address=AsyncWeb3.to_checksum_address(r["account"]["id"]),
                    percent_allocation=from_big_int_to_percent(r["ownership"]),
                )
                for r in record.get("recipients") or []
            ],
        )

    async def get_split_balance(self, split_id: str, token: str = ADDRESS_ZERO) -> int:
        """Undistributed balance of a split held by split main."""
        validate_address(split_id, "split_id")
        validate_address(token, "token")
        split_address = AsyncWeb3.to_checksum_address(split_id)
        if token.lower() == ADDRESS_ZERO:
            return await self._read(self.split_main_address, SPLIT_MAIN_ABI, "getETHBalance", split_address)
        return await self._read(
            self.split_main_address,
            SPLIT_MAIN_ABI,
            "getERC20Balance",
            split_address,
            AsyncWeb3.to_checksum_address(token),
        )

    async def get_split_earnings(
        self,
        split_id: str,
        include_active_balances: bool = True,
        erc20_token_list: Sequence[str] | None = None,
    ) -> AccountBalances:
        """Distributed (withdrawn) and still distributable (active) balances of a split."""
        return await self._get_account_balances(split_id, include_active_balances, erc20_token_list)

    async def get_formatted_split_earnings(
        self,
        split_id: str,
        include_active_balances: bool = True,
        erc20_token_list: Sequence[str] | None = None,
    ) -> FormattedAccountBalances:
        self._require_provider()
        balances = await self.get_split_earnings(split_id, include_active_balances, erc20_token_list)
        return await self._format_account_balances(balances)
