"""Read-only balance and earnings queries across all account types."""

from collections.abc import Sequence

from web3 import AsyncWeb3

from .balances import merge_balances, parse_token_balances
from .base import BaseClient
from .types import (
    AccountBalances,
    BalanceSource,
    EarningsByContract,
    FormattedAccountBalances,
    FormattedEarningsByContract,
    TokenBalances,
)
from .validation import validate_address, validate_addresses

DEFAULT_BALANCE_SOURCES = (BalanceSource.WITHDRAWN, BalanceSource.INTERNAL)


class DataClient(BaseClient):
    """
    Balance reads backed by the indexer, optionally supplemented on-chain.

    Example:
        >>> data = DataClient(chain_id=1, w3=w3, indexer=IndexerClient(get_subgraph_url(1)))
        >>> balances = await data.get_balances(
        ...     "0xSplit...",
        ...     sources=[BalanceSource.WITHDRAWN, BalanceSource.INTERNAL, BalanceSource.ACTIVE],
        ...     erc20_token_list=["0xUSDC..."],
        ... )
    """

    async def get_account_balances(
        self,
        account_id: str,
        include_active_balances: bool = True,
        erc20_token_list: Sequence[str] | None = None,
    ) -> AccountBalances:
        """
        Withdrawn and active balances of a user or contract.

        Args:
            account_id: User, split, waterfall or other indexed account
            include_active_balances: Also compute what is still claimable
            erc20_token_list: Tokens to read live balances for. Required for
                contracts unless the connection supports the log scan.

        Raises:
            AccountNotFoundError: The indexer has no record (possibly lag)
            InvalidArgumentError: Active balances need a token list
        """
        return await self._get_account_balances(account_id, include_active_balances, erc20_token_list)

    async def get_formatted_account_balances(
        self,
        account_id: str,
        include_active_balances: bool = True,
        erc20_token_list: Sequence[str] | None = None,
    ) -> FormattedAccountBalances:
        self._require_provider()
        balances = await self.get_account_balances(account_id, include_active_balances, erc20_token_list)
        return await self._format_account_balances(balances)

    async def get_balances(
        self,
        account_id: str,
        sources: Sequence[BalanceSource] = DEFAULT_BALANCE_SOURCES,
        erc20_token_list: Sequence[str] | None = None,
    ) -> TokenBalances:
        """
        One merged, dust-filtered balance map across the requested ``sources``.

        Withdrawn amounts exclude the reserved unit; amounts from every
        source are summed per token.
        """
        validate_address(account_id, "account_id")
        if erc20_token_list is not None:
            validate_addresses(erc20_token_list, "erc20_token_list")
        if BalanceSource.ACTIVE in sources:
            self._require_provider()
        account = await self._require_indexer().get_account_balances(account_id, self.chain_id)

        reserved = self.network.reserved_balance_unit
        source_maps = {
            BalanceSource.WITHDRAWN: parse_token_balances(
                account.get("withdrawals") or [], BalanceSource.WITHDRAWN, reserved
            ),
            BalanceSource.INTERNAL: parse_token_balances(
                account.get("internalBalances") or [], BalanceSource.INTERNAL, reserved
            ),
        }
        return await self.balances.get_balances(account_id, source_maps, list(sources), erc20_token_list)

    async def get_user_earnings_by_contract(
        self,
        user_id: str,
        contract_ids: Sequence[str] | None = None,
    ) -> EarningsByContract:
        """Withdrawn plus internal earnings of a user, per paying contract."""
        validate_address(user_id, "user_id")
        if contract_ids is not None:
            validate_addresses(contract_ids, "contract_ids")
        records = await self._require_indexer().get_user_balances_by_contract(
            user_id, list(contract_ids) if contract_ids is not None else None, self.chain_id
        )

        earnings: EarningsByContract = {}
        for record in records:
            contract = AsyncWeb3.to_checksum_address(record["contract"]["id"])
            # Per-contract earnings carry no reserved unit
            withdrawn = parse_token_balances(record.get("withdrawals") or [], BalanceSource.INTERNAL)
            internal = parse_token_balances(record.get("internalBalances") or [], BalanceSource.INTERNAL)
            earnings[contract] = merge_balances(withdrawn, internal)
        return earnings

    async def get_formatted_user_earnings_by_contract(
        self,
        user_id: str,
        contract_ids: Sequence[str] | None = None,
    ) -> FormattedEarningsByContract:
        self._require_provider()
        earnings = await self.get_user_earnings_by_contract(user_id, contract_ids)
        contracts = list(earnings)
        formatted = await self.balances.format_balances([earnings[c] for c in contracts])
        return dict(zip(contracts, formatted))
