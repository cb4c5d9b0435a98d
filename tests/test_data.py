"""Tests for indexer-backed balance reads."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from splits_sdk import DataClient, MissingProviderError, UnsupportedSubgraphChainIdError
from splits_sdk.types import AccountBalances, BalanceSource

from .conftest import ALICE, DAI, ENTITY, OTHER_CONTRACT, USDC, ZERO, FakeChain


def _record(owner: str, token: str, amount: int) -> dict:
    return {"id": f"{owner.lower()}-{token.lower()}", "amount": str(amount)}


def _client(chain: FakeChain | None, **indexer_methods) -> DataClient:
    indexer = MagicMock()
    for name, value in indexer_methods.items():
        setattr(indexer, name, AsyncMock(return_value=value))
    return DataClient(chain_id=1, w3=chain.w3 if chain else None, indexer=indexer)


class TestAccountBalances:
    @pytest.mark.asyncio
    async def test_user_active_balance_is_internal(self, chain: FakeChain) -> None:
        """A user's claimable balance is what split main holds for it; no RPC is needed."""
        account = {
            "__typename": "User",
            "withdrawals": [_record(ALICE, USDC, 11)],
            "internalBalances": [_record(ALICE, ZERO, 5)],
        }
        client = _client(chain, get_account_balances=account)

        balances = await client.get_account_balances(ALICE)

        assert balances == AccountBalances(withdrawn={USDC: 10}, active_balances={ZERO: 5})
        assert chain.calls == []
        chain.w3.eth.get_balance.assert_not_called()

    @pytest.mark.asyncio
    async def test_contract_needs_provider_for_active(self) -> None:
        account = {"__typename": "WaterfallModule", "withdrawals": [], "internalBalances": []}
        client = _client(None, get_account_balances=account)

        with pytest.raises(MissingProviderError):
            await client.get_account_balances(ENTITY, erc20_token_list=[USDC])

    @pytest.mark.asyncio
    async def test_needs_indexer(self, chain: FakeChain) -> None:
        client = DataClient(chain_id=56, w3=chain.w3)

        with pytest.raises(UnsupportedSubgraphChainIdError):
            await client.get_account_balances(ALICE)

    @pytest.mark.asyncio
    async def test_formatted(self, chain: FakeChain) -> None:
        account = {
            "__typename": "User",
            "withdrawals": [_record(ALICE, ZERO, 10**18 + 1)],
            "internalBalances": [],
        }
        client = _client(chain, get_account_balances=account)

        formatted = await client.get_formatted_account_balances(ALICE)

        assert formatted.withdrawn[ZERO].formatted_amount == "1"
        assert formatted.withdrawn[ZERO].symbol == "ETH"
        assert formatted.active_balances == {}

    @pytest.mark.asyncio
    async def test_formatted_without_provider_fails_before_indexer(self) -> None:
        client = _client(None, get_account_balances={"__typename": "User"})

        with pytest.raises(MissingProviderError):
            await client.get_formatted_account_balances(ALICE)

        client.indexer.get_account_balances.assert_not_awaited()


class TestGetBalances:
    """Tests for source selection."""

    ACCOUNT = {
        "__typename": "Split",
        "withdrawals": [_record(ENTITY, USDC, 5)],
        "internalBalances": [_record(ENTITY, USDC, 3), _record(ENTITY, DAI, 1)],
    }

    @pytest.mark.asyncio
    async def test_default_sources_are_withdrawn_and_internal(self, chain: FakeChain) -> None:
        client = _client(chain, get_account_balances=self.ACCOUNT)

        balances = await client.get_balances(ENTITY)

        # USDC: (5 - 1) + 3; DAI 1 is dust
        assert balances == {USDC: 7}
        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_single_source(self, chain: FakeChain) -> None:
        client = _client(chain, get_account_balances=self.ACCOUNT)

        assert await client.get_balances(ENTITY, [BalanceSource.INTERNAL]) == {USDC: 3}

    @pytest.mark.asyncio
    async def test_with_active(self, chain: FakeChain) -> None:
        chain.w3.eth.get_balance = AsyncMock(return_value=2)
        chain.returns("balanceOf", 4)
        client = _client(chain, get_account_balances=self.ACCOUNT)

        balances = await client.get_balances(
            ENTITY,
            [BalanceSource.WITHDRAWN, BalanceSource.INTERNAL, BalanceSource.ACTIVE],
            erc20_token_list=[USDC],
        )

        assert balances == {USDC: 11, DAI: 5, ZERO: 2}

    @pytest.mark.asyncio
    async def test_active_without_provider_fails_before_indexer(self) -> None:
        client = _client(None, get_account_balances=self.ACCOUNT)

        with pytest.raises(MissingProviderError):
            await client.get_balances(ENTITY, [BalanceSource.ACTIVE], erc20_token_list=[USDC])

        client.indexer.get_account_balances.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_indexer_sources_need_no_provider(self) -> None:
        client = _client(None, get_account_balances=self.ACCOUNT)

        assert await client.get_balances(ENTITY) == {USDC: 7}


class TestEarningsByContract:
    @pytest.mark.asyncio
    async def test_per_contract_earnings(self, chain: FakeChain) -> None:
        """Per-contract withdrawals are reported in full; no reserved unit applies."""
        records = [
            {
                "contract": {"id": ENTITY.lower()},
                "withdrawals": [_record(ALICE, USDC, 5)],
                "internalBalances": [_record(ALICE, USDC, 3)],
            },
            {
                "contract": {"id": OTHER_CONTRACT.lower()},
                "withdrawals": [_record(ALICE, ZERO, 1)],
                "internalBalances": [],
            },
        ]
        client = _client(chain, get_user_balances_by_contract=records)

        earnings = await client.get_user_earnings_by_contract(ALICE, [ENTITY, OTHER_CONTRACT])

        assert earnings == {ENTITY: {USDC: 8}, OTHER_CONTRACT: {ZERO: 1}}
        client.indexer.get_user_balances_by_contract.assert_awaited_once_with(ALICE, [ENTITY, OTHER_CONTRACT], 1)

    @pytest.mark.asyncio
    async def test_formatted_per_contract(self, chain: FakeChain) -> None:
        records = [
            {
                "contract": {"id": ENTITY.lower()},
                "withdrawals": [],
                "internalBalances": [_record(ALICE, USDC, 2_000_000)],
            }
        ]
        chain.returns("symbol", "USDC")
        chain.returns("decimals", 6)
        client = _client(chain, get_user_balances_by_contract=records)

        formatted = await client.get_formatted_user_earnings_by_contract(ALICE)

        assert formatted[ENTITY][USDC].formatted_amount == "2"
        client.indexer.get_user_balances_by_contract.assert_awaited_once_with(ALICE, None, 1)

    @pytest.mark.asyncio
    async def test_formatted_without_provider_fails_before_indexer(self) -> None:
        client = _client(None, get_user_balances_by_contract=[])

        with pytest.raises(MissingProviderError):
            await client.get_formatted_user_earnings_by_contract(ALICE)

        client.indexer.get_user_balances_by_contract.assert_not_awaited()
