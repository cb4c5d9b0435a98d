"""Tests for the waterfall module client."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from splits_sdk import InvalidArgumentError, WaterfallClient
from splits_sdk.abi import WATERFALL_MODULE_ABI, WATERFALL_MODULE_FACTORY_ABI
from splits_sdk.codec import get_event_abi
from splits_sdk.types import (
    CreateResult,
    EncodeResult,
    ExecutionStrategy,
    TransactionResult,
    WaterfallTrancheInput,
)

from .conftest import ALICE, BOB, DAI, ENTITY, NEW_ENTITY, SIGNER, USDC, ZERO, FakeChain, make_log

WATERFALL_RECORD = {
    "id": ENTITY.lower(),
    "token": {"id": USDC.lower()},
    "nonWaterfallRecipient": ZERO,
    "distributedFunds": "2500000",
    "tranches": [
        {"recipient": {"id": ALICE.lower()}, "startAmount": "0", "size": "1000000"},
        {"recipient": {"id": BOB.lower()}, "startAmount": "1000000", "size": None},
    ],
}


def _client(chain: FakeChain, account=None, strategy=ExecutionStrategy.SEND, indexer=None) -> WaterfallClient:
    return WaterfallClient(chain_id=1, w3=chain.w3, account=account, strategy=strategy, indexer=indexer)


def _indexer() -> MagicMock:
    indexer = MagicMock()
    indexer.get_waterfall_module = AsyncMock(return_value=WATERFALL_RECORD)
    return indexer


def _usdc(chain: FakeChain) -> None:
    chain.returns("symbol", "USDC")
    chain.returns("decimals", 6)


class TestThresholds:
    """Tranche sizes become cumulative thresholds in base units."""

    @pytest.mark.asyncio
    async def test_cumulative_thresholds(self, chain: FakeChain) -> None:
        _usdc(chain)
        client = _client(chain)

        recipients, thresholds = await client.get_tranche_recipients_and_thresholds(
            USDC,
            [
                WaterfallTrancheInput(recipient=ALICE, size=Decimal("1.5")),
                WaterfallTrancheInput(recipient=BOB, size=2),
                WaterfallTrancheInput(recipient=SIGNER),
            ],
        )

        assert recipients == [ALICE, BOB, SIGNER]
        assert thresholds == [1_500_000, 3_500_000]

    @pytest.mark.asyncio
    async def test_native_token_uses_18_decimals(self, chain: FakeChain) -> None:
        client = _client(chain)

        _, thresholds = await client.get_tranche_recipients_and_thresholds(
            ZERO,
            [WaterfallTrancheInput(recipient=ALICE, size=1), WaterfallTrancheInput(recipient=BOB)],
        )

        assert thresholds == [10**18]
        assert chain.calls_to("decimals") == []


class TestCreateWaterfallModule:
    @pytest.mark.asyncio
    async def test_send_returns_module_address(self, chain: FakeChain, account) -> None:
        _usdc(chain)
        chain.set_receipt(
            [
                make_log(
                    get_event_abi(WATERFALL_MODULE_FACTORY_ABI, "CreateWaterfallModule"),
                    ENTITY,
                    0,
                    waterfallModule=NEW_ENTITY,
                    token=USDC,
                    nonWaterfallRecipient=ZERO,
                    recipients=[ALICE, BOB],
                    thresholds=[1_000_000],
                )
            ]
        )
        client = _client(chain, account)

        result = await client.create_waterfall_module(
            USDC,
            [WaterfallTrancheInput(recipient=ALICE, size=1), WaterfallTrancheInput(recipient=BOB)],
        )

        assert isinstance(result, CreateResult)
        assert result.entity_id == NEW_ENTITY
        address, _, args = chain.calls_to("createWaterfallModule")[0]
        assert address == client.factory_address
        assert args == (USDC, ZERO, [ALICE, BOB], [1_000_000])

    @pytest.mark.asyncio
    async def test_size_finer_than_token_decimals(self, chain: FakeChain, account) -> None:
        _usdc(chain)
        client = _client(chain, account)

        with pytest.raises(InvalidArgumentError) as exc_info:
            await client.create_waterfall_module(
                USDC,
                [
                    WaterfallTrancheInput(recipient=ALICE, size=Decimal("0.0000001")),
                    WaterfallTrancheInput(recipient=BOB),
                ],
            )

        assert exc_info.value.field == "tranches.size"
        assert not chain.sent

    @pytest.mark.asyncio
    async def test_invalid_tranches_before_io(self, chain: FakeChain, account) -> None:
        with pytest.raises(InvalidArgumentError):
            await _client(chain, account).create_waterfall_module(
                USDC, [WaterfallTrancheInput(recipient=ALICE, size=1)]
            )
        assert chain.calls == []


class TestWaterfallActions:
    @pytest.mark.asyncio
    async def test_waterfall_funds(self, chain: FakeChain, account) -> None:
        chain.set_receipt(
            [
                make_log(
                    get_event_abi(WATERFALL_MODULE_ABI, "WaterfallFunds"),
                    ENTITY,
                    0,
                    recipients=[ALICE],
                    payouts=[5],
                    pullFlowFlag=0,
                )
            ]
        )

        result = await _client(chain, account).waterfall_funds(ENTITY)

        assert isinstance(result, TransactionResult)
        assert result.event.args["recipients"] == [ALICE]

    @pytest.mark.asyncio
    async def test_recover_other_token_to_tranche_recipient(self, chain: FakeChain, account) -> None:
        _usdc(chain)
        client = _client(chain, account, ExecutionStrategy.ENCODE, _indexer())

        result = await client.recover_non_waterfall_funds(ENTITY, DAI, BOB)

        assert isinstance(result, EncodeResult)
        assert chain.calls_to("recoverNonWaterfallFunds")[0][2] == (DAI, BOB)

    @pytest.mark.asyncio
    async def test_recover_waterfall_token_rejected(self, chain: FakeChain, account) -> None:
        _usdc(chain)
        client = _client(chain, account, indexer=_indexer())

        with pytest.raises(InvalidArgumentError, match="primary token") as exc_info:
            await client.recover_non_waterfall_funds(ENTITY, USDC.lower(), ALICE)

        assert exc_info.value.field == "token"
        assert chain.calls_to("recoverNonWaterfallFunds") == []

    @pytest.mark.asyncio
    async def test_recover_to_non_recipient_rejected(self, chain: FakeChain, account) -> None:
        _usdc(chain)
        client = _client(chain, account, indexer=_indexer())

        with pytest.raises(InvalidArgumentError, match="not found in any tranche") as exc_info:
            await client.recover_non_waterfall_funds(ENTITY, DAI, SIGNER)

        assert exc_info.value.field == "recipient"

    @pytest.mark.asyncio
    async def test_withdraw_pull_funds(self, chain: FakeChain, account) -> None:
        client = _client(chain, account, ExecutionStrategy.ENCODE)

        await client.withdraw_pull_funds(ENTITY, ALICE.lower())

        assert chain.calls_to("withdraw")[0] == (ENTITY, "withdraw", (ALICE,))


class TestWaterfallReads:
    @pytest.mark.asyncio
    async def test_metadata_in_token_units(self, chain: FakeChain) -> None:
        _usdc(chain)
        client = _client(chain, indexer=_indexer())

        module = await client.get_waterfall_metadata(ENTITY)

        assert module.id == ENTITY
        assert module.token == USDC
        assert module.token_symbol == "USDC"
        assert module.distributed_funds == Decimal("2.5")
        assert module.tranches[0].recipient_address == ALICE
        assert module.tranches[0].size == Decimal("1")
        assert module.tranches[1].start_amount == Decimal("1")
        assert module.tranches[1].size is None

    @pytest.mark.asyncio
    async def test_chain_reads(self, chain: FakeChain) -> None:
        chain.returns("distributedFunds", 10)
        chain.returns("fundsPendingWithdrawal", 3)
        chain.returns("getTranches", ([ALICE, BOB], [100]))
        chain.returns("getPullBalance", 4)
        client = _client(chain)

        assert await client.get_distributed_funds(ENTITY) == 10
        assert await client.get_funds_pending_withdrawal(ENTITY) == 3
        assert await client.get_tranches(ENTITY) == ([ALICE, BOB], [100])
        assert await client.get_pull_balance(ENTITY, ALICE) == 4
