"""Tests for the swapper client."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from splits_sdk import InvalidArgumentError, InvalidAuthError, SwapperClient, UnsupportedChainIdError
from splits_sdk.abi import SWAPPER_ABI, SWAPPER_FACTORY_ABI
from splits_sdk.codec import get_event_abi
from splits_sdk.constants import get_network_config
from splits_sdk.swapper import format_calls, format_oracle_params, format_scaled_offer_factor_overrides
from splits_sdk.types import (
    ContractCall,
    CreateOracleParams,
    CreateResult,
    EstimateResult,
    ExecutionStrategy,
    OracleParams,
    ScaledOfferFactorOverride,
    UniV3FlashSwapInputAsset,
)

from .conftest import ALICE, BOB, DAI, ENTITY, NEW_ENTITY, OTHER_CONTRACT, SIGNER, USDC, ZERO, FakeChain, make_log

UNI_V3_SWAP = "0x4444444444444444444444444444444444444444"


def _client(chain: FakeChain, account=None, strategy=ExecutionStrategy.SEND, network=None) -> SwapperClient:
    return SwapperClient(chain_id=1, w3=chain.w3, account=account, strategy=strategy, network=network)


class TestFormatting:
    """Tests for the tuple shapes the swapper contracts expect."""

    def test_existing_oracle(self) -> None:
        assert format_oracle_params(OracleParams(address=ALICE.lower())) == (ALICE, (ZERO, b""))

    def test_oracle_to_create(self) -> None:
        params = OracleParams(create_oracle_params=CreateOracleParams(factory=BOB, data="0xabcd"))
        assert format_oracle_params(params) == (ZERO, (BOB, b"\xab\xcd"))

    def test_empty_oracle_params_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            format_oracle_params(OracleParams())

    def test_pair_overrides(self) -> None:
        overrides = [ScaledOfferFactorOverride(base_token=USDC, quote_token=DAI, scaled_offer_factor_percent=1)]
        assert format_scaled_offer_factor_overrides(overrides) == [((USDC, DAI), 990_000)]

    def test_calls(self) -> None:
        assert format_calls([ContractCall(to=ALICE, value=3, data="0x01")]) == [(ALICE, 3, b"\x01")]


class TestCreateSwapper:
    @pytest.mark.asyncio
    async def test_send_returns_swapper_address(self, chain: FakeChain, account) -> None:
        oracle = (ALICE, (ZERO, b""))
        chain.set_receipt(
            [
                make_log(
                    get_event_abi(SWAPPER_FACTORY_ABI, "CreateSwapper"),
                    ENTITY,
                    0,
                    swapper=NEW_ENTITY,
                    params=(SIGNER, False, BOB, ZERO, oracle, 990_000, []),
                )
            ]
        )
        client = _client(chain, account)

        result = await client.create_swapper(
            owner=SIGNER,
            beneficiary=BOB,
            token_to_beneficiary=ZERO,
            oracle_params=OracleParams(address=ALICE),
            default_scaled_offer_factor_percent=1,
            scaled_offer_factor_overrides=[
                ScaledOfferFactorOverride(base_token=USDC, quote_token=DAI, scaled_offer_factor_percent=Decimal("0.5"))
            ],
        )

        assert isinstance(result, CreateResult)
        assert result.entity_id == NEW_ENTITY
        assert result.event.args["params"] == (SIGNER, False, BOB, ZERO, oracle, 990_000, [])
        (params,) = chain.calls_to("createSwapper")[0][2]
        assert params == (SIGNER, False, BOB, ZERO, oracle, 990_000, [((USDC, DAI), 995_000)])

    @pytest.mark.asyncio
    async def test_offer_factor_bounds(self, chain: FakeChain, account) -> None:
        with pytest.raises(InvalidArgumentError):
            await _client(chain, account).create_swapper(
                owner=SIGNER,
                beneficiary=BOB,
                token_to_beneficiary=ZERO,
                oracle_params=OracleParams(address=ALICE),
                default_scaled_offer_factor_percent=100,
            )
        assert chain.calls == []


class TestOwnerOnlySetters:
    """Every setter checks the live owner first."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "args", "function_name", "expected_args"),
        [
            ("set_paused", (True,), "setPaused", (True,)),
            ("set_beneficiary", (ALICE.lower(),), "setBeneficiary", (ALICE,)),
            ("set_token_to_beneficiary", (USDC,), "setTokenToBeneficiary", (USDC,)),
            ("set_oracle", (BOB,), "setOracle", (BOB,)),
            ("set_default_scaled_offer_factor", (Decimal("2.5"),), "setDefaultScaledOfferFactor", (975_000,)),
            (
                "set_scaled_offer_factor_overrides",
                ([ScaledOfferFactorOverride(base_token=USDC, quote_token=DAI, scaled_offer_factor_percent=0)],),
                "setPairScaledOfferFactors",
                ([((USDC, DAI), 1_000_000)],),
            ),
            (
                "exec_calls",
                ([ContractCall(to=OTHER_CONTRACT, data="0x")],),
                "execCalls",
                ([(OTHER_CONTRACT, 0, b"")],),
            ),
        ],
    )
    async def test_owner_can_call(self, chain: FakeChain, account, method, args, function_name, expected_args) -> None:
        chain.returns("owner", SIGNER)
        client = _client(chain, account, ExecutionStrategy.ENCODE)

        await getattr(client, method)(ENTITY, *args)

        assert chain.calls_to("owner") == [(ENTITY, "owner", ())]
        assert chain.calls_to(function_name) == [(ENTITY, function_name, expected_args)]

    @pytest.mark.asyncio
    async def test_non_owner_rejected(self, chain: FakeChain, account) -> None:
        chain.returns("owner", ALICE)

        with pytest.raises(InvalidAuthError):
            await _client(chain, account).set_beneficiary(ENTITY, BOB)

        assert chain.calls_to("setBeneficiary") == []
        assert not chain.sent

    @pytest.mark.asyncio
    async def test_estimate_skips_owner_check(self, chain: FakeChain) -> None:
        result = await _client(chain, strategy=ExecutionStrategy.ESTIMATE).set_paused(ENTITY, False)

        assert isinstance(result, EstimateResult)
        assert chain.calls_to("owner") == []

    @pytest.mark.asyncio
    async def test_setter_event_is_resolved(self, chain: FakeChain, account) -> None:
        chain.returns("owner", SIGNER)
        chain.set_receipt([make_log(get_event_abi(SWAPPER_ABI, "SetPaused"), ENTITY, 0, paused=True)])

        result = await _client(chain, account).set_paused(ENTITY, True)

        assert result.event.name == "SetPaused"
        assert result.event.args == {"paused": True}


class TestFlashSwap:
    @pytest.mark.asyncio
    async def test_builds_quote_and_exact_input_params(self, chain: FakeChain, account) -> None:
        network = get_network_config(1).model_copy(update={"uni_v3_swap_address": UNI_V3_SWAP})
        client = _client(chain, account, ExecutionStrategy.ENCODE, network)

        with patch("splits_sdk.swapper.time.time", return_value=1_000):
            await client.uni_v3_flash_swap(
                ENTITY,
                output_token=ZERO,
                input_assets=[
                    UniV3FlashSwapInputAsset(token=USDC, amount_in=100, amount_out_min=90, encoded_path="0x0102"),
                    UniV3FlashSwapInputAsset(token=DAI, amount_in=50),
                ],
            )

        address, _, (swapper, (quote_params, (exact_input_params, excess))) = chain.calls_to("initFlash")[0]
        assert address == UNI_V3_SWAP
        assert swapper == ENTITY
        assert quote_params == [((USDC, ZERO), 100, b""), ((DAI, ZERO), 50, b"")]
        assert exact_input_params == [(b"\x01\x02", UNI_V3_SWAP, 1_030, 100, 90)]
        assert excess == SIGNER

    @pytest.mark.asyncio
    async def test_needs_swap_deployment(self, chain: FakeChain, account) -> None:
        with pytest.raises(UnsupportedChainIdError):
            await _client(chain, account).uni_v3_flash_swap(
                ENTITY, output_token=ZERO, input_assets=[UniV3FlashSwapInputAsset(token=USDC, amount_in=1)]
            )


class TestSwapperReads:
    @pytest.mark.asyncio
    async def test_reads(self, chain: FakeChain) -> None:
        chain.returns("beneficiary", ALICE)
        chain.returns("tokenToBeneficiary", ZERO)
        chain.returns("oracle", BOB)
        chain.returns("defaultScaledOfferFactor", 990_000)
        chain.returns("paused", False)
        client = _client(chain)

        assert await client.get_beneficiary(ENTITY) == ALICE
        assert await client.get_token_to_beneficiary(ENTITY) == ZERO
        assert await client.get_oracle(ENTITY) == BOB
        assert await client.get_default_scaled_offer_factor(ENTITY) == Decimal("1")
        assert await client.get_paused(ENTITY) is False
