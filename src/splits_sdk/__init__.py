# Suppress websockets deprecation warning from web3.py (ethereum/web3.py#3530)
# web3.py unconditionally imports LegacyWebSocketProvider even for HTTP-only usage.
# This will be fixed in web3.py v8. Remove this filter after upgrading.
import warnings

warnings.filterwarnings(
    "ignore",
    message="websockets.legacy is deprecated",
    category=DeprecationWarning,
    module=r"websockets\.legacy",
)

"""
Splits SDK

Async client for the splits contract family: splits, waterfalls, swappers,
pass-through wallets and vesting modules, plus indexer-backed balance reads.

Usage:
    import asyncio
    from splits_sdk import SplitsClient, SplitRecipient

    async def main():
        async with SplitsClient(
            chain_id=1,
            rpc_url="https://eth.llamarpc.com",
            private_key="0x...",
        ) as client:
            result = await client.splits.create_split(
                recipients=[
                    SplitRecipient(address="0xAlice...", percent_allocation=60),
                    SplitRecipient(address="0xBob...", percent_allocation=40),
                ],
                distributor_fee_percent=1,
            )

    asyncio.run(main())

Estimate gas or encode call data instead of sending:
    estimator = client.with_strategy("estimate")
    gas = await estimator.splits.withdraw_funds(address, tokens)

    encoder = client.with_strategy("encode")
    calls = [
        await encoder.waterfall.waterfall_funds(waterfall_a),
        await encoder.waterfall.waterfall_funds(waterfall_b),
    ]
    result = await client.splits.multicall(calls)

Low-level building blocks:
    from splits_sdk import CallDescriptor, TransactionEngine, ExecutionStrategy

    engine = TransactionEngine(w3, account, ExecutionStrategy.SEND, chain_id=1)
    result = await engine.execute(descriptor)
"""

from ._exceptions import (
    AccountNotFoundError,
    IndexerError,
    InvalidArgumentError,
    InvalidAuthError,
    InvalidConfigError,
    MissingProviderError,
    MissingSignerError,
    SplitsError,
    TransactionFailedError,
    UnsupportedChainIdError,
    UnsupportedSubgraphChainIdError,
)
from ._version import __version__

# Balance aggregation
from .balances import BalanceAggregator, filter_dust, merge_balances, parse_token_balances

# Product clients
from .base import BaseClient
from .client import SplitsClient

# Constants
from .constants import (
    ADDRESS_ZERO,
    MULTICALL_3_ADDRESS,
    NETWORKS,
    SUPPORTED_CHAIN_IDS,
    NetworkConfig,
    get_network_config,
    get_subgraph_url,
    is_supported_chain,
)
from .data import DataClient

# Execution core
from .events import EventResolver
from .execution import TransactionEngine

# Helpers
from .helpers import (
    from_big_int_to_percent,
    from_big_int_to_token_value,
    get_big_int_from_percent,
    get_formatted_scaled_offer_factor,
    get_recipient_sorted_addresses_and_allocations,
)
from .indexer import IndexerClient
from .multicall import build_multicall_descriptor
from .pass_through_wallet import PassThroughWalletClient
from .splits import SplitV1Client
from .swapper import SwapperClient

# Types
from .types import (
    AccountBalances,
    BalanceSource,
    CallDescriptor,
    ContractCall,
    CreateOracleParams,
    CreateResult,
    EncodeResult,
    EstimateResult,
    EventRecord,
    ExecutionResult,
    ExecutionStrategy,
    FormattedAccountBalances,
    FormattedTokenBalance,
    MulticallResult,
    OracleParams,
    ScaledOfferFactorOverride,
    SendResult,
    Split,
    SplitRecipient,
    TokenData,
    TransactionOverrides,
    TransactionResult,
    UniV3FlashSwapInputAsset,
    WaterfallModule,
    WaterfallTranche,
    WaterfallTrancheInput,
)
from .vesting import VestingClient
from .waterfall import WaterfallClient

__all__ = [
    # Version
    "__version__",
    # Clients
    "SplitsClient",
    "BaseClient",
    "SplitV1Client",
    "WaterfallClient",
    "SwapperClient",
    "PassThroughWalletClient",
    "VestingClient",
    "DataClient",
    "IndexerClient",
    # Execution core
    "TransactionEngine",
    "EventResolver",
    "BalanceAggregator",
    "build_multicall_descriptor",
    "parse_token_balances",
    "merge_balances",
    "filter_dust",
    # Types
    "ExecutionStrategy",
    "BalanceSource",
    "CallDescriptor",
    "TransactionOverrides",
    "ExecutionResult",
    "SendResult",
    "EstimateResult",
    "EncodeResult",
    "EventRecord",
    "CreateResult",
    "TransactionResult",
    "MulticallResult",
    "AccountBalances",
    "FormattedAccountBalances",
    "FormattedTokenBalance",
    "TokenData",
    "SplitRecipient",
    "Split",
    "WaterfallTrancheInput",
    "WaterfallTranche",
    "WaterfallModule",
    "ContractCall",
    "CreateOracleParams",
    "OracleParams",
    "ScaledOfferFactorOverride",
    "UniV3FlashSwapInputAsset",
    # Constants
    "ADDRESS_ZERO",
    "MULTICALL_3_ADDRESS",
    "NETWORKS",
    "SUPPORTED_CHAIN_IDS",
    "NetworkConfig",
    "get_network_config",
    "get_subgraph_url",
    "is_supported_chain",
    # Helpers
    "get_big_int_from_percent",
    "get_recipient_sorted_addresses_and_allocations",
    "get_formatted_scaled_offer_factor",
    "from_big_int_to_token_value",
    "from_big_int_to_percent",
    # Exceptions
    "SplitsError",
    "InvalidConfigError",
    "MissingProviderError",
    "MissingSignerError",
    "UnsupportedChainIdError",
    "UnsupportedSubgraphChainIdError",
    "InvalidArgumentError",
    "InvalidAuthError",
    "AccountNotFoundError",
    "IndexerError",
    "TransactionFailedError",
]
