"""High-level async client bundling every product client."""

import os

import httpx
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3

from .constants import DEFAULT_MAX_CONCURRENCY, NetworkConfig, get_network_config
from .data import DataClient
from .indexer import IndexerClient
from .pass_through_wallet import PassThroughWalletClient
from .splits import SplitV1Client
from .swapper import SwapperClient
from .types import ExecutionStrategy
from .vesting import VestingClient
from .waterfall import WaterfallClient

RPC_URL_ENV = "SPLITS_RPC_URL"
PRIVATE_KEY_ENV = "SPLITS_PRIVATE_KEY"
SUBGRAPH_URL_ENV = "SPLITS_SUBGRAPH_URL"


class SplitsClient:
    """
    Async client for the splits contract family on one chain.

    Product clients share one connection, signer, indexer and strategy:
    ``splits``, ``waterfall``, ``swapper``, ``pass_through_wallet``,
    ``vesting`` and ``data``.

    Example:
        >>> import asyncio
        >>> from splits_sdk import SplitsClient, SplitRecipient
        >>>
        >>> async def main():
        ...     async with SplitsClient(
        ...         chain_id=1,
        ...         rpc_url="https://eth.llamarpc.com",
        ...         private_key="0x...",
        ...     ) as client:
        ...         result = await client.splits.create_split(
        ...             recipients=[
        ...                 SplitRecipient(address="0xAlice...", percent_allocation=60),
        ...                 SplitRecipient(address="0xBob...", percent_allocation=40),
        ...             ],
        ...         )
        ...         print(f"Split created at {result.entity_id}")
        ...
        ...         # Same configuration, gas estimates only
        ...         gas = await client.with_strategy("estimate").splits.withdraw_funds(
        ...             address=client.address, tokens=["0x0000000000000000000000000000000000000000"]
        ...         )
        >>>
        >>> asyncio.run(main())
    """

    def __init__(
        self,
        chain_id: int = 1,
        rpc_url: str | None = None,
        private_key: str | None = None,
        strategy: ExecutionStrategy | str = ExecutionStrategy.SEND,
        subgraph_url: str | None = None,
        w3: AsyncWeb3 | None = None,
        account: LocalAccount | None = None,
        indexer: IndexerClient | None = None,
        http_client: httpx.AsyncClient | None = None,
        network: NetworkConfig | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        log_scan: bool | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            chain_id: Chain ID (1 for Ethereum mainnet)
            rpc_url: RPC endpoint URL. Falls back to SPLITS_RPC_URL env var.
            private_key: Private key for signing. Falls back to SPLITS_PRIVATE_KEY env var.
            strategy: "send", "estimate" or "encode"
            subgraph_url: Indexer URL. Falls back to SPLITS_SUBGRAPH_URL, then
                to the network's default subgraph.
            w3: Existing connection (takes precedence over rpc_url)
            account: Existing signer (takes precedence over private_key)
            indexer: Existing indexer client (takes precedence over subgraph_url)
            http_client: httpx client for the indexer
            network: Network table entry override (custom addresses)
            max_concurrency: Bound on concurrent RPC reads
            log_scan: Force log-scan token discovery on or off

        Without a connection or signer the client still works for the
        operations that do not need them; the rest raise MissingProviderError
        or MissingSignerError.

        Raises:
            UnsupportedChainIdError: If chain_id is not in the network table
        """
        self.network = network or get_network_config(chain_id)
        self.chain_id = chain_id
        self.strategy = ExecutionStrategy(strategy)
        self.max_concurrency = max_concurrency
        self.log_scan = log_scan

        # Resolve from environment
        self._owns_w3 = w3 is None
        if w3 is None:
            resolved_rpc = rpc_url or os.environ.get(RPC_URL_ENV)
            w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(resolved_rpc)) if resolved_rpc else None
        self.w3 = w3

        if account is None:
            resolved_key = private_key or os.environ.get(PRIVATE_KEY_ENV)
            account = Account.from_key(resolved_key) if resolved_key else None
        self.account = account

        self._owns_indexer = indexer is None
        if indexer is None:
            resolved_subgraph = subgraph_url or os.environ.get(SUBGRAPH_URL_ENV) or self.network.subgraph_url
            indexer = IndexerClient(resolved_subgraph, http_client) if resolved_subgraph else None
        self.indexer = indexer

        shared = dict(
            chain_id=chain_id,
            w3=self.w3,
            account=self.account,
            strategy=self.strategy,
            indexer=self.indexer,
            network=self.network,
            max_concurrency=max_concurrency,
            log_scan=log_scan,
        )
        self.splits = SplitV1Client(**shared)
        self.waterfall = WaterfallClient(**shared)
        self.swapper = SwapperClient(**shared)
        self.pass_through_wallet = PassThroughWalletClient(**shared)
        self.vesting = VestingClient(**shared)
        self.data = DataClient(**shared)

    @property
    def address(self) -> str | None:
        """Get the signer address."""
        return self.account.address if self.account else None

    def with_strategy(self, strategy: ExecutionStrategy | str) -> "SplitsClient":
        """
        A client sharing this one's connection, signer and indexer, with a different strategy.

        The returned client does not own the shared resources; close this one.
        """
        return SplitsClient(
            chain_id=self.chain_id,
            strategy=strategy,
            w3=self.w3,
            account=self.account,
            indexer=self.indexer,
            network=self.network,
            max_concurrency=self.max_concurrency,
            log_scan=self.log_scan,
        )

    async def close(self) -> None:
        """Close the HTTP sessions this client created."""
        if self._owns_indexer and self.indexer is not None:
            await self.indexer.close()
        if self._owns_w3 and self.w3 is not None:
            await self.w3.provider.disconnect()

    async def __aenter__(self) -> "SplitsClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager and close sessions."""
        await self.close()
