"""Shared plumbing for the domain clients."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3

from ._exceptions import UnsupportedSubgraphChainIdError
from .balances import BalanceAggregator, parse_token_balances
from .constants import DEFAULT_MAX_CONCURRENCY, NetworkConfig, get_network_config, get_product_address
from .events import EventResolver
from .execution import TransactionEngine
from .guards import require_owner, require_provider, require_signer
from .indexer import IndexerClient
from .multicall import build_multicall_descriptor
from .types import (
    AccountBalances,
    BalanceSource,
    CallDescriptor,
    CreateResult,
    EncodeResult,
    EstimateResult,
    ExecutionResult,
    ExecutionStrategy,
    FormattedAccountBalances,
    FormattedTokenBalances,
    MulticallResult,
    SendResult,
    TokenBalances,
    TransactionOverrides,
    TransactionResult,
)
from .validation import validate_address

logger = logging.getLogger(__name__)


class BaseClient:
    """
    Holds the connection, signer, strategy and the shared engines.

    Every mutation goes through ``_execute``: the descriptor runs under the
    configured strategy and, for sends, the receipt's expected events are
    resolved into a typed result.

    Args:
        chain_id: Chain to operate on; must be in the network table
        w3: Chain connection, required for anything that touches the chain
        account: Signing account, required for the Send strategy
        strategy: Send, Estimate or Encode, fixed for this client
        indexer: Subgraph client for metadata and balance reads
        network: Override the network table entry (e.g. custom addresses)
        max_concurrency: Bound on concurrent RPC reads during aggregation
        log_scan: Force log-scan token discovery on or off
    """

    def __init__(
        self,
        chain_id: int,
        w3: AsyncWeb3 | None = None,
        account: LocalAccount | None = None,
        strategy: ExecutionStrategy = ExecutionStrategy.SEND,
        indexer: IndexerClient | None = None,
        network: NetworkConfig | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        log_scan: bool | None = None,
    ) -> None:
        self.network = network or get_network_config(chain_id)
        self.chain_id = chain_id
        self.w3 = w3
        self.account = account
        self.strategy = ExecutionStrategy(strategy)
        self.indexer = indexer

        self.engine = TransactionEngine(w3, account, self.strategy, chain_id)
        self.events = EventResolver(w3)
        self.balances = BalanceAggregator(w3, self.network, log_scan=log_scan, max_concurrency=max_concurrency)

    @property
    def is_send(self) -> bool:
        return self.strategy == ExecutionStrategy.SEND

    def _product_address(self, attribute: str) -> str:
        return AsyncWeb3.to_checksum_address(get_product_address(self.network, attribute))

    def _require_provider(self) -> AsyncWeb3:
        return require_provider(self.w3)

    def _require_signer(self) -> LocalAccount:
        return require_signer(self.w3, self.account)

    def _require_indexer(self) -> IndexerClient:
        if self.indexer is None:
            raise UnsupportedSubgraphChainIdError(self.chain_id)
        return self.indexer

    def _require_write(self) -> None:
        # Send and Encode act as the signer (Encode simulates from it). Estimate only needs a connection.
        if self.strategy == ExecutionStrategy.ESTIMATE:
            self._require_provider()
        else:
            self._require_signer()

    async def _require_owner(self, entity_id: str, **kwargs: Any) -> None:
        # Estimate has no signer identity to compare against
        if self.strategy == ExecutionStrategy.ESTIMATE:
            self._require_provider()
            return
        await require_owner(self.w3, self.account, entity_id, **kwargs)

    async def _read(self, address: str, abi: Sequence[Mapping[str, Any]], function_name: str, *args: Any) -> Any:
        w3 = self._require_provider()
        validate_address(address)
        contract = w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=list(abi))
        return await getattr(contract.functions, function_name)(*args).call()

    def _descriptor(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        function_name: str,
        *args: Any,
        value: int = 0,
        overrides: TransactionOverrides | None = None,
    ) -> CallDescriptor:
        return CallDescriptor(
            address=address,
            abi=[dict(item) for item in abi],
            function_name=function_name,
            args=args,
            value=value,
            overrides=overrides,
        )

    async def _execute(
        self,
        descriptor: CallDescriptor,
        event_abis: Sequence[Mapping[str, Any]],
    ) -> TransactionResult | EstimateResult | EncodeResult:
        """Run ``descriptor``; on Send, wait for the receipt and resolve ``event_abis``."""
        result = await self.engine.execute(descriptor)
        if not isinstance(result, SendResult):
            return result
        events = await self.events.resolve_events(result.tx_hash, event_abis)
        return TransactionResult(tx_hash=result.tx_hash, events=events)

    async def _execute_create(
        self,
        descriptor: CallDescriptor,
        event_abi: Mapping[str, Any],
        id_field: str,
    ) -> CreateResult | EstimateResult | EncodeResult:
        """Run a create call; on Send, return the new entity's address from ``event_abi``."""
        result = await self.engine.execute(descriptor)
        if not isinstance(result, SendResult):
            return result
        event = await self.events.resolve_event(result.tx_hash, [event_abi])
        entity_id = AsyncWeb3.to_checksum_address(event.args[id_field])
        logger.debug("Created %s at %s in %s", event.name, entity_id, result.tx_hash)
        return CreateResult(entity_id=entity_id, event=event, tx_hash=result.tx_hash)

    async def multicall(
        self,
        calls: Sequence[CallDescriptor | EncodeResult],
        overrides: TransactionOverrides | None = None,
    ) -> MulticallResult | EstimateResult | EncodeResult:
        """
        Batch ``calls`` into one Multicall3 ``aggregate`` call, in order.

        Inner calls typically come from a client built with the Encode
        strategy. On Send, every log of the transaction is returned, decoded
        where this client knows the event.

        Note:
            The whole batch reverts if any inner call reverts, and inner calls
            see the multicall contract as ``msg.sender``.
        """
        self._require_write()
        descriptor = build_multicall_descriptor(calls, self.network.multicall_address, overrides)
        result: ExecutionResult = await self.engine.execute(descriptor)
        if not isinstance(result, SendResult):
            return result
        events = await self.events.get_transaction_events(result.tx_hash, self._event_abis(), include_all=True)
        return MulticallResult(tx_hash=result.tx_hash, events=events)

    def _event_abis(self) -> list[Mapping[str, Any]]:
        """Events this client can decode. Overridden per domain."""
        return []

    async def _get_account_balances(
        self,
        account_id: str,
        include_active_balances: bool,
        erc20_token_list: Sequence[str] | None = None,
    ) -> AccountBalances:
        """
        Withdrawn and active balances of any indexed account.

        For a ``User`` account the active balance is its split main internal
        balance. For contracts, live balances are read and added to the
        internal balance, then dust is dropped.
        """
        validate_address(account_id, "account_id")
        indexer = self._require_indexer()
        account = await indexer.get_account_balances(account_id, self.chain_id)

        reserved = self.network.reserved_balance_unit
        withdrawn = parse_token_balances(account.get("withdrawals") or [], BalanceSource.WITHDRAWN, reserved)
        if not include_active_balances:
            return AccountBalances(withdrawn=withdrawn)

        internal = parse_token_balances(account.get("internalBalances") or [], BalanceSource.INTERNAL, reserved)
        if account.get("__typename") == "User":
            return AccountBalances(withdrawn=withdrawn, active_balances=internal)

        self._require_provider()
        active = await self.balances.get_balances(
            account_id,
            {BalanceSource.WITHDRAWN: withdrawn, BalanceSource.INTERNAL: internal},
            [BalanceSource.INTERNAL, BalanceSource.ACTIVE],
            erc20_token_list,
        )
        return AccountBalances(withdrawn=withdrawn, active_balances=active)

    async def _format_account_balances(self, balances: AccountBalances) -> FormattedAccountBalances:
        self._require_provider()
        maps: list[TokenBalances] = [balances.withdrawn]
        if balances.active_balances is not None:
            maps.append(balances.active_balances)
        formatted: list[FormattedTokenBalances] = await self.balances.format_balances(maps)
        return FormattedAccountBalances(
            withdrawn=formatted[0],
            active_balances=formatted[1] if balances.active_balances is not None else None,
        )
