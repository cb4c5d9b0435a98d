"""
Balance aggregation across indexer records and live chain state.

Each source (withdrawn, internal, active) is parsed into its own
``TokenBalances`` map keyed by checksummed token address. Maps are then
merged additively, dust is filtered, and the result can be formatted with
per-token symbol and decimals.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from eth_utils import to_checksum_address
from web3 import AsyncWeb3

from ._exceptions import InvalidArgumentError
from .abi import ERC20_ABI
from .codec import event_topic, get_event_abi
from .constants import DEFAULT_MAX_CONCURRENCY, NetworkConfig
from .guards import require_provider
from .helpers import from_big_int_to_token_value, is_logs_provider
from .types import (
    BalanceSource,
    FormattedTokenBalance,
    FormattedTokenBalances,
    TokenBalances,
    TokenData,
)

logger = logging.getLogger(__name__)

TRANSFER_TOPIC = event_topic(get_event_abi(ERC20_ABI, "Transfer"))
NATIVE_TOKEN_DECIMALS = 18


def _token_from_record_id(record_id: str) -> str:
    # Indexer balance ids are "<account>-<token>"
    return to_checksum_address(record_id.split("-")[-1])


def parse_token_balances(
    records: Iterable[Mapping[str, Any]],
    source: BalanceSource,
    reserved_unit: int = 1,
) -> TokenBalances:
    """
    Parse indexer balance records into a TokenBalances map.

    Withdrawn amounts keep everything above ``reserved_unit`` (the contracts
    leave one base unit behind); amounts at or below it are dropped. Other
    sources only drop exact zeros.

    Args:
        records: Indexer records with ``id`` and ``amount``
        source: Which balance source the records come from
        reserved_unit: Base units the contracts hold back on withdrawal

    Raises:
        ValueError: A record reports a negative amount
    """
    balances: TokenBalances = {}
    for record in records:
        token = _token_from_record_id(record["id"])
        amount = int(record["amount"])
        if amount < 0:
            raise ValueError(f"Negative {source.value} balance for {token}: {amount}")

        if source == BalanceSource.WITHDRAWN:
            if amount <= reserved_unit:
                continue
            amount -= reserved_unit
        elif amount == 0:
            continue

        balances[token] = balances.get(token, 0) + amount
    return balances


def merge_balances(*sources: Mapping[str, int]) -> TokenBalances:
    """Sum balances per token. Keys are re-checksummed so casing never splits a token."""
    merged: TokenBalances = {}
    for source in sources:
        for token, amount in source.items():
            if amount < 0:
                raise ValueError(f"Negative balance for {token}: {amount}")
            key = to_checksum_address(token)
            merged[key] = merged.get(key, 0) + amount
    return merged


def filter_dust(balances: Mapping[str, int], reserved_unit: int = 1) -> TokenBalances:
    """Drop entries at or below ``reserved_unit``."""
    return {token: amount for token, amount in balances.items() if amount > reserved_unit}


class BalanceAggregator:
    """
    Combines balance sources for one network and formats the result.

    Args:
        w3: Chain connection, needed for active balances and formatting
        network: Zero address, reserved unit and native symbol for the chain
        log_scan: Whether the connection can scan historical Transfer logs.
            Defaults to detecting Alchemy/Infura endpoints.
        max_concurrency: Upper bound on in-flight RPC requests
    """

    def __init__(
        self,
        w3: AsyncWeb3 | None,
        network: NetworkConfig,
        log_scan: bool | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self.w3 = w3
        self.network = network
        self._log_scan = log_scan
        self.max_concurrency = max_concurrency

    @property
    def supports_log_scan(self) -> bool:
        if self._log_scan is not None:
            return self._log_scan
        return self.w3 is not None and is_logs_provider(self.w3)

    async def _bounded(self, coros: Sequence[Any]) -> list[Any]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(coro: Any) -> Any:
            async with semaphore:
                return await coro

        return await asyncio.gather(*(run(c) for c in coros))

    async def fetch_transferred_tokens(self, account: str) -> list[str]:
        """Tokens ever transferred to ``account``, from a full-history Transfer log scan."""
        w3 = require_provider(self.w3)
        padded = "0x" + to_checksum_address(account)[2:].lower().rjust(64, "0")
        logs = await w3.eth.get_logs(
            {
                "fromBlock": 0,
                "toBlock": "latest",
                "topics": [TRANSFER_TOPIC, None, padded],
            }
        )
        # ERC-721 Transfer shares topic0 but also indexes tokenId
        tokens = {to_checksum_address(log["address"]) for log in logs if len(log["topics"]) == 3}
        logger.debug("Discovered %d token(s) transferred to %s", len(tokens), account)
        return sorted(tokens)

    async def _fetch_balance(self, account: str, token: str) -> int:
        w3 = require_provider(self.w3)
        if token == to_checksum_address(self.network.zero_address):
            return await w3.eth.get_balance(account)
        contract = w3.eth.contract(address=token, abi=ERC20_ABI)
        return await contract.functions.balanceOf(account).call()

    async def fetch_active_balances(self, account: str, tokens: Iterable[str]) -> TokenBalances:
        """Live balances of ``account`` for each token, dropping zeros."""
        account = to_checksum_address(account)
        unique = list(dict.fromkeys(to_checksum_address(t) for t in tokens))
        amounts = await self._bounded([self._fetch_balance(account, token) for token in unique])
        return {token: amount for token, amount in zip(unique, amounts) if amount}

    async def resolve_token_list(
        self,
        account: str,
        known: Iterable[Mapping[str, int]] = (),
        erc20_token_list: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Tokens whose live balance should be read for ``account``.

        The native token and tokens from ``known`` maps are always included.
        Without an explicit list, tokens are discovered by a log scan.

        Raises:
            InvalidArgumentError: No token list and the connection cannot scan logs
        """
        if erc20_token_list is None:
            if not self.supports_log_scan:
                raise InvalidArgumentError(
                    "Must pass in an erc20 token list to fetch active balances: "
                    "the configured provider cannot scan historical logs",
                    field="erc20_token_list",
                )
            discovered = await self.fetch_transferred_tokens(account)
        else:
            discovered = list(erc20_token_list)

        candidates = [self.network.zero_address, *discovered]
        for balances in known:
            candidates.extend(balances)
        return list(dict.fromkeys(to_checksum_address(t) for t in candidates))

    async def get_balances(
        self,
        account: str,
        source_maps: Mapping[BalanceSource, Mapping[str, int]],
        sources: Sequence[BalanceSource],
        erc20_token_list: Sequence[str] | None = None,
    ) -> TokenBalances:
        """
        Merge the requested ``sources`` into one dust-filtered map.

        ``source_maps`` holds already parsed indexer maps. When ACTIVE is
        requested, live balances are fetched for the resolved token list.
        """
        selected = [source_maps.get(source, {}) for source in sources if source != BalanceSource.ACTIVE]
        if BalanceSource.ACTIVE in sources:
            tokens = await self.resolve_token_list(account, source_maps.values(), erc20_token_list)
            selected.append(await self.fetch_active_balances(account, tokens))
        return filter_dust(merge_balances(*selected), self.network.reserved_balance_unit)

    async def fetch_token_data(self, token: str) -> TokenData:
        w3 = require_provider(self.w3)
        if token == to_checksum_address(self.network.zero_address):
            return TokenData(symbol=self.network.native_token_symbol, decimals=NATIVE_TOKEN_DECIMALS)
        contract = w3.eth.contract(address=token, abi=ERC20_ABI)
        symbol = await contract.functions.symbol().call()
        decimals = await contract.functions.decimals().call()
        return TokenData(symbol=symbol, decimals=decimals)

    async def format_balances(self, balance_maps: Sequence[Mapping[str, int]]) -> list[FormattedTokenBalances]:
        """
        Format each map with symbol, decimals and a decimal-string amount.

        Token metadata is fetched once per token for the whole call.
        """
        tokens = list(dict.fromkeys(to_checksum_address(t) for balances in balance_maps for t in balances))
        token_data = dict(zip(tokens, await self._bounded([self.fetch_token_data(t) for t in tokens])))

        formatted: list[FormattedTokenBalances] = []
        for balances in balance_maps:
            entry: FormattedTokenBalances = {}
            for token, amount in balances.items():
                key = to_checksum_address(token)
                data = token_data[key]
                entry[key] = FormattedTokenBalance(
                    raw_amount=amount,
                    symbol=data.symbol,
                    decimals=data.decimals,
                    formatted_amount=from_big_int_to_token_value(amount, data.decimals),
                )
            formatted.append(entry)
        return formatted
