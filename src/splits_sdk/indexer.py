"""GraphQL client for the splits subgraph."""

import logging
from typing import Any

import httpx

from ._exceptions import AccountNotFoundError, IndexerError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_TOKEN_BALANCE_FIELDS = """
    id
    amount
"""

ACCOUNT_BALANCES_QUERY = f"""
query accountBalances($accountId: ID!) {{
  accountBalances: account(id: $accountId) {{
    __typename
    id
    internalBalances(first: 1000, orderBy: amount, orderDirection: desc) {{{_TOKEN_BALANCE_FIELDS}}}
    withdrawals(first: 1000, orderBy: amount, orderDirection: desc) {{{_TOKEN_BALANCE_FIELDS}}}
  }}
}}
"""

_CONTRACT_EARNINGS_FIELDS = f"""
    contractEarnings(first: 1000) {{
      contract {{
        id
      }}
      internalBalances(first: 1000) {{{_TOKEN_BALANCE_FIELDS}}}
      withdrawals(first: 1000) {{{_TOKEN_BALANCE_FIELDS}}}
    }}
"""

USER_BALANCES_BY_CONTRACT_QUERY = f"""
query userBalancesByContract($userId: ID!) {{
  userBalancesByContract: user(id: $userId) {{{_CONTRACT_EARNINGS_FIELDS}}}
}}
"""

USER_BALANCES_BY_CONTRACT_FILTERED_QUERY = f"""
query userBalancesByContractFiltered($userId: ID!, $contractIds: [ID!]!) {{
  userBalancesByContract: user(id: $userId) {{
    contractEarnings(first: 1000, where: {{ contract_in: $contractIds }}) {{
      contract {{
        id
      }}
      internalBalances(first: 1000) {{{_TOKEN_BALANCE_FIELDS}}}
      withdrawals(first: 1000) {{{_TOKEN_BALANCE_FIELDS}}}
    }}
  }}
}}
"""

SPLIT_QUERY = """
query split($splitId: ID!) {
  split(id: $splitId) {
    id
    controller
    distributorFee
    recipients(first: 1000) {
      account {
        id
      }
      ownership
    }
  }
}
"""

WATERFALL_MODULE_QUERY = """
query waterfallModule($waterfallModuleId: ID!) {
  waterfallModule(id: $waterfallModuleId) {
    id
    token {
      id
    }
    nonWaterfallRecipient
    distributedFunds
    tranches(first: 1000, orderBy: startAmount) {
      recipient {
        id
      }
      startAmount
      size
    }
  }
}
"""


def not_found_message(kind: str, entity_id: str, chain_id: int | None = None) -> str:
    on_chain = f" on chain {chain_id}" if chain_id is not None else ""
    return (
        f"No {kind} found at address {entity_id}{on_chain}, please confirm you have entered "
        "the correct address. There may just be a delay in subgraph indexing."
    )


class IndexerClient:
    """
    Runs parameterized GraphQL queries against a subgraph endpoint.

    Pass an ``httpx.AsyncClient`` to share a connection pool or to inject a
    mock transport; otherwise one is created and owned by this client.

    Example:
        >>> async with IndexerClient(get_subgraph_url(1)) as indexer:
        ...     data = await indexer.request(SPLIT_QUERY, {"splitId": split_id.lower()})
    """

    def __init__(
        self,
        url: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "IndexerClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def request(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Run ``query`` and return its ``data`` object.

        Raises:
            httpx.HTTPError: Transport failure or non-2xx status
            IndexerError: The response carries GraphQL errors
        """
        logger.debug("Indexer query to %s with %s", self.url, variables)
        response = await self._http.post(self.url, json={"query": query, "variables": variables or {}})
        response.raise_for_status()

        payload = response.json()
        if payload.get("errors"):
            messages = "; ".join(str(e.get("message", e)) for e in payload["errors"])
            raise IndexerError(f"Indexer returned errors: {messages}")
        return payload.get("data") or {}

    async def get_account_balances(self, account_id: str, chain_id: int | None = None) -> dict[str, Any]:
        """Withdrawal and internal balance records of any account type."""
        data = await self.request(ACCOUNT_BALANCES_QUERY, {"accountId": account_id.lower()})
        account = data.get("accountBalances")
        if not account:
            raise AccountNotFoundError(not_found_message("account", account_id, chain_id))
        return account

    async def get_user_balances_by_contract(
        self,
        user_id: str,
        contract_ids: list[str] | None = None,
        chain_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """Per-contract earnings records of a user, optionally restricted to ``contract_ids``."""
        if contract_ids is None:
            data = await self.request(USER_BALANCES_BY_CONTRACT_QUERY, {"userId": user_id.lower()})
        else:
            data = await self.request(
                USER_BALANCES_BY_CONTRACT_FILTERED_QUERY,
                {"userId": user_id.lower(), "contractIds": [c.lower() for c in contract_ids]},
            )
        user = data.get("userBalancesByContract")
        if not user:
            raise AccountNotFoundError(not_found_message("user", user_id, chain_id))
        return user.get("contractEarnings") or []

    async def get_split(self, split_id: str, chain_id: int | None = None) -> dict[str, Any]:
        data = await self.request(SPLIT_QUERY, {"splitId": split_id.lower()})
        if not data.get("split"):
            raise AccountNotFoundError(not_found_message("split", split_id, chain_id))
        return data["split"]

    async def get_waterfall_module(self, waterfall_module_id: str, chain_id: int | None = None) -> dict[str, Any]:
        data = await self.request(WATERFALL_MODULE_QUERY, {"waterfallModuleId": waterfall_module_id.lower()})
        if not data.get("waterfallModule"):
            raise AccountNotFoundError(not_found_message("waterfall module", waterfall_module_id, chain_id))
        return data["waterfallModule"]
