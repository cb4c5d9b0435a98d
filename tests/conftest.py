"""Pytest configuration and fixtures for splits-sdk tests."""

import subprocess
import time
from collections.abc import Mapping
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_abi import encode
from eth_account import Account
from eth_utils import collapse_if_tuple
from hexbytes import HexBytes

from splits_sdk.codec import event_topic

# Anvil's pre-funded test accounts (same as Hardhat/Foundry)
# Private keys are well-known - DO NOT use on mainnet
ANVIL_ACCOUNTS = [
    {
        "address": "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "private_key": "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80",
    },
    {
        "address": "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
        "private_key": "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d",
    },
    {
        "address": "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
        "private_key": "0x5de4111afa1a4b94908f83103eb1f1706367c2e68ca870fc3fb9a804cdab365a",
    },
]

SIGNER = ANVIL_ACCOUNTS[0]["address"]
ALICE = ANVIL_ACCOUNTS[1]["address"]
BOB = ANVIL_ACCOUNTS[2]["address"]

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
ZERO = "0x0000000000000000000000000000000000000000"

# Addresses without letters are their own checksum
NEW_ENTITY = "0x1111111111111111111111111111111111111111"
ENTITY = "0x2222222222222222222222222222222222222222"
OTHER_CONTRACT = "0x3333333333333333333333333333333333333333"

TX_HASH = "0x" + "ab" * 32


def make_log(
    event_abi: Mapping[str, Any],
    address: str,
    log_index: int = 0,
    **args: Any,
) -> dict[str, Any]:
    """Build a raw receipt log for ``event_abi`` with the given argument values."""
    topics = [HexBytes(event_topic(event_abi))]
    data_types: list[str] = []
    data_values: list[Any] = []
    for item in event_abi["inputs"]:
        abi_type = collapse_if_tuple(dict(item))
        if item.get("indexed"):
            topics.append(HexBytes(encode([abi_type], [args[item["name"]]])))
        else:
            data_types.append(abi_type)
            data_values.append(args[item["name"]])
    return {
        "address": address,
        "topics": topics,
        "data": HexBytes(encode(data_types, data_values)),
        "logIndex": log_index,
    }


def make_raw_log(address: str, topic0: str, data: bytes = b"", log_index: int = 0) -> dict[str, Any]:
    """A log with an arbitrary topic, for events the client does not know."""
    return {"address": address, "topics": [HexBytes(topic0)], "data": HexBytes(data), "logIndex": log_index}


class FakeChain:
    """
    A MagicMock-backed AsyncWeb3 with one shared mock per contract function name.

    Every ``w3.eth.contract(...).functions.<name>(*args)`` call is recorded in
    ``calls`` as ``(address, name, args)`` and returns ``function(name)``,
    whose ``call``/``estimate_gas``/``build_transaction`` are AsyncMocks.
    """

    def __init__(self, chain_id: int = 1, gas: int = 84_000) -> None:
        self.chain_id = chain_id
        self.gas = gas
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self._functions: dict[str, MagicMock] = {}

        self.w3 = MagicMock()
        self.w3.eth.contract.side_effect = self._contract
        self.w3.eth.get_transaction_count = AsyncMock(return_value=7)
        self.w3.eth.send_raw_transaction = AsyncMock(return_value=HexBytes(TX_HASH))
        self.w3.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": 1, "logs": []})
        self.w3.eth.get_balance = AsyncMock(return_value=0)
        self.w3.eth.get_logs = AsyncMock(return_value=[])
        self.w3.provider.endpoint_uri = "http://localhost:8545"

    def function(self, name: str) -> MagicMock:
        if name not in self._functions:
            fn = MagicMock()
            fn.call = AsyncMock(return_value=None)
            fn.estimate_gas = AsyncMock(return_value=self.gas)
            fn.build_transaction = AsyncMock(side_effect=self._build_transaction)
            self._functions[name] = fn
        return self._functions[name]

    def returns(self, name: str, value: Any) -> None:
        """Set what ``<name>(...).call()`` returns."""
        self.function(name).call = AsyncMock(return_value=value)

    def set_receipt(self, logs: list[dict[str, Any]], status: int = 1) -> None:
        self.w3.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": status, "logs": logs})

    def calls_to(self, name: str) -> list[tuple[str, str, tuple[Any, ...]]]:
        return [c for c in self.calls if c[1] == name]

    @property
    def sent(self) -> bool:
        return self.w3.eth.send_raw_transaction.await_count > 0

    async def _build_transaction(self, params: dict[str, Any]) -> dict[str, Any]:
        return {
            "to": ENTITY,
            "data": "0x",
            "value": params.get("value", 0),
            "gas": params.get("gas", self.gas),
            "gasPrice": 1_000_000_000,
            "nonce": params["nonce"],
            "chainId": params["chainId"],
        }

    def _contract(self, address: str | None = None, abi: Any = None) -> MagicMock:
        contract = MagicMock()
        contract.address = address
        chain = self

        class _Functions:
            def __getattr__(self, name: str) -> Any:
                def bind(*args: Any) -> MagicMock:
                    chain.calls.append((address, name, args))
                    return chain.function(name)

                return bind

        contract.functions = _Functions()
        return contract


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def account():
    """The first Anvil account as a LocalAccount."""
    return Account.from_key(ANVIL_ACCOUNTS[0]["private_key"])


def _wait_for_anvil(url: str, timeout: float = 10.0) -> bool:
    """Wait for Anvil to be ready."""
    import socket
    from urllib.parse import urlparse

    parsed = urlparse(url)
    host = parsed.hostname or "localhost"
    port = parsed.port or 8545

    start = time.time()
    while time.time() - start < timeout:
        try:
            with socket.create_connection((host, port), timeout=1):
                return True
        except OSError:
            time.sleep(0.1)
    return False


@pytest.fixture(scope="session")
def anvil_fork():
    """
    Spin up Anvil forking Ethereum mainnet for integration tests.

    Requires Foundry to be installed: https://getfoundry.sh
    Set SPLITS_FORK_URL to choose the upstream RPC.

    The fork gives us:
    - Real EVM execution
    - Already-deployed split main, factories and Multicall3
    - Pre-funded test accounts
    """
    import os

    rpc_url = "http://localhost:8545"
    fork_url = os.environ.get("SPLITS_FORK_URL", "https://eth.llamarpc.com")

    # Check if Anvil is available
    try:
        subprocess.run(["anvil", "--version"], capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pytest.skip("Anvil not installed. Run: curl -L https://foundry.paradigm.xyz | bash")

    proc = subprocess.Popen(
        ["anvil", "--fork-url", fork_url, "--port", "8545", "--silent"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )

    # Wait for Anvil to be ready
    if not _wait_for_anvil(rpc_url):
        proc.terminate()
        pytest.fail("Anvil failed to start")

    yield rpc_url

    # Cleanup
    proc.terminate()
    proc.wait(timeout=5)
