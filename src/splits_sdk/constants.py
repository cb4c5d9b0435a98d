"""Contract addresses and chain constants for splits-sdk."""

from pydantic import BaseModel

from ._exceptions import UnsupportedChainIdError, UnsupportedSubgraphChainIdError

ADDRESS_ZERO = "0x0000000000000000000000000000000000000000"

# Deterministic deployments (same address on every chain they exist on).
SPLIT_MAIN_ADDRESS = "0x2ed6c4B5dA6378c7897AC67Ba9e43102Feb694EE"
MULTICALL_3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"
WATERFALL_MODULE_FACTORY_ADDRESS = "0x4Df01754eBd055498C8087b1e9a5c7a9ad19b0F6"
VESTING_MODULE_FACTORY_ADDRESS = "0x0a2841630f198745a55c4dab3fe98f77271949e5"
SWAPPER_FACTORY_ADDRESS = "0xa244bbe019cf1ba177ee5a532250be2663fb55ca"

SUBGRAPH_BASE_URL = "https://api.thegraph.com/subgraphs/name/0xsplits"

# Split main keeps one base unit of every balance to save gas on later writes.
RESERVED_BALANCE_UNIT = 1

# Split (v1) limits
PERCENTAGE_SCALE = 10**6
MAX_DISTRIBUTOR_FEE_PERCENT = 10
SPLITS_MAX_PRECISION_DECIMALS = 4
MIN_RECIPIENTS = 2

# Swapper limits
MAX_SCALED_OFFER_FACTOR_PERCENT = 99

DEFAULT_MAX_CONCURRENCY = 8


class NetworkConfig(BaseModel):
    """Per-network addresses and thresholds.

    A ``None`` address means the product is not deployed on that network, or
    that its deployment must be supplied by the caller, e.g.
    ``get_network_config(1).model_copy(update={"pass_through_wallet_factory_address": ...})``.
    """

    chain_id: int
    name: str
    native_token_symbol: str = "ETH"
    zero_address: str = ADDRESS_ZERO
    reserved_balance_unit: int = RESERVED_BALANCE_UNIT
    multicall_address: str = MULTICALL_3_ADDRESS
    split_main_address: str | None = SPLIT_MAIN_ADDRESS
    waterfall_factory_address: str | None = WATERFALL_MODULE_FACTORY_ADDRESS
    vesting_factory_address: str | None = VESTING_MODULE_FACTORY_ADDRESS
    swapper_factory_address: str | None = None
    uni_v3_swap_address: str | None = None
    pass_through_wallet_factory_address: str | None = None
    subgraph_url: str | None = None

    model_config = {"frozen": True}


NETWORKS: dict[int, NetworkConfig] = {
    1: NetworkConfig(
        chain_id=1,
        name="ethereum",
        swapper_factory_address=SWAPPER_FACTORY_ADDRESS,
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-ethereum",
    ),
    5: NetworkConfig(
        chain_id=5,
        name="goerli",
        swapper_factory_address=SWAPPER_FACTORY_ADDRESS,
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-goerli",
    ),
    10: NetworkConfig(
        chain_id=10,
        name="optimism",
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-optimism",
    ),
    56: NetworkConfig(chain_id=56, name="bsc", native_token_symbol="BNB"),
    100: NetworkConfig(
        chain_id=100,
        name="gnosis",
        native_token_symbol="XDAI",
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-gnosis",
    ),
    137: NetworkConfig(
        chain_id=137,
        name="polygon",
        native_token_symbol="MATIC",
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-polygon",
    ),
    250: NetworkConfig(
        chain_id=250,
        name="fantom",
        native_token_symbol="FTM",
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-fantom",
    ),
    8453: NetworkConfig(
        chain_id=8453,
        name="base",
        swapper_factory_address=SWAPPER_FACTORY_ADDRESS,
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-base",
    ),
    42161: NetworkConfig(
        chain_id=42161,
        name="arbitrum",
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-arbitrum",
    ),
    43114: NetworkConfig(chain_id=43114, name="avalanche", native_token_symbol="AVAX"),
    7777777: NetworkConfig(
        chain_id=7777777,
        name="zora",
        subgraph_url=f"{SUBGRAPH_BASE_URL}/splits-subgraph-zora",
    ),
}

# Supported chain IDs
SUPPORTED_CHAIN_IDS: list[int] = sorted(NETWORKS)


def get_network_config(chain_id: int) -> NetworkConfig:
    """Get the network configuration for a given chain ID."""
    network = NETWORKS.get(chain_id)
    if network is None:
        raise UnsupportedChainIdError(chain_id, SUPPORTED_CHAIN_IDS)
    return network


def get_product_chain_ids(attribute: str) -> list[int]:
    """Chain IDs on which ``attribute`` (a NetworkConfig address field) is set."""
    return [chain_id for chain_id, network in NETWORKS.items() if getattr(network, attribute)]


def get_product_address(network: NetworkConfig, attribute: str) -> str:
    """Get a product address for a network, failing if it isn't deployed there."""
    address = getattr(network, attribute)
    if not address:
        raise UnsupportedChainIdError(network.chain_id, get_product_chain_ids(attribute))
    return address


def get_subgraph_url(chain_id: int) -> str:
    """Get the indexer URL for a given chain ID."""
    network = NETWORKS.get(chain_id)
    if network is None or not network.subgraph_url:
        raise UnsupportedSubgraphChainIdError(chain_id, get_product_chain_ids("subgraph_url"))
    return network.subgraph_url


def is_supported_chain(chain_id: int) -> bool:
    """Check if a chain is supported."""
    return chain_id in NETWORKS
