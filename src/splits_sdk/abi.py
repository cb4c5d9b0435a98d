"""
Contract ABIs for the 0xSplits contract family.

Only the functions and events this SDK calls or decodes are included.
"""

_CALL_TUPLE = {
    "name": "calls",
    "type": "tuple[]",
    "components": [
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "data", "type": "bytes"},
    ],
}

_QUOTE_PAIR = {
    "name": "quotePair",
    "type": "tuple",
    "components": [
        {"name": "base", "type": "address"},
        {"name": "quote", "type": "address"},
    ],
}

_SET_PAIR_SCALED_OFFER_FACTOR = {
    "name": "pairScaledOfferFactors",
    "type": "tuple[]",
    "components": [
        _QUOTE_PAIR,
        {"name": "scaledOfferFactor", "type": "uint32"},
    ],
}

_QUOTE_PARAMS = {
    "name": "quoteParams",
    "type": "tuple[]",
    "components": [
        _QUOTE_PAIR,
        {"name": "baseAmount", "type": "uint128"},
        {"name": "data", "type": "bytes"},
    ],
}

# Multicall3
MULTICALL_ABI = [
    {
        "type": "function",
        "name": "aggregate",
        "inputs": [
            {
                "name": "calls",
                "type": "tuple[]",
                "components": [
                    {"name": "target", "type": "address"},
                    {"name": "callData", "type": "bytes"},
                ],
            }
        ],
        "outputs": [
            {"name": "blockNumber", "type": "uint256"},
            {"name": "returnData", "type": "bytes[]"},
        ],
        "stateMutability": "payable",
    },
]

# ERC20 (plus the Transfer event used for token discovery)
ERC20_ABI = [
    {
        "type": "function",
        "name": "symbol",
        "inputs": [],
        "outputs": [{"type": "string"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "decimals",
        "inputs": [],
        "outputs": [{"type": "uint8"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]

# Any contract exposing owner()
OWNABLE_ABI = [
    {
        "type": "function",
        "name": "owner",
        "inputs": [],
        "outputs": [{"type": "address"}],
        "stateMutability": "view",
    },
]

# SplitMain (v1)
SPLIT_MAIN_ABI = [
    {
        "type": "function",
        "name": "createSplit",
        "inputs": [
            {"name": "accounts", "type": "address[]"},
            {"name": "percentAllocations", "type": "uint32[]"},
            {"name": "distributorFee", "type": "uint32"},
            {"name": "controller", "type": "address"},
        ],
        "outputs": [{"name": "split", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "updateSplit",
        "inputs": [
            {"name": "split", "type": "address"},
            {"name": "accounts", "type": "address[]"},
            {"name": "percentAllocations", "type": "uint32[]"},
            {"name": "distributorFee", "type": "uint32"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "distributeETH",
        "inputs": [
            {"name": "split", "type": "address"},
            {"name": "accounts", "type": "address[]"},
            {"name": "percentAllocations", "type": "uint32[]"},
            {"name": "distributorFee", "type": "uint32"},
            {"name": "distributorAddress", "type": "address"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "distributeERC20",
        "inputs": [
            {"name": "split", "type": "address"},
            {"name": "token", "type": "address"},
            {"name": "accounts", "type": "address[]"},
            {"name": "percentAllocations", "type": "uint32[]"},
            {"name": "distributorFee", "type": "uint32"},
            {"name": "distributorAddress", "type": "address"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "withdraw",
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "withdrawETH", "type": "uint256"},
            {"name": "tokens", "type": "address[]"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "getController",
        "inputs": [{"name": "split", "type": "address"}],
        "outputs": [{"type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "getETHBalance",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "getERC20Balance",
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "token", "type": "address"},
        ],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "CreateSplit",
        "anonymous": False,
        "inputs": [{"name": "split", "type": "address", "indexed": True}],
    },
    {
        "type": "event",
        "name": "UpdateSplit",
        "anonymous": False,
        "inputs": [{"name": "split", "type": "address", "indexed": True}],
    },
    {
        "type": "event",
        "name": "DistributeETH",
        "anonymous": False,
        "inputs": [
            {"name": "split", "type": "address", "indexed": True},
            {"name": "amount", "type": "uint256", "indexed": False},
            {"name": "distributorAddress", "type": "address", "indexed": True},
        ],
    },
    {
        "type": "event",
        "name": "DistributeERC20",
        "anonymous": False,
        "inputs": [
            {"name": "split", "type": "address", "indexed": True},
            {"name": "token", "type": "address", "indexed": True},
            {"name": "amount", "type": "uint256", "indexed": False},
            {"name": "distributorAddress", "type": "address", "indexed": True},
        ],
    },
    {
        "type": "event",
        "name": "Withdrawal",
        "anonymous": False,
        "inputs": [
            {"name": "account", "type": "address", "indexed": True},
            {"name": "ethAmount", "type": "uint256", "indexed": False},
            {"name": "tokens", "type": "address[]", "indexed": False},
            {"name": "tokenAmounts", "type": "uint256[]", "indexed": False},
        ],
    },
]

# WaterfallModuleFactory
WATERFALL_MODULE_FACTORY_ABI = [
    {
        "type": "function",
        "name": "createWaterfallModule",
        "inputs": [
            {"name": "token", "type": "address"},
            {"name": "nonWaterfallRecipient", "type": "address"},
            {"name": "recipients", "type": "address[]"},
            {"name": "thresholds", "type": "uint256[]"},
        ],
        "outputs": [{"name": "wm", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "CreateWaterfallModule",
        "anonymous": False,
        "inputs": [
            {"name": "waterfallModule", "type": "address", "indexed": True},
            {"name": "token", "type": "address", "indexed": False},
            {"name": "nonWaterfallRecipient", "type": "address", "indexed": False},
            {"name": "recipients", "type": "address[]", "indexed": False},
            {"name": "thresholds", "type": "uint256[]", "indexed": False},
        ],
    },
]

# WaterfallModule
WATERFALL_MODULE_ABI = [
    {
        "type": "function",
        "name": "waterfallFunds",
        "inputs": [],
        "outputs": [],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "recoverNonWaterfallFunds",
        "inputs": [
            {"name": "nonWaterfallToken", "type": "address"},
            {"name": "recipient", "type": "address"},
        ],
        "outputs": [],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "withdraw",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "token",
        "inputs": [],
        "outputs": [{"type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "nonWaterfallRecipient",
        "inputs": [],
        "outputs": [{"type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "distributedFunds",
        "inputs": [],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "fundsPendingWithdrawal",
        "inputs": [],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "getPullBalance",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "getTranches",
        "inputs": [],
        "outputs": [
            {"name": "recipients", "type": "address[]"},
            {"name": "thresholds", "type": "uint256[]"},
        ],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "WaterfallFunds",
        "anonymous": False,
        "inputs": [
            {"name": "recipients", "type": "address[]", "indexed": False},
            {"name": "payouts", "type": "uint256[]", "indexed": False},
            {"name": "pullFlowFlag", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "RecoverNonWaterfallFunds",
        "anonymous": False,
        "inputs": [
            {"name": "nonWaterfallToken", "type": "address", "indexed": False},
            {"name": "recipient", "type": "address", "indexed": False},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "Withdrawal",
        "anonymous": False,
        "inputs": [
            {"name": "account", "type": "address", "indexed": False},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
]

# VestingModuleFactory
VESTING_MODULE_FACTORY_ABI = [
    {
        "type": "function",
        "name": "createVestingModule",
        "inputs": [
            {"name": "beneficiary", "type": "address"},
            {"name": "vestingPeriod", "type": "uint256"},
        ],
        "outputs": [{"name": "vm", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "predictVestingModuleAddress",
        "inputs": [
            {"name": "beneficiary", "type": "address"},
            {"name": "vestingPeriod", "type": "uint256"},
        ],
        "outputs": [
            {"name": "predictedAddress", "type": "address"},
            {"name": "exists", "type": "bool"},
        ],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "CreateVestingModule",
        "anonymous": False,
        "inputs": [
            {"name": "vestingModule", "type": "address", "indexed": True},
            {"name": "beneficiary", "type": "address", "indexed": True},
            {"name": "vestingPeriod", "type": "uint256", "indexed": False},
        ],
    },
]

# VestingModule
VESTING_MODULE_ABI = [
    {
        "type": "function",
        "name": "createVestingStreams",
        "inputs": [{"name": "tokens", "type": "address[]"}],
        "outputs": [{"name": "ids", "type": "uint256[]"}],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "releaseFromVesting",
        "inputs": [{"name": "ids", "type": "uint256[]"}],
        "outputs": [{"name": "releasedFunds", "type": "uint256[]"}],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "beneficiary",
        "inputs": [],
        "outputs": [{"type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "vestingPeriod",
        "inputs": [],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "vested",
        "inputs": [{"name": "id", "type": "uint256"}],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "vestedAndUnreleased",
        "inputs": [{"name": "id", "type": "uint256"}],
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "CreateVestingStream",
        "anonymous": False,
        "inputs": [
            {"name": "id", "type": "uint256", "indexed": True},
            {"name": "token", "type": "address", "indexed": True},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "ReleaseFromVestingStream",
        "anonymous": False,
        "inputs": [
            {"name": "id", "type": "uint256", "indexed": True},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
]

_SWAPPER_INIT_PARAMS = {
    "name": "params",
    "type": "tuple",
    "components": [
        {"name": "owner", "type": "address"},
        {"name": "paused", "type": "bool"},
        {"name": "beneficiary", "type": "address"},
        {"name": "tokenToBeneficiary", "type": "address"},
        {
            "name": "oracleParams",
            "type": "tuple",
            "components": [
                {"name": "oracle", "type": "address"},
                {
                    "name": "createOracleParams",
                    "type": "tuple",
                    "components": [
                        {"name": "factory", "type": "address"},
                        {"name": "data", "type": "bytes"},
                    ],
                },
            ],
        },
        {"name": "defaultScaledOfferFactor", "type": "uint32"},
        _SET_PAIR_SCALED_OFFER_FACTOR,
    ],
}

# SwapperFactory
SWAPPER_FACTORY_ABI = [
    {
        "type": "function",
        "name": "createSwapper",
        "inputs": [_SWAPPER_INIT_PARAMS],
        "outputs": [{"name": "swapper", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "CreateSwapper",
        "anonymous": False,
        "inputs": [
            {"name": "swapper", "type": "address", "indexed": True},
            {**_SWAPPER_INIT_PARAMS, "indexed": False},
        ],
    },
]


def _setter(name: str, arg_name: str, arg_type: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": arg_name, "type": arg_type}],
        "outputs": [],
        "stateMutability": "nonpayable",
    }


def _getter(name: str, output_type: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [],
        "outputs": [{"type": output_type}],
        "stateMutability": "view",
    }


def _single_arg_event(name: str, arg_name: str, arg_type: str) -> dict:
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [{"name": arg_name, "type": arg_type, "indexed": False}],
    }


_EXEC_CALLS = {
    "type": "function",
    "name": "execCalls",
    "inputs": [_CALL_TUPLE],
    "outputs": [
        {"name": "blockNumber", "type": "uint256"},
        {"name": "returnData", "type": "bytes[]"},
    ],
    "stateMutability": "payable",
}

_EXEC_CALLS_EVENT = {
    "type": "event",
    "name": "ExecCalls",
    "anonymous": False,
    "inputs": [{**_CALL_TUPLE, "indexed": False}],
}

# Swapper
SWAPPER_ABI = [
    _setter("setBeneficiary", "beneficiary_", "address"),
    _setter("setTokenToBeneficiary", "tokenToBeneficiary_", "address"),
    _setter("setOracle", "oracle_", "address"),
    _setter("setDefaultScaledOfferFactor", "defaultScaledOfferFactor_", "uint32"),
    {
        "type": "function",
        "name": "setPairScaledOfferFactors",
        "inputs": [_SET_PAIR_SCALED_OFFER_FACTOR],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    _setter("setPaused", "paused_", "bool"),
    _EXEC_CALLS,
    _getter("owner", "address"),
    _getter("paused", "bool"),
    _getter("beneficiary", "address"),
    _getter("tokenToBeneficiary", "address"),
    _getter("oracle", "address"),
    _getter("defaultScaledOfferFactor", "uint32"),
    _single_arg_event("SetBeneficiary", "beneficiary", "address"),
    _single_arg_event("SetTokenToBeneficiary", "tokenToBeneficiary", "address"),
    _single_arg_event("SetOracle", "oracle", "address"),
    _single_arg_event("SetDefaultScaledOfferFactor", "defaultScaledOfferFactor", "uint32"),
    {
        "type": "event",
        "name": "SetPairScaledOfferFactors",
        "anonymous": False,
        "inputs": [{**_SET_PAIR_SCALED_OFFER_FACTOR, "indexed": False}],
    },
    _single_arg_event("SetPaused", "paused", "bool"),
    _EXEC_CALLS_EVENT,
    {
        "type": "event",
        "name": "Flash",
        "anonymous": False,
        "inputs": [
            {"name": "trader", "type": "address", "indexed": True},
            {**_QUOTE_PARAMS, "indexed": False},
            {"name": "tokenToBeneficiary", "type": "address", "indexed": False},
            {"name": "amountsToBeneficiary", "type": "uint256[]", "indexed": False},
            {"name": "excessToBeneficiary", "type": "uint256", "indexed": False},
        ],
    },
]

# UniV3Swap (flash swap integration)
UNI_V3_SWAP_ABI = [
    {
        "type": "function",
        "name": "initFlash",
        "inputs": [
            {"name": "swapper", "type": "address"},
            {
                "name": "params",
                "type": "tuple",
                "components": [
                    _QUOTE_PARAMS,
                    {
                        "name": "flashCallbackData",
                        "type": "tuple",
                        "components": [
                            {
                                "name": "exactInputParams",
                                "type": "tuple[]",
                                "components": [
                                    {"name": "path", "type": "bytes"},
                                    {"name": "recipient", "type": "address"},
                                    {"name": "deadline", "type": "uint256"},
                                    {"name": "amountIn", "type": "uint256"},
                                    {"name": "amountOutMinimum", "type": "uint256"},
                                ],
                            },
                            {"name": "excessRecipient", "type": "address"},
                        ],
                    },
                ],
            },
        ],
        "outputs": [],
        "stateMutability": "payable",
    },
]

_PASS_THROUGH_WALLET_INIT_PARAMS = {
    "name": "params",
    "type": "tuple",
    "components": [
        {"name": "owner", "type": "address"},
        {"name": "paused", "type": "bool"},
        {"name": "passThrough", "type": "address"},
    ],
}

# PassThroughWalletFactory
PASS_THROUGH_WALLET_FACTORY_ABI = [
    {
        "type": "function",
        "name": "createPassThroughWallet",
        "inputs": [_PASS_THROUGH_WALLET_INIT_PARAMS],
        "outputs": [{"name": "passThroughWallet", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "CreatePassThroughWallet",
        "anonymous": False,
        "inputs": [
            {"name": "passThroughWallet", "type": "address", "indexed": True},
            {**_PASS_THROUGH_WALLET_INIT_PARAMS, "indexed": False},
        ],
    },
]

# PassThroughWallet
PASS_THROUGH_WALLET_ABI = [
    {
        "type": "function",
        "name": "passThroughTokens",
        "inputs": [{"name": "tokens_", "type": "address[]"}],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
        "stateMutability": "nonpayable",
    },
    _setter("setPassThrough", "passThrough_", "address"),
    _setter("setPaused", "paused_", "bool"),
    _EXEC_CALLS,
    _getter("owner", "address"),
    _getter("paused", "bool"),
    _getter("passThrough", "address"),
    {
        "type": "event",
        "name": "PassThrough",
        "anonymous": False,
        "inputs": [
            {"name": "passThrough", "type": "address", "indexed": True},
            {"name": "tokens", "type": "address[]", "indexed": False},
            {"name": "amounts", "type": "uint256[]", "indexed": False},
        ],
    },
    _single_arg_event("SetPassThrough", "passThrough", "address"),
    _single_arg_event("SetPaused", "paused", "bool"),
    _EXEC_CALLS_EVENT,
]
