"""Constants for supported chains and protocol deployments.

Contract addresses, ABIs, and supported-asset tables. Addresses are kept
in lowercase; callers checksum them where an address leaves the package.
"""

from __future__ import annotations

# =============================================================================
# Chain IDs
# =============================================================================

ETH_CHAIN_ID = 1
BSC_CHAIN_ID = 56
POLYGON_CHAIN_ID = 137

CHAIN_NAMES: dict[int, str] = {
    ETH_CHAIN_ID: "ethereum",
    BSC_CHAIN_ID: "bsc",
    POLYGON_CHAIN_ID: "polygon",
}

# =============================================================================
# Sentinels
# =============================================================================

# Denotes the chain's native currency rather than an ERC-20 contract
NATIVE_TOKEN_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# =============================================================================
# Aave v3 family (Aave, Spark, Avalon Finance)
# =============================================================================

AAVE_V3_ETHEREUM_POOL = "0x87870bca3f3fd6335c3f4ce8392d69350b4fa4e2"
AAVE_V3_BSC_POOL = "0x6807dc923806fe8fd134338eabca509979a7e0cb"
AAVE_V3_POLYGON_POOL = "0x794a61358d6845594f94dc1db02a252b5b4814ad"
SPARK_LEND_POOL = "0xc13e21b648a5ee794902342038ff3adab66be987"
AVALON_FINANCE_BSC_POOL = "0xf9278c7c4aefac4ddfd0d496f7a1c39ca6bca6d4"

AAVE_V3_VERSION = "3"

# Index of aTokenAddress in the flattened ReserveData struct
RESERVE_DATA_ATOKEN_INDEX = 8

AAVE_V3_POOL_ABI = [
    {
        "inputs": [
            {"name": "asset", "type": "address"},
            {"name": "amount", "type": "uint256"},
            {"name": "onBehalfOf", "type": "address"},
            {"name": "referralCode", "type": "uint16"},
        ],
        "name": "supply",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "asset", "type": "address"},
            {"name": "amount", "type": "uint256"},
            {"name": "to", "type": "address"},
        ],
        "name": "withdraw",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    # ReserveData is a struct of static members, so its encoding is the same
    # as these members returned one after another.
    {
        "inputs": [{"name": "asset", "type": "address"}],
        "name": "getReserveData",
        "outputs": [
            {"name": "configuration", "type": "uint256"},
            {"name": "liquidityIndex", "type": "uint128"},
            {"name": "currentLiquidityRate", "type": "uint128"},
            {"name": "variableBorrowIndex", "type": "uint128"},
            {"name": "currentVariableBorrowRate", "type": "uint128"},
            {"name": "currentStableBorrowRate", "type": "uint128"},
            {"name": "lastUpdateTimestamp", "type": "uint40"},
            {"name": "id", "type": "uint16"},
            {"name": "aTokenAddress", "type": "address"},
            {"name": "stableDebtTokenAddress", "type": "address"},
            {"name": "variableDebtTokenAddress", "type": "address"},
            {"name": "interestRateStrategyAddress", "type": "address"},
            {"name": "accruedToTreasury", "type": "uint128"},
            {"name": "unbacked", "type": "uint128"},
            {"name": "isolationModeTotalDebt", "type": "uint128"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

AAVE_V3_ETHEREUM_ASSETS = [
    "0x7f39c581f595b53c5cb19bd0b3f8da6c935e2ca0",  # wstETH
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599",  # WBTC
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",  # USDC
    "0xdac17f958d2ee523a2206206994597c13d831ec7",  # USDT
    "0xcd5fe23c85820f7b72d0926fc9b05b43e359b7ee",  # weETH
    "0x514910771af9ca656af840dff83e8264ecf986ca",  # LINK
    "0xae78736cd615f374d3085123a210448e74fc6393",  # rETH
    "0x6b175474e89094c44da98b954eedeac495271d0f",  # DAI
    "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9",  # AAVE
    "0x83f20f44975d03b1b09e64809b757c47f942beea",  # sDAI
    "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2",  # MKR
    "0xbe9895146f7af43049ca1c1ae358b0541ea49704",  # cbETH
    "0xf1c9acdc66974dfb6decb12aa385b9cd01190e38",  # osETH
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",  # WETH
]

SPARK_LEND_ASSETS = [
    "0x83f20f44975d03b1b09e64809b757c47f942beea",  # sDAI
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599",  # WBTC
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",  # USDC
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",  # WETH
    "0x7f39c581f595b53c5cb19bd0b3f8da6c935e2ca0",  # wstETH
    "0xae78736cd615f374d3085123a210448e74fc6393",  # rETH
    "0xdac17f958d2ee523a2206206994597c13d831ec7",  # USDT
]

AAVE_V3_BSC_ASSETS = [
    "0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c",  # WBNB
    "0x55d398326f99059ff775485246999027b3197955",  # USDT
    "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d",  # USDC
    "0x7130d2a12b9bcbfae4f2634d864a1ee1ce3ead9c",  # BTCB
    "0x2170ed0880ac9a755fd29b2688956bd959f933f8",  # ETH
    "0xc5f0f7b66764f6ec8c8dff7ba683102295e16409",  # FDUSD
    "0x26c5e01524d2e6280a48f2c50ff6de7e52e9611c",  # wstETH
    "0x0e09fabb73bd3ade0a17ecc321fd13a19e81ce82",  # Cake
]

AVALON_FINANCE_BSC_ASSETS = [
    "0x4aae823a6a0b376de6a78e74ecc5b079d38cbcf7",  # SolvBTC
    "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d",  # USDC
    "0x55d398326f99059ff775485246999027b3197955",  # USDT
    "0x7130d2a12b9bcbfae4f2634d864a1ee1ce3ead9c",  # BTCB
]

AAVE_V3_POLYGON_ASSETS = [
    "0x3c499c542cef5e3811e1192ce70d8cc03d5c3359",  # USDC
    "0x2791bca1f2de4661ed88a30c99a7a9449aa84174",  # USDC.e
    "0xc2132d05d31c914a87c6611c10748aeb04b58e8f",  # USDT
    "0x8f3cf7ad23cd3cadbd9735aff958023239c6a063",  # DAI
    "0x7ceb23fd6bc0add59e62ac25578270cff1b9f619",  # WETH
    "0x1bfd67037b42cf73acf2047067bd4f2c47d9bfd6",  # WBTC
    "0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",  # WMATIC
    "0x53e0bca35ec356bd5dddfebbd1fc0fd03fabad39",  # LINK
    "0xd6df932a45c0f255f85145f286ea0b292b21c90b",  # AAVE
]

# =============================================================================
# Compound v3 (Comet markets)
# =============================================================================

COMPOUND_USDC_MARKET = "0xc3d688b66703497daa19211eedff47f25384cdc3"
COMPOUND_WETH_MARKET = "0xa17581a9e3356d9a858b789d68b4d866e593ae94"

WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"

COMPOUND_VERSION = "3"

# Market address -> assets accepted by that market on Ethereum
COMPOUND_MARKET_ASSETS: dict[str, list[str]] = {
    COMPOUND_USDC_MARKET: [
        NATIVE_TOKEN_ADDRESS,
        "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",  # USDC (base)
        "0x514910771af9ca656af840dff83e8264ecf986ca",  # LINK
        "0xc00e94cb662c3520282e6f5717214004a7f26888",  # COMP
        "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984",  # UNI
        "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599",  # WBTC
    ],
    COMPOUND_WETH_MARKET: [
        NATIVE_TOKEN_ADDRESS,
        "0xbe9895146f7af43049ca1c1ae358b0541ea49704",  # cbETH
        "0x7f39c581f595b53c5cb19bd0b3f8da6c935e2ca0",  # wstETH
        "0xae78736cd615f374d3085123a210448e74fc6393",  # rETH
        WETH_ADDRESS,  # base
    ],
}

COMPOUND_V3_ABI = [
    {
        "inputs": [
            {"name": "asset", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "supply",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "asset", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "withdraw",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "baseToken",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "asset", "type": "address"},
        ],
        "name": "collateralBalanceOf",
        "outputs": [{"name": "", "type": "uint128"}],
        "stateMutability": "view",
        "type": "function",
    },
]

# =============================================================================
# Liquid staking
# =============================================================================

LIDO_STETH = "0xae7ab96520de3a18e5e111b5eaab095312d7fe84"
LIDO_VERSION = "2"

LIDO_ABI = [
    {
        "inputs": [{"name": "_referral", "type": "address"}],
        "name": "submit",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [{"name": "_account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ANKR_ETH_STAKING_POOL = "0x84db6ee82b7cf3b47e8f19270abde5718b936670"
ANKR_ETH_TOKEN = "0xe95a203b1a91a908f9b9ce46459d101078c2c3cb"
ANKR_VERSION = "1"

ANKR_ABI = [
    {
        "inputs": [],
        "name": "stakeAndClaimAethC",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [{"name": "shares", "type": "uint256"}],
        "name": "unstakeAETH",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

ROCKET_STORAGE = "0x1d8f8f00cfa6758d7be78336684788fb0ee0fa46"
ROCKET_RETH_TOKEN = "0xae78736cd615f374d3085123a210448e74fc6393"
ROCKET_POOL_VERSION = "1"

# Contract names resolved through RocketStorage
ROCKET_DEPOSIT_POOL_NAME = "rocketDepositPool"
ROCKET_TOKEN_RETH_NAME = "rocketTokenRETH"
ROCKET_DEPOSIT_SETTINGS_NAME = "rocketDAOProtocolSettingsDeposit"

ROCKET_STORAGE_ABI = [
    {
        "inputs": [{"name": "_key", "type": "bytes32"}],
        "name": "getAddress",
        "outputs": [{"name": "r", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ROCKET_DEPOSIT_POOL_ABI = [
    {
        "inputs": [],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getMaximumDepositAmount",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ROCKET_DEPOSIT_SETTINGS_ABI = [
    {
        "inputs": [],
        "name": "getMinimumDeposit",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ROCKET_RETH_ABI = [
    {
        "inputs": [
            {"name": "recipient", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

LISTA_STAKE_MANAGER = "0x1adb950d8bb3da4be104211d5ab038628e477fe6"
LISTA_SLISBNB_TOKEN = "0xb0b84d294e0c75a6abe60171b70edeb2efd14a1b"
LISTA_DAO_VERSION = "1"

LISTA_STAKE_MANAGER_ABI = [
    {
        "inputs": [],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]

# =============================================================================
# ERC-20
# =============================================================================

ERC20_ABI = [
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

# =============================================================================
# Generic dispatch
# =============================================================================

# Method signatures encodable without any chain access, per protocol and action
GENERIC_OPERATIONS: dict[str, dict[str, str]] = {
    "aave_v3": {
        "supply": "supply(address,uint256,address,uint16)",
        "withdraw": "withdraw(address,uint256,address)",
    },
    "spark_lend": {
        "supply": "supply(address,uint256,address,uint16)",
        "withdraw": "withdraw(address,uint256,address)",
    },
}

GENERIC_OPERATION_ADDRESSES: dict[str, str] = {
    "aave_v3": AAVE_V3_ETHEREUM_POOL,
    "spark_lend": SPARK_LEND_POOL,
}

# Chain -> protocol -> assets a generic operation accepts; an empty list
# means only the native token
GENERIC_SUPPORTED_ASSETS: dict[int, dict[str, list[str]]] = {
    ETH_CHAIN_ID: {
        "aave_v3": AAVE_V3_ETHEREUM_ASSETS,
        "spark_lend": SPARK_LEND_ASSETS,
    },
    BSC_CHAIN_ID: {
        "aave_v3": AAVE_V3_BSC_ASSETS,
        "avalon_finance": AVALON_FINANCE_BSC_ASSETS,
    },
    POLYGON_CHAIN_ID: {
        "aave_v3": AAVE_V3_POLYGON_ASSETS,
    },
}
