"""Aave v3 family adapter.

One adapter serves every Aave v3 pool deployment; the fork and chain pick
a deployment entry holding the pool address, the supported assets and the
registered protocol name. Deployments:

- Aave: Ethereum, BSC and Polygon
- Spark: Ethereum only
- Avalon Finance: BSC only

Withdrawals are checked against the aToken balance, whose address is read
from the pool's getReserveData. Supplies are checked against the sender's
balance of the underlying ERC-20.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from web3 import Web3

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import InvalidChainError, UnsupportedAssetError
from protocol_registry.data.constants import (
    AAVE_V3_BSC_ASSETS,
    AAVE_V3_BSC_POOL,
    AAVE_V3_ETHEREUM_ASSETS,
    AAVE_V3_ETHEREUM_POOL,
    AAVE_V3_POLYGON_ASSETS,
    AAVE_V3_POLYGON_POOL,
    AAVE_V3_POOL_ABI,
    AAVE_V3_VERSION,
    AVALON_FINANCE_BSC_ASSETS,
    AVALON_FINANCE_BSC_POOL,
    BSC_CHAIN_ID,
    ETH_CHAIN_ID,
    POLYGON_CHAIN_ID,
    RESERVE_DATA_ATOKEN_INDEX,
    SPARK_LEND_ASSETS,
    SPARK_LEND_POOL,
)
from protocol_registry.data.models import (
    ContractAction,
    ProtocolName,
    ProtocolType,
    TokenBalance,
    TransactionParams,
    is_zero_address,
)
from protocol_registry.data.rpc import RPCClient
from protocol_registry.protocols.base import ProtocolOperation

AAVE_V3_POOL = ContractABI.from_json(AAVE_V3_POOL_ABI)

AAVE_SUPPORTED_CHAINS = (ETH_CHAIN_ID, BSC_CHAIN_ID, POLYGON_CHAIN_ID)


class AaveFork(str, Enum):
    """Aave v3 code bases with their own deployments."""

    AAVE = "aave"
    SPARK = "spark"
    AVALON_FINANCE = "avalon_finance"


@dataclass(frozen=True)
class AaveDeployment:
    """A pool deployment of an Aave v3 fork on one chain."""

    fork: AaveFork
    chain_id: int
    pool: str
    assets: tuple[str, ...]
    protocol: ProtocolName


AAVE_DEPLOYMENTS: dict[tuple[AaveFork, int], AaveDeployment] = {
    (AaveFork.AAVE, ETH_CHAIN_ID): AaveDeployment(
        fork=AaveFork.AAVE,
        chain_id=ETH_CHAIN_ID,
        pool=AAVE_V3_ETHEREUM_POOL,
        assets=tuple(AAVE_V3_ETHEREUM_ASSETS),
        protocol=ProtocolName.AAVE_V3,
    ),
    (AaveFork.AAVE, BSC_CHAIN_ID): AaveDeployment(
        fork=AaveFork.AAVE,
        chain_id=BSC_CHAIN_ID,
        pool=AAVE_V3_BSC_POOL,
        assets=tuple(AAVE_V3_BSC_ASSETS),
        protocol=ProtocolName.AAVE_V3,
    ),
    (AaveFork.AAVE, POLYGON_CHAIN_ID): AaveDeployment(
        fork=AaveFork.AAVE,
        chain_id=POLYGON_CHAIN_ID,
        pool=AAVE_V3_POLYGON_POOL,
        assets=tuple(AAVE_V3_POLYGON_ASSETS),
        protocol=ProtocolName.AAVE_V3,
    ),
    (AaveFork.SPARK, ETH_CHAIN_ID): AaveDeployment(
        fork=AaveFork.SPARK,
        chain_id=ETH_CHAIN_ID,
        pool=SPARK_LEND_POOL,
        assets=tuple(SPARK_LEND_ASSETS),
        protocol=ProtocolName.SPARK_LEND,
    ),
    (AaveFork.AVALON_FINANCE, BSC_CHAIN_ID): AaveDeployment(
        fork=AaveFork.AVALON_FINANCE,
        chain_id=BSC_CHAIN_ID,
        pool=AVALON_FINANCE_BSC_POOL,
        assets=tuple(AVALON_FINANCE_BSC_ASSETS),
        protocol=ProtocolName.AVALON_FINANCE,
    ),
}


def resolve_deployment(fork: AaveFork, chain_id: int) -> AaveDeployment:
    """Find the deployment of a fork on a chain.

    Raises:
        InvalidChainError: If the chain is unsupported or the fork is not
            deployed there.
    """
    if chain_id not in AAVE_SUPPORTED_CHAINS:
        raise InvalidChainError(chain_id, "only ethereum, bsc and polygon chains are supported")
    try:
        return AAVE_DEPLOYMENTS[(fork, chain_id)]
    except KeyError:
        raise InvalidChainError(chain_id, f"{fork.value} is not supported on this chain") from None


class AaveOperation(ProtocolOperation):
    """Supply and withdraw on an Aave v3 pool.

    Usage:
        spark = AaveOperation(eth_rpc, 1, AaveFork.SPARK)
        calldata = spark.prepare(1, ContractAction.LOAN_SUPPLY, params)
    """

    protocol_type = ProtocolType.LOAN
    supported_actions = frozenset({ContractAction.LOAN_SUPPLY, ContractAction.LOAN_WITHDRAW})

    def __init__(
        self,
        rpc: RPCClient,
        chain_id: int,
        fork: AaveFork = AaveFork.AAVE,
        verify_network: bool = True,
    ) -> None:
        """Initialize the adapter.

        Args:
            rpc: Client connected to chain_id.
            chain_id: Chain of the deployment.
            fork: Which Aave v3 code base.
            verify_network: Check the client's network id against chain_id.

        Raises:
            InvalidChainError: For an unsupported chain/fork combination or
                a client connected to another network.
        """
        self.deployment = resolve_deployment(fork, chain_id)
        self.fork = fork
        super().__init__(rpc, chain_id, self.deployment.pool, AAVE_V3_POOL, AAVE_V3_VERSION)
        if verify_network:
            self._verify_network()

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.deployment.protocol.value

    @property
    def supported_assets(self) -> tuple[str, ...]:
        return self.deployment.assets

    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        if action == ContractAction.LOAN_SUPPLY:
            referral_code = params.extra.get("referral_code", 0)
            return self.abi.method("supply").encode_call(
                params.asset, params.amount, params.beneficiary, referral_code
            )
        return self.abi.method("withdraw").encode_call(
            params.asset, params.amount, params.beneficiary
        )

    def get_atoken(self, asset: str, timeout: float | None = None) -> str:
        """Address of the aToken minted for an underlying asset.

        Raises:
            UnsupportedAssetError: If the pool has no reserve for the asset.
        """
        reserve = self._call_view(
            self.abi, "getReserveData", self.contract_address, (asset,), timeout
        )
        atoken = reserve[RESERVE_DATA_ATOKEN_INDEX]
        if is_zero_address(atoken):
            raise UnsupportedAssetError(asset, self.name)
        return Web3.to_checksum_address(atoken)

    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        return self._erc20_balance(self.get_atoken(asset, timeout), account, timeout)

    def _funding_balance(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> TokenBalance | None:
        return self._erc20_balance(params.asset, params.sender, timeout)
