"""One-time registry setup.

build_registry() constructs every protocol operation for the configured
chains, registers each under its contract key, registers the generic
(protocol, action) operations and freezes the registry. Any failure is
raised as SetupError chained to its cause; no partially built registry is
returned.

Registered per chain:
- Ethereum: Lido, Aave v3, Spark, Ankr, RocketPool, Compound v3 (USDC and WETH markets)
- BSC: Aave v3, Avalon Finance, ListaDao
- Polygon: Aave v3
"""

from __future__ import annotations

from typing import Callable

from loguru import logger

from protocol_registry.core.config import REQUIRED_CHAIN_IDS, RegistrySettings
from protocol_registry.core.errors import ProtocolRegistryError, SetupError
from protocol_registry.core.registry import ActionKey, ContractKey, OperationRegistry
from protocol_registry.data.constants import (
    BSC_CHAIN_ID,
    CHAIN_NAMES,
    COMPOUND_USDC_MARKET,
    COMPOUND_WETH_MARKET,
    ETH_CHAIN_ID,
    POLYGON_CHAIN_ID,
)
from protocol_registry.data.rpc import RPCClient, Web3RPCClient
from protocol_registry.protocols.aave import AaveFork, AaveOperation
from protocol_registry.protocols.ankr import AnkrOperation
from protocol_registry.protocols.base import ProtocolOperation
from protocol_registry.protocols.compound import CompoundOperation
from protocol_registry.protocols.generic import build_generic_operations
from protocol_registry.protocols.lido import LidoOperation
from protocol_registry.protocols.listadao import ListaDaoOperation
from protocol_registry.protocols.rocketpool import RocketPoolOperation

_log = logger.bind(component="bootstrap")

RPCFactory = Callable[[str, float], RPCClient]


def _ethereum_operations(rpc: RPCClient) -> list[ProtocolOperation]:
    return [
        LidoOperation(rpc, ETH_CHAIN_ID),
        AaveOperation(rpc, ETH_CHAIN_ID, AaveFork.AAVE),
        AaveOperation(rpc, ETH_CHAIN_ID, AaveFork.SPARK),
        AnkrOperation(rpc, ETH_CHAIN_ID),
        RocketPoolOperation(rpc, ETH_CHAIN_ID),
        CompoundOperation(rpc, ETH_CHAIN_ID, COMPOUND_USDC_MARKET),
        CompoundOperation(rpc, ETH_CHAIN_ID, COMPOUND_WETH_MARKET),
    ]


def _bsc_operations(rpc: RPCClient) -> list[ProtocolOperation]:
    return [
        AaveOperation(rpc, BSC_CHAIN_ID, AaveFork.AAVE),
        AaveOperation(rpc, BSC_CHAIN_ID, AaveFork.AVALON_FINANCE),
        ListaDaoOperation(rpc, BSC_CHAIN_ID),
    ]


def _polygon_operations(rpc: RPCClient) -> list[ProtocolOperation]:
    return [AaveOperation(rpc, POLYGON_CHAIN_ID, AaveFork.AAVE)]


CHAIN_BUILDERS: dict[int, Callable[[RPCClient], list[ProtocolOperation]]] = {
    ETH_CHAIN_ID: _ethereum_operations,
    BSC_CHAIN_ID: _bsc_operations,
    POLYGON_CHAIN_ID: _polygon_operations,
}


def register_generic_operations(registry: OperationRegistry, chain_id: int = ETH_CHAIN_ID) -> None:
    """Register the generic (protocol, action) operations of a chain."""
    for op in build_generic_operations(chain_id):
        registry.register(ActionKey.of(op.chain_id, op.protocol, op.action), op)


def build_registry(
    settings: RegistrySettings,
    rpc_factory: RPCFactory = Web3RPCClient,
) -> OperationRegistry:
    """Build and freeze the operation registry.

    Args:
        settings: Chain configuration; Ethereum, BSC and Polygon are required.
        rpc_factory: Builds an RPC client from (rpc_url, timeout).

    Returns:
        A frozen registry.

    Raises:
        SetupError: If a chain is not configured or any operation fails to
            build or register.
    """
    registry = OperationRegistry()
    try:
        for chain_id in REQUIRED_CHAIN_IDS:
            config = settings.chain(chain_id)
            rpc = rpc_factory(config.rpc_url, settings.rpc_timeout)
            operations = CHAIN_BUILDERS[chain_id](rpc)
            for op in operations:
                registry.register(ContractKey.of(chain_id, op.registry_address), op)
            _log.info(f"Registered {len(operations)} operations on {CHAIN_NAMES[chain_id]}")
        register_generic_operations(registry)
    except ProtocolRegistryError as e:
        _log.error(f"Registry setup failed: {e}")
        raise SetupError(f"failed to build operation registry: {e}") from e

    registry.freeze()
    return registry


def build_generic_registry(chain_id: int = ETH_CHAIN_ID) -> OperationRegistry:
    """Frozen registry holding only generic operations; needs no RPC access."""
    registry = OperationRegistry()
    try:
        register_generic_operations(registry, chain_id)
    except ProtocolRegistryError as e:
        raise SetupError(f"failed to build generic registry: {e}") from e
    registry.freeze()
    return registry
