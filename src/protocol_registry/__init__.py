"""Protocol Registry - calldata generation for DeFi protocol operations.

This package validates lending and staking requests against on-chain state
and encodes the exact calldata the protocol contracts expect, using its own
Ethereum ABI codec.

It does not sign, broadcast or estimate gas for transactions.
"""

__version__ = "0.1.0"

from loguru import logger

from protocol_registry.core.bootstrap import build_generic_registry, build_registry
from protocol_registry.core.errors import ProtocolRegistryError
from protocol_registry.core.registry import OperationRegistry
from protocol_registry.data.models import ContractAction, TransactionParams

# Library logging is opt-in through configure_logging()
logger.disable("protocol_registry")

__all__ = [
    "ContractAction",
    "OperationRegistry",
    "ProtocolRegistryError",
    "TransactionParams",
    "build_generic_registry",
    "build_registry",
    "__version__",
]
