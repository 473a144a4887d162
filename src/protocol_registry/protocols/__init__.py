"""Protocol adapters."""

from protocol_registry.protocols.aave import AaveDeployment, AaveFork, AaveOperation
from protocol_registry.protocols.ankr import AnkrOperation
from protocol_registry.protocols.base import ProtocolOperation
from protocol_registry.protocols.compound import CompoundOperation
from protocol_registry.protocols.generic import GenericOperation, build_generic_operations
from protocol_registry.protocols.lido import LidoOperation
from protocol_registry.protocols.listadao import ListaDaoOperation
from protocol_registry.protocols.rocketpool import RocketPoolOperation

__all__ = [
    # Base
    "ProtocolOperation",
    # Lending
    "AaveDeployment",
    "AaveFork",
    "AaveOperation",
    "CompoundOperation",
    # Staking
    "AnkrOperation",
    "LidoOperation",
    "ListaDaoOperation",
    "RocketPoolOperation",
    # Generic dispatch
    "GenericOperation",
    "build_generic_operations",
]
