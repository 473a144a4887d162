"""Data layer: models, static tables, RPC access and the token registry."""

from protocol_registry.data.models import (
    ContractAction,
    ProtocolConfig,
    ProtocolName,
    ProtocolType,
    Token,
    TokenBalance,
    TokenProtocol,
    TransactionParams,
)
from protocol_registry.data.rpc import RPCClient, Web3RPCClient
from protocol_registry.data.token_registry import JSONTokenRegistry

__all__ = [
    # Models
    "ContractAction",
    "ProtocolConfig",
    "ProtocolName",
    "ProtocolType",
    "Token",
    "TokenBalance",
    "TokenProtocol",
    "TransactionParams",
    # RPC
    "RPCClient",
    "Web3RPCClient",
    # Token registry
    "JSONTokenRegistry",
]
