"""Core modules: errors, registry, configuration and logging."""

from protocol_registry.core.errors import (
    AbiError,
    ConfigurationError,
    ProtocolRegistryError,
    RegistryError,
    RPCError,
    SetupError,
    ValidationError,
)
from protocol_registry.core.registry import ActionKey, ContractKey, OperationRegistry
from protocol_registry.core.config import ChainConfig, RegistrySettings, load_settings
from protocol_registry.core.logging import configure_logging, disable_logging

__all__ = [
    # Errors
    "AbiError",
    "ConfigurationError",
    "ProtocolRegistryError",
    "RegistryError",
    "RPCError",
    "SetupError",
    "ValidationError",
    # Registry
    "ActionKey",
    "ContractKey",
    "OperationRegistry",
    # Configuration
    "ChainConfig",
    "RegistrySettings",
    "load_settings",
    # Logging
    "configure_logging",
    "disable_logging",
]
