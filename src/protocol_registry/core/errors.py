"""Error taxonomy for the protocol registry.

Every error raised by this package derives from ProtocolRegistryError and
falls into one of these groups:
- AbiError: type parsing, argument matching and encoding/decoding
- ValidationError: semantic checks performed by protocol operations
- RegistryError: registration and lookup failures
- ConfigurationError / SetupError: environment and bootstrap failures
- RPCError: failures reported by the chain RPC collaborator

Errors carry their context as attributes so callers can branch on them
without parsing messages.
"""

from __future__ import annotations

from typing import Any


class ProtocolRegistryError(Exception):
    """Base class for all protocol registry errors."""

    pass


# ABI errors


class AbiError(ProtocolRegistryError):
    """Raised for ABI type, matching or codec failures."""

    pass


class UnsupportedTypeError(AbiError):
    """Raised when a type string is not part of the supported ABI subset."""

    def __init__(self, type_string: str, reason: str = "unsupported ABI type") -> None:
        self.type_string = type_string
        self.reason = reason
        super().__init__(f"{reason}: {type_string!r}")


class ArgumentCountMismatchError(AbiError):
    """Raised when the number of values differs from the number of types."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"argument count mismatch: expected {expected}, got {actual}")


class TypeMismatchError(AbiError):
    """Raised when a value cannot be coerced into its declared ABI type."""

    def __init__(self, index: int, expected: str, actual: str, detail: str | None = None) -> None:
        self.index = index
        self.expected = expected
        self.actual = actual
        self.detail = detail
        message = f"argument {index}: expected {expected}, got {actual}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DecodeError(AbiError):
    """Raised when return data cannot be decoded against the declared types."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"cannot decode value {index}: {reason}")


class UnknownMethodError(AbiError):
    """Raised when a method name is not present in a contract ABI."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"method {name!r} not found in ABI")


# Validation errors


class ValidationError(ProtocolRegistryError):
    """Raised when a request fails protocol validation."""

    pass


class InvalidChainError(ValidationError):
    """Raised for a chain id the operation or registry does not accept."""

    def __init__(self, chain_id: int, detail: str | None = None) -> None:
        self.chain_id = chain_id
        self.detail = detail
        message = f"invalid chain id {chain_id}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnsupportedActionError(ValidationError):
    """Raised when the protocol does not implement the requested action."""

    def __init__(self, action: Any, protocol: str) -> None:
        self.action = action
        self.protocol = protocol
        super().__init__(f"action {getattr(action, 'value', action)!r} is not supported by {protocol}")


class UnsupportedAssetError(ValidationError):
    """Raised when an asset is not in the protocol's supported set."""

    def __init__(self, asset: str, protocol: str) -> None:
        self.asset = asset
        self.protocol = protocol
        super().__init__(f"asset {asset} is not supported by {protocol}")


class InvalidAmountError(ValidationError):
    """Raised when the amount is not strictly positive."""

    def __init__(self, amount: int) -> None:
        self.amount = amount
        super().__init__(f"amount must be greater than zero, got {amount}")


class InsufficientBalanceError(ValidationError):
    """Raised when the account cannot cover the requested amount."""

    def __init__(self, token: str, required: int, available: int) -> None:
        self.token = token
        self.required = required
        self.available = available
        super().__init__(
            f"insufficient balance of {token}: required {required}, available {available}"
        )


class DepositLimitError(ValidationError):
    """Raised when a deposit falls outside the protocol's accepted window."""

    def __init__(self, amount: int, minimum: int, maximum: int) -> None:
        self.amount = amount
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"deposit of {amount} outside accepted range [{minimum}, {maximum}]"
        )


# Registry errors


class RegistryError(ProtocolRegistryError):
    """Raised for registration and lookup failures."""

    pass


class NotFoundError(RegistryError):
    """Raised when a lookup key has no entry."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"{key} not found")


class DuplicateRegistrationError(RegistryError):
    """Raised when a key is registered twice."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"operation already registered for {key}")


class NilOperationError(RegistryError):
    """Raised when registering None as an operation."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"cannot register empty operation for {key}")


class RegistryFrozenError(RegistryError):
    """Raised when registering into a registry that has been frozen."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"registry is frozen, cannot register {key}")


# Setup and environment errors


class ConfigurationError(ProtocolRegistryError):
    """Raised when environment configuration is missing or malformed."""

    pass


class SetupError(ProtocolRegistryError):
    """Raised when building the registry fails."""

    pass


class RPCError(ProtocolRegistryError):
    """Raised when the RPC collaborator fails a call."""

    def __init__(self, chain_id: int, method: str, detail: str | None = None) -> None:
        self.chain_id = chain_id
        self.method = method
        self.detail = detail
        message = f"rpc call {method} failed on chain {chain_id}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
