"""Operation registry.

Maps resolution keys to protocol operations:
- ContractKey(chain_id, address) for adapters bound to a deployed contract
- ActionKey(chain_id, protocol, action) for generic dispatch operations

The registry is filled by a single setup routine and then frozen. Writes
before freezing are serialized by a lock; once frozen, lookups read an
immutable snapshot without taking any lock and further registration is
rejected. Keys are never removed or replaced.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Union

from loguru import logger

from protocol_registry.core.errors import (
    DuplicateRegistrationError,
    InvalidChainError,
    NilOperationError,
    NotFoundError,
    RegistryFrozenError,
)

_log = logger.bind(component="registry")


class ContractKey(NamedTuple):
    """Key of an operation bound to a contract on a chain."""

    chain_id: int
    address: str

    @classmethod
    def of(cls, chain_id: int, address: str) -> ContractKey:
        """Build a key with the address normalized to lowercase."""
        return cls(chain_id, address.lower())

    def __str__(self) -> str:
        return f"chain {self.chain_id} contract {self.address}"


class ActionKey(NamedTuple):
    """Key of a generic operation addressed by protocol and action."""

    chain_id: int
    protocol: str
    action: str

    @classmethod
    def of(cls, chain_id: int, protocol: str, action: str) -> ActionKey:
        """Build a key with protocol and action normalized to lowercase."""
        return cls(chain_id, protocol.lower(), action.lower())

    def __str__(self) -> str:
        return f"chain {self.chain_id} {self.protocol}.{self.action}"


RegistryKey = Union[ContractKey, ActionKey]


class OperationRegistry:
    """Directory of protocol operations.

    Usage:
        registry = OperationRegistry()
        registry.register(ContractKey.of(1, pool), aave_operation)
        registry.freeze()
        op = registry.get_protocol(1, pool)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[RegistryKey, Any] = {}
        self._snapshot: Mapping[RegistryKey, Any] | None = None

    @property
    def frozen(self) -> bool:
        return self._snapshot is not None

    def register(self, key: RegistryKey, operation: Any) -> None:
        """Bind an operation to a key.

        Args:
            key: ContractKey or ActionKey.
            operation: The operation to bind.

        Raises:
            InvalidChainError: If the key's chain id is not positive.
            NilOperationError: If operation is None.
            DuplicateRegistrationError: If the key is already bound.
            RegistryFrozenError: If the registry has been frozen.
        """
        if not isinstance(key.chain_id, int) or isinstance(key.chain_id, bool) or key.chain_id <= 0:
            raise InvalidChainError(key.chain_id, "chain id must be a positive integer")
        if operation is None:
            raise NilOperationError(key)

        with self._lock:
            if self._snapshot is not None:
                raise RegistryFrozenError(key)
            if key in self._entries:
                raise DuplicateRegistrationError(key)
            self._entries[key] = operation

        _log.debug(f"Registered {type(operation).__name__} for {key}")

    def freeze(self) -> None:
        """Make the registry read-only. Idempotent."""
        with self._lock:
            if self._snapshot is None:
                self._snapshot = MappingProxyType(dict(self._entries))
                _log.info(f"Registry frozen with {len(self._snapshot)} operations")

    def _view(self) -> Mapping[RegistryKey, Any]:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._lock:
            return dict(self._entries)

    def lookup(self, key: RegistryKey) -> Any:
        """Return the operation bound to a key.

        Raises:
            NotFoundError: If nothing is bound to the key.
        """
        try:
            return self._view()[key]
        except KeyError:
            raise NotFoundError(key) from None

    def get_protocol(self, chain_id: int, address: str) -> Any:
        """Look up the operation bound to a contract address."""
        return self.lookup(ContractKey.of(chain_id, address))

    def get_action(self, protocol: str, action: str, chain_id: int) -> Any:
        """Look up a generic operation by protocol and action."""
        return self.lookup(ActionKey.of(chain_id, protocol, action))

    def list_protocols(self, chain_id: int) -> list[Any]:
        """Operations bound to contracts on a chain, in registration order."""
        return [
            op
            for key, op in self._view().items()
            if isinstance(key, ContractKey) and key.chain_id == chain_id
        ]

    def list_protocols_by_type(self, chain_id: int, protocol_type: Any) -> list[Any]:
        """Contract-bound operations on a chain whose protocol_type matches."""
        return [
            op
            for op in self.list_protocols(chain_id)
            if getattr(op, "protocol_type", None) == protocol_type
        ]

    def keys(self) -> list[RegistryKey]:
        return list(self._view())

    def __contains__(self, key: object) -> bool:
        return key in self._view()

    def __len__(self) -> int:
        return len(self._view())
