"""Generic (protocol, action, chain) dispatch.

A GenericOperation wraps a single method signature and encodes raw argument
lists supplied by the caller, with no chain access. validate(asset) checks
an asset against the per-chain asset table separately. Used by the offline
CLI path and by callers that already hold fully-formed arguments.
"""

from __future__ import annotations

from typing import Any, Sequence

from loguru import logger
from web3 import Web3

from protocol_registry.abi.method import Method
from protocol_registry.core.errors import InvalidChainError, UnsupportedAssetError
from protocol_registry.data.constants import (
    ETH_CHAIN_ID,
    GENERIC_OPERATION_ADDRESSES,
    GENERIC_OPERATIONS,
    GENERIC_SUPPORTED_ASSETS,
)
from protocol_registry.data.models import is_native_token

_log = logger.bind(component="generic")


class GenericOperation:
    """Encode calls to one method of one protocol contract.

    Usage:
        op = GenericOperation("aave_v3", "supply", 1, pool,
                              "supply(address,uint256,address,uint16)")
        calldata = op.generate_calldata([asset, amount, on_behalf_of, 0])
    """

    def __init__(
        self,
        protocol: str,
        action: str,
        chain_id: int,
        contract_address: str,
        signature: str,
    ) -> None:
        """Initialize the operation.

        Raises:
            UnsupportedTypeError: If the signature uses an unsupported type.
        """
        self.protocol = protocol
        self.action = action
        self.chain_id = chain_id
        self.contract_address = Web3.to_checksum_address(contract_address)
        self.method = Method.from_signature(signature)

    def get_contract_address(self, chain_id: int | None = None) -> str:
        """Checksummed address the calldata is sent to.

        Raises:
            InvalidChainError: If chain_id is given and differs from the operation's chain.
        """
        self._check_chain(chain_id)
        return self.contract_address

    def validate(self, asset: str) -> None:
        """Check an asset against this protocol's supported assets on its chain.

        Callers run this themselves; generate_calldata does not. A protocol
        with an empty asset list accepts only the native token.

        Raises:
            InvalidChainError: If no asset table exists for the chain.
            UnsupportedAssetError: If the protocol has no table or the asset
                is not in it.
        """
        try:
            protocols = GENERIC_SUPPORTED_ASSETS[self.chain_id]
        except KeyError:
            raise InvalidChainError(self.chain_id, "no asset table for this chain") from None
        supported = protocols.get(self.protocol)
        if supported is None:
            raise UnsupportedAssetError(asset, self.protocol)
        if not supported:
            if is_native_token(asset):
                return
            raise UnsupportedAssetError(asset, self.protocol)
        if asset.lower() not in (a.lower() for a in supported):
            raise UnsupportedAssetError(asset, self.protocol)

    def _check_chain(self, chain_id: int | None) -> None:
        if chain_id is not None and chain_id != self.chain_id:
            raise InvalidChainError(chain_id, f"{self.protocol} is bound to chain {self.chain_id}")

    def generate_calldata(self, args: Sequence[Any], chain_id: int | None = None) -> str:
        """Encode the method call for a raw argument list.

        Args:
            args: Arguments in declaration order.
            chain_id: Requested chain; checked against the operation's chain
                when given.

        Returns:
            0x-prefixed lowercase hex calldata.

        Raises:
            InvalidChainError: If chain_id differs from the operation's chain.
            ArgumentCountMismatchError: If len(args) differs from the arity.
            TypeMismatchError: If an argument does not match its type.
        """
        self._check_chain(chain_id)
        calldata = self.method.encode_call_hex(*args)
        _log.debug(f"Encoded {self.protocol}.{self.action} as {self.method.signature}")
        return calldata

    def __repr__(self) -> str:
        return (
            f"GenericOperation(protocol={self.protocol!r}, action={self.action!r}, "
            f"chain_id={self.chain_id}, signature={self.method.signature!r})"
        )


def build_generic_operations(chain_id: int = ETH_CHAIN_ID) -> list[GenericOperation]:
    """Generic operations for every known (protocol, action) signature."""
    operations = []
    for protocol, actions in GENERIC_OPERATIONS.items():
        address = GENERIC_OPERATION_ADDRESSES[protocol]
        for action, signature in actions.items():
            operations.append(GenericOperation(protocol, action, chain_id, address, signature))
    return operations
