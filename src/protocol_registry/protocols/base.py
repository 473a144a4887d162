"""Base class of protocol operations.

A protocol operation is bound to one chain and one contract. It validates
requests and turns them into calldata. Validation runs these checks in
order and stops at the first failure:

1. chain: the requested chain is the operation's chain
2. action: the action is implemented by the protocol
3. asset: the asset is in the protocol's supported set
4. amount: the amount is strictly positive
5. balance: withdraw/unstake actions need enough of the receipt token;
   deposit actions need enough of the funding asset where the protocol
   defines one

Checks 1-4 never touch the network. Operations hold no per-request state,
so one instance serves any number of concurrent callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from loguru import logger
from web3 import Web3

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidChainError,
    ProtocolRegistryError,
    RPCError,
    UnsupportedActionError,
    UnsupportedAssetError,
    ValidationError,
)
from protocol_registry.data.constants import ERC20_ABI, NATIVE_TOKEN_ADDRESS
from protocol_registry.data.models import (
    ContractAction,
    ProtocolConfig,
    ProtocolType,
    TokenBalance,
    TransactionParams,
    is_native_token,
)
from protocol_registry.data.rpc import RPCClient

ERC20 = ContractABI.from_json(ERC20_ABI)


class ProtocolOperation(ABC):
    """Common behavior of protocol adapters.

    Subclasses declare their name, type, version and supported actions,
    provide the supported asset set, encode calls and read the receipt
    token balance.
    """

    name: ClassVar[str]
    protocol_type: ClassVar[ProtocolType]
    supported_actions: ClassVar[frozenset[ContractAction]]

    def __init__(
        self,
        rpc: RPCClient,
        chain_id: int,
        contract_address: str,
        abi: ContractABI,
        version: str,
    ) -> None:
        """Initialize the operation.

        Args:
            rpc: Read-only chain access.
            chain_id: Chain the contract lives on.
            contract_address: Address the calldata is sent to.
            abi: ABI of that contract.
            version: Protocol version tag.
        """
        self.rpc = rpc
        self.chain_id = chain_id
        self.contract_address = Web3.to_checksum_address(contract_address)
        self.abi = abi
        self.version = version
        self._log = logger.bind(component=self.name)

    @property
    def registry_address(self) -> str:
        """Address the operation is registered under; the call target by default."""
        return self.contract_address

    # -------------------------------------------------------------------------
    # Subclass hooks
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def supported_assets(self) -> tuple[str, ...]:
        """Lowercase addresses of supported assets."""
        ...

    @abstractmethod
    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        """Encode the call for an action that has passed the action check."""
        ...

    @abstractmethod
    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        """Balance of the token an account redeems when exiting."""
        ...

    def _funding_balance(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> TokenBalance | None:
        """Balance that funds a deposit, or None when not checked."""
        return None

    def _check_limits(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> None:
        """Protocol-specific limits checked before the balance."""
        return None

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def check_chain(self, chain_id: int) -> None:
        """Raise InvalidChainError unless chain_id is this operation's chain."""
        if chain_id != self.chain_id:
            raise InvalidChainError(chain_id, f"{self.name} is bound to chain {self.chain_id}")

    def check_action(self, action: ContractAction | str) -> ContractAction:
        """Normalize an action, raising UnsupportedActionError if this protocol lacks it."""
        try:
            normalized = ContractAction(action)
        except ValueError:
            raise UnsupportedActionError(action, self.name) from None
        if normalized not in self.supported_actions:
            raise UnsupportedActionError(normalized, self.name)
        return normalized

    def validate(
        self,
        chain_id: int,
        action: ContractAction | str,
        params: TransactionParams,
        timeout: float | None = None,
    ) -> None:
        """Validate a request.

        Args:
            chain_id: Requested chain.
            action: Requested action.
            params: Request parameters.
            timeout: Timeout in seconds for any RPC call made.

        Raises:
            InvalidChainError, UnsupportedActionError, UnsupportedAssetError,
            InvalidAmountError, DepositLimitError, InsufficientBalanceError:
                On the first failed check.
            RPCError: If a balance read fails.
        """
        try:
            self.check_chain(chain_id)
            action = self.check_action(action)
            if not self.is_supported_asset(chain_id, params.asset):
                raise UnsupportedAssetError(params.asset, self.name)
            if params.amount <= 0:
                raise InvalidAmountError(params.amount)

            self._check_limits(action, params, timeout)
            if action.is_exit:
                balance: TokenBalance | None = self._receipt_balance(
                    params.sender, params.asset, timeout
                )
            else:
                balance = self._funding_balance(action, params, timeout)
            if balance is not None and balance.amount < params.amount:
                raise InsufficientBalanceError(balance.token, params.amount, balance.amount)
        except ValidationError as e:
            self._log.debug(f"Validation failed for {getattr(action, 'value', action)}: {e}")
            raise

    def generate_calldata(
        self, chain_id: int, action: ContractAction | str, params: TransactionParams
    ) -> str:
        """Encode the calldata for an action.

        Returns:
            0x-prefixed lowercase hex of selector and arguments.

        Raises:
            InvalidChainError: If chain_id is not this operation's chain.
            UnsupportedActionError: If the action is not implemented.
            TypeMismatchError: If a parameter cannot be encoded.
        """
        self.check_chain(chain_id)
        action = self.check_action(action)
        calldata = "0x" + self._encode(action, params).hex()
        self._log.debug(f"Generated {action.value} calldata for {self.contract_address}")
        return calldata

    def prepare(
        self,
        chain_id: int,
        action: ContractAction | str,
        params: TransactionParams,
        timeout: float | None = None,
    ) -> str:
        """Validate a request and, if valid, encode its calldata."""
        self.validate(chain_id, action, params, timeout)
        return self.generate_calldata(chain_id, action, params)

    def get_balance(
        self, chain_id: int, account: str, asset: str, timeout: float | None = None
    ) -> TokenBalance:
        """Receipt token balance of an account for an asset."""
        self.check_chain(chain_id)
        return self._receipt_balance(account, asset, timeout)

    def get_supported_assets(self, chain_id: int) -> list[str]:
        """Checksummed addresses of supported assets."""
        self.check_chain(chain_id)
        return [Web3.to_checksum_address(a) for a in self.supported_assets]

    def is_supported_asset(self, chain_id: int, asset: str) -> bool:
        """Whether an asset is supported; native and ERC-20 are compared by address."""
        if chain_id != self.chain_id:
            return False
        wanted = asset.lower()
        if is_native_token(wanted):
            return any(is_native_token(a) for a in self.supported_assets)
        return wanted in self.supported_assets

    def get_contract_address(self, chain_id: int) -> str:
        self.check_chain(chain_id)
        return self.contract_address

    def get_abi(self) -> ContractABI:
        return self.abi

    def get_protocol_config(self, chain_id: int) -> ProtocolConfig:
        """Static description of this operation."""
        self.check_chain(chain_id)
        return ProtocolConfig(
            chain_id=self.chain_id,
            name=self.name,
            version=self.version,
            contract=self.contract_address,
            protocol_type=self.protocol_type,
            methods=[m.signature for m in self.abi.values()],
        )

    # -------------------------------------------------------------------------
    # RPC helpers
    # -------------------------------------------------------------------------

    def _call_view(
        self,
        abi: ContractABI,
        method_name: str,
        to: str,
        args: tuple[Any, ...] = (),
        timeout: float | None = None,
    ) -> list[Any]:
        """Call a view function and decode its outputs to Python values.

        Raises:
            RPCError: If the node call fails.
            DecodeError: If the return data is malformed.
        """
        method = abi.method(method_name)
        data = method.encode_call(*args)
        try:
            result = self.rpc.call_contract(to, data, timeout=timeout)
        except ProtocolRegistryError:
            raise
        except Exception as e:
            raise RPCError(self.chain_id, f"{method.signature} on {to}", str(e)) from e
        return method.decode_output_python(result)

    def _erc20_balance(self, token: str, account: str, timeout: float | None) -> TokenBalance:
        (amount,) = self._call_view(ERC20, "balanceOf", token, (account,), timeout)
        return TokenBalance(token=Web3.to_checksum_address(token), account=account, amount=amount)

    def _native_balance(self, account: str, timeout: float | None) -> TokenBalance:
        try:
            amount = self.rpc.balance_at(account, timeout=timeout)
        except ProtocolRegistryError:
            raise
        except Exception as e:
            raise RPCError(self.chain_id, "eth_getBalance", str(e)) from e
        return TokenBalance(
            token=Web3.to_checksum_address(NATIVE_TOKEN_ADDRESS), account=account, amount=amount
        )

    def _verify_network(self, timeout: float | None = None) -> None:
        """Check the node serves this operation's chain.

        Raises:
            InvalidChainError: On a network id mismatch.
            RPCError: If the node cannot be queried.
        """
        try:
            network_id = self.rpc.network_id(timeout=timeout)
        except ProtocolRegistryError:
            raise
        except Exception as e:
            raise RPCError(self.chain_id, "net_version", str(e)) from e
        if network_id != self.chain_id:
            raise InvalidChainError(
                self.chain_id, f"rpc client is connected to network {network_id}"
            )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, chain_id={self.chain_id}, "
            f"contract={self.contract_address})"
        )

