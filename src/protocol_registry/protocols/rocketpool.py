"""RocketPool rETH staking adapter (Ethereum).

RocketPool publishes its current contract addresses in RocketStorage under
keccak256("contract.address" + name). The deposit pool, the rETH token and
the deposit settings are resolved once at construction.

- Stake: deposit() on the deposit pool, within the pool's deposit window
- Unstake: transfer(beneficiary, amount) of rETH
"""

from __future__ import annotations

from web3 import Web3

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import DepositLimitError, InvalidChainError
from protocol_registry.data.constants import (
    ETH_CHAIN_ID,
    NATIVE_TOKEN_ADDRESS,
    ROCKET_DEPOSIT_POOL_ABI,
    ROCKET_DEPOSIT_POOL_NAME,
    ROCKET_DEPOSIT_SETTINGS_ABI,
    ROCKET_DEPOSIT_SETTINGS_NAME,
    ROCKET_POOL_VERSION,
    ROCKET_RETH_ABI,
    ROCKET_STORAGE,
    ROCKET_STORAGE_ABI,
    ROCKET_TOKEN_RETH_NAME,
)
from protocol_registry.data.models import (
    ContractAction,
    ProtocolName,
    ProtocolType,
    TokenBalance,
    TransactionParams,
)
from protocol_registry.data.rpc import RPCClient
from protocol_registry.protocols.base import ProtocolOperation

ROCKET_STORAGE_CONTRACT = ContractABI.from_json(ROCKET_STORAGE_ABI)
ROCKET_DEPOSIT_POOL = ContractABI.from_json(ROCKET_DEPOSIT_POOL_ABI)
ROCKET_DEPOSIT_SETTINGS = ContractABI.from_json(ROCKET_DEPOSIT_SETTINGS_ABI)
ROCKET_RETH = ContractABI.from_json(ROCKET_RETH_ABI)


def storage_key(contract_name: str) -> bytes:
    """RocketStorage key under which a contract's address is stored."""
    return Web3.keccak(text="contract.address" + contract_name)


class RocketPoolOperation(ProtocolOperation):
    """Stake ETH for rETH and hand rETH back out.

    Usage:
        rocket = RocketPoolOperation(eth_rpc, 1)
        calldata = rocket.prepare(1, ContractAction.NATIVE_STAKE, params)
    """

    name = ProtocolName.ROCKET_POOL.value
    protocol_type = ProtocolType.STAKE
    supported_actions = frozenset({ContractAction.NATIVE_STAKE, ContractAction.NATIVE_UNSTAKE})

    def __init__(
        self,
        rpc: RPCClient,
        chain_id: int,
        storage: str = ROCKET_STORAGE,
        timeout: float | None = None,
    ) -> None:
        """Initialize the adapter and resolve RocketPool's contracts.

        Args:
            rpc: Client connected to chain_id.
            chain_id: Must be Ethereum mainnet.
            storage: RocketStorage address.
            timeout: Timeout for each resolution call.

        Raises:
            InvalidChainError: If chain_id is not Ethereum.
            RPCError: If an address cannot be resolved.
        """
        if chain_id != ETH_CHAIN_ID:
            raise InvalidChainError(chain_id, "rocketpool is only supported on ethereum")
        # The base initializer needs the deposit pool address, so resolution
        # goes through a bare storage call first.
        self.rpc = rpc
        self.chain_id = chain_id
        self.storage = Web3.to_checksum_address(storage)
        deposit_pool = self._resolve(ROCKET_DEPOSIT_POOL_NAME, timeout)
        super().__init__(rpc, chain_id, deposit_pool, ROCKET_DEPOSIT_POOL, ROCKET_POOL_VERSION)
        self.reth_token = self._resolve(ROCKET_TOKEN_RETH_NAME, timeout)
        self.deposit_settings = self._resolve(ROCKET_DEPOSIT_SETTINGS_NAME, timeout)
        self._log.debug(
            f"Resolved deposit pool {self.contract_address}, rETH {self.reth_token}"
        )

    @property
    def registry_address(self) -> str:
        """RocketStorage, which stays fixed across RocketPool upgrades."""
        return self.storage

    def _resolve(self, contract_name: str, timeout: float | None) -> str:
        (address,) = self._call_view(
            ROCKET_STORAGE_CONTRACT,
            "getAddress",
            self.storage,
            (storage_key(contract_name),),
            timeout,
        )
        return Web3.to_checksum_address(address)

    @property
    def supported_assets(self) -> tuple[str, ...]:
        return (NATIVE_TOKEN_ADDRESS, self.reth_token.lower())

    def target_address(self, action: ContractAction | str) -> str:
        """Contract the calldata of an action is sent to."""
        action = self.check_action(action)
        if action == ContractAction.NATIVE_UNSTAKE:
            return self.reth_token
        return self.contract_address

    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        if action == ContractAction.NATIVE_STAKE:
            return self.abi.method("deposit").encode_call()
        return ROCKET_RETH.method("transfer").encode_call(params.beneficiary, params.amount)

    def deposit_window(self, timeout: float | None = None) -> tuple[int, int]:
        """Minimum deposit and current maximum deposit, in wei."""
        (minimum,) = self._call_view(
            ROCKET_DEPOSIT_SETTINGS, "getMinimumDeposit", self.deposit_settings, (), timeout
        )
        (maximum,) = self._call_view(
            self.abi, "getMaximumDepositAmount", self.contract_address, (), timeout
        )
        return minimum, maximum

    def _check_limits(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> None:
        if action != ContractAction.NATIVE_STAKE:
            return
        minimum, maximum = self.deposit_window(timeout)
        if params.amount < minimum or params.amount > maximum:
            raise DepositLimitError(params.amount, minimum, maximum)

    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        return self._erc20_balance(self.reth_token, account, timeout)

    def _funding_balance(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> TokenBalance | None:
        return self._native_balance(params.sender, timeout)
