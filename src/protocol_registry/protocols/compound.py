"""Compound v3 (Comet) adapter.

Each Comet market is a separate contract with its own base token and
collateral set, so one operation is registered per market. The native
token sentinel is encoded as WETH, which is what the markets hold.
"""

from __future__ import annotations

from web3 import Web3

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import ConfigurationError, InvalidChainError
from protocol_registry.data.constants import (
    COMPOUND_MARKET_ASSETS,
    COMPOUND_V3_ABI,
    COMPOUND_VERSION,
    ETH_CHAIN_ID,
    WETH_ADDRESS,
)
from protocol_registry.data.models import (
    ContractAction,
    ProtocolName,
    ProtocolType,
    TokenBalance,
    TransactionParams,
    is_native_token,
)
from protocol_registry.data.rpc import RPCClient
from protocol_registry.protocols.base import ProtocolOperation

COMET = ContractABI.from_json(COMPOUND_V3_ABI)


class CompoundOperation(ProtocolOperation):
    """Supply and withdraw on one Compound v3 market.

    Supplies are not balance-checked; withdrawals are checked against the
    account's position in the market (base balance or collateral balance).
    """

    name = ProtocolName.COMPOUND.value
    protocol_type = ProtocolType.LOAN
    supported_actions = frozenset({ContractAction.LOAN_SUPPLY, ContractAction.LOAN_WITHDRAW})

    def __init__(
        self,
        rpc: RPCClient,
        chain_id: int,
        market: str,
        timeout: float | None = None,
    ) -> None:
        """Initialize the adapter and resolve the market's base token.

        Args:
            rpc: Client connected to chain_id.
            chain_id: Must be Ethereum mainnet.
            market: Comet market address.
            timeout: Timeout for the baseToken() call.

        Raises:
            InvalidChainError: If chain_id is not Ethereum.
            ConfigurationError: If the market is unknown.
            RPCError: If the base token cannot be read.
        """
        if chain_id != ETH_CHAIN_ID:
            raise InvalidChainError(chain_id, "compound v3 is only supported on ethereum")
        assets = COMPOUND_MARKET_ASSETS.get(market.lower())
        if assets is None:
            raise ConfigurationError(f"unknown compound v3 market {market}")
        super().__init__(rpc, chain_id, market, COMET, COMPOUND_VERSION)
        self._assets = tuple(assets)

        (base_token,) = self._call_view(self.abi, "baseToken", self.contract_address, (), timeout)
        self.base_token = Web3.to_checksum_address(base_token)

    @property
    def supported_assets(self) -> tuple[str, ...]:
        return self._assets

    @staticmethod
    def _market_asset(asset: str) -> str:
        return WETH_ADDRESS if is_native_token(asset) else asset

    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        method = "supply" if action == ContractAction.LOAN_SUPPLY else "withdraw"
        return self.abi.method(method).encode_call(
            self._market_asset(params.asset), params.amount
        )

    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        market_asset = self._market_asset(asset)
        if market_asset.lower() == self.base_token.lower():
            (amount,) = self._call_view(
                self.abi, "balanceOf", self.contract_address, (account,), timeout
            )
        else:
            (amount,) = self._call_view(
                self.abi,
                "collateralBalanceOf",
                self.contract_address,
                (account, market_asset),
                timeout,
            )
        return TokenBalance(
            token=Web3.to_checksum_address(market_asset), account=account, amount=amount
        )
