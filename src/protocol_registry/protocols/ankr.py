"""Ankr ETH liquid staking adapter (Ethereum).

Staking sends ETH to the staking pool and mints ankrETH; unstaking burns
ankrETH shares. Both the native sentinel and ankrETH are accepted as the
request asset, and unstakes are checked against the ankrETH balance.
"""

from __future__ import annotations

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import InvalidChainError
from protocol_registry.data.constants import (
    ANKR_ABI,
    ANKR_ETH_STAKING_POOL,
    ANKR_ETH_TOKEN,
    ANKR_VERSION,
    ETH_CHAIN_ID,
    NATIVE_TOKEN_ADDRESS,
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

ANKR = ContractABI.from_json(ANKR_ABI)


class AnkrOperation(ProtocolOperation):
    """Stake and unstake ETH through Ankr."""

    name = ProtocolName.ANKR.value
    protocol_type = ProtocolType.STAKE
    supported_actions = frozenset({ContractAction.NATIVE_STAKE, ContractAction.NATIVE_UNSTAKE})

    def __init__(self, rpc: RPCClient, chain_id: int) -> None:
        if chain_id != ETH_CHAIN_ID:
            raise InvalidChainError(chain_id, "ankr is only supported on ethereum")
        super().__init__(rpc, chain_id, ANKR_ETH_STAKING_POOL, ANKR, ANKR_VERSION)

    @property
    def supported_assets(self) -> tuple[str, ...]:
        return (NATIVE_TOKEN_ADDRESS, ANKR_ETH_TOKEN)

    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        if action == ContractAction.NATIVE_STAKE:
            return self.abi.method("stakeAndClaimAethC").encode_call()
        return self.abi.method("unstakeAETH").encode_call(params.amount)

    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        return self._erc20_balance(ANKR_ETH_TOKEN, account, timeout)

    def _funding_balance(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> TokenBalance | None:
        return self._native_balance(params.sender, timeout)
