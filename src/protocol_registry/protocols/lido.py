"""Lido stETH staking adapter (Ethereum)."""

from __future__ import annotations

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import InvalidChainError
from protocol_registry.data.constants import (
    ETH_CHAIN_ID,
    LIDO_ABI,
    LIDO_STETH,
    LIDO_VERSION,
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

LIDO = ContractABI.from_json(LIDO_ABI)


class LidoOperation(ProtocolOperation):
    """Stake ETH for stETH.

    The beneficiary is passed as the submit() referral, matching how the
    stake is attributed on-chain. Unstaking goes through Lido's withdrawal
    queue and is not offered.
    """

    name = ProtocolName.LIDO.value
    protocol_type = ProtocolType.STAKE
    supported_actions = frozenset({ContractAction.NATIVE_STAKE})

    def __init__(self, rpc: RPCClient, chain_id: int) -> None:
        if chain_id != ETH_CHAIN_ID:
            raise InvalidChainError(chain_id, "lido is only supported on ethereum")
        super().__init__(rpc, chain_id, LIDO_STETH, LIDO, LIDO_VERSION)

    @property
    def supported_assets(self) -> tuple[str, ...]:
        return (NATIVE_TOKEN_ADDRESS,)

    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        return self.abi.method("submit").encode_call(params.beneficiary)

    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        # stETH is the pool contract itself
        return self._erc20_balance(self.contract_address, account, timeout)

    def _funding_balance(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> TokenBalance | None:
        return self._native_balance(params.sender, timeout)
