"""ListaDao slisBNB staking adapter (BSC)."""

from __future__ import annotations

from protocol_registry.abi.method import ContractABI
from protocol_registry.core.errors import InvalidChainError
from protocol_registry.data.constants import (
    BSC_CHAIN_ID,
    LISTA_DAO_VERSION,
    LISTA_SLISBNB_TOKEN,
    LISTA_STAKE_MANAGER,
    LISTA_STAKE_MANAGER_ABI,
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

LISTA_STAKE_MANAGER_CONTRACT = ContractABI.from_json(LISTA_STAKE_MANAGER_ABI)


class ListaDaoOperation(ProtocolOperation):
    """Stake BNB for slisBNB through the ListaDao stake manager."""

    name = ProtocolName.LISTA_DAO.value
    protocol_type = ProtocolType.STAKE
    supported_actions = frozenset({ContractAction.NATIVE_STAKE})

    def __init__(self, rpc: RPCClient, chain_id: int, verify_network: bool = True) -> None:
        """Initialize the adapter.

        Raises:
            InvalidChainError: If chain_id is not BSC or the client is
                connected to another network.
        """
        if chain_id != BSC_CHAIN_ID:
            raise InvalidChainError(chain_id, "listadao is only supported on bsc")
        super().__init__(
            rpc, chain_id, LISTA_STAKE_MANAGER, LISTA_STAKE_MANAGER_CONTRACT, LISTA_DAO_VERSION
        )
        if verify_network:
            self._verify_network()

    @property
    def supported_assets(self) -> tuple[str, ...]:
        return (NATIVE_TOKEN_ADDRESS,)

    def _encode(self, action: ContractAction, params: TransactionParams) -> bytes:
        return self.abi.method("deposit").encode_call()

    def _receipt_balance(self, account: str, asset: str, timeout: float | None) -> TokenBalance:
        return self._erc20_balance(LISTA_SLISBNB_TOKEN, account, timeout)

    def _funding_balance(
        self, action: ContractAction, params: TransactionParams, timeout: float | None
    ) -> TokenBalance | None:
        return self._native_balance(params.sender, timeout)
