"""Tests for the staking adapters: Lido, Ankr, RocketPool and ListaDao."""

from __future__ import annotations

import pytest

from conftest import RECIPIENT, SENDER, FakeRPCClient
from protocol_registry.abi.codec import pack
from protocol_registry.abi.types import parse_type
from protocol_registry.core.errors import (
    DepositLimitError,
    InsufficientBalanceError,
    InvalidChainError,
    RPCError,
    UnsupportedActionError,
    UnsupportedAssetError,
)
from protocol_registry.data.constants import (
    ANKR_ETH_STAKING_POOL,
    ANKR_ETH_TOKEN,
    LIDO_STETH,
    LISTA_SLISBNB_TOKEN,
    NATIVE_TOKEN_ADDRESS,
    ROCKET_DEPOSIT_POOL_NAME,
    ROCKET_DEPOSIT_SETTINGS_NAME,
    ROCKET_RETH_TOKEN,
    ROCKET_STORAGE,
    ROCKET_TOKEN_RETH_NAME,
)
from protocol_registry.data.models import ContractAction, ProtocolType, TransactionParams
from protocol_registry.protocols.ankr import AnkrOperation
from protocol_registry.protocols.lido import LidoOperation
from protocol_registry.protocols.listadao import ListaDaoOperation
from protocol_registry.protocols.rocketpool import RocketPoolOperation, storage_key

ETH = 10**18
DEPOSIT_POOL = "0xdd3f50f8a6cafbe9b31a427582963f465e745af8"
DEPOSIT_SETTINGS = "0x3333333333333333333333333333333333333333"
SENDER_WORD = "000000000000000000000000b4fbf271143f4fbf7b91a5ded31805e42b2208d6"


def params(asset: str = NATIVE_TOKEN_ADDRESS, amount: int = ETH, **kwargs: object) -> TransactionParams:
    return TransactionParams(amount=amount, sender=SENDER, asset=asset, **kwargs)


def serve_rocket_storage(rpc: FakeRPCClient) -> None:
    """Answer RocketStorage getAddress lookups by contract name."""
    addresses = {
        bytes(storage_key(ROCKET_DEPOSIT_POOL_NAME)): DEPOSIT_POOL,
        bytes(storage_key(ROCKET_TOKEN_RETH_NAME)): ROCKET_RETH_TOKEN,
        bytes(storage_key(ROCKET_DEPOSIT_SETTINGS_NAME)): DEPOSIT_SETTINGS,
    }

    def get_address(args: bytes) -> bytes:
        return pack([parse_type("address")], [addresses[args[:32]]])

    rpc.respond_with(ROCKET_STORAGE, "getAddress(bytes32)", get_address)


class TestLido:
    """Tests for Lido staking."""

    def test_submit_calldata(self, eth_rpc: FakeRPCClient) -> None:
        """The beneficiary is passed to submit()."""
        lido = LidoOperation(eth_rpc, 1)
        calldata = lido.generate_calldata(1, ContractAction.NATIVE_STAKE, params())
        assert calldata == "0xa1903eab" + SENDER_WORD

    def test_submit_to_recipient(self, eth_rpc: FakeRPCClient) -> None:
        lido = LidoOperation(eth_rpc, 1)
        calldata = lido.generate_calldata(
            1, ContractAction.NATIVE_STAKE, params(recipient=RECIPIENT)
        )
        assert calldata.endswith(RECIPIENT[2:])

    def test_unstake_not_supported(self, eth_rpc: FakeRPCClient) -> None:
        lido = LidoOperation(eth_rpc, 1)
        with pytest.raises(UnsupportedActionError):
            lido.validate(1, ContractAction.NATIVE_UNSTAKE, params())

    def test_only_native(self, eth_rpc: FakeRPCClient) -> None:
        lido = LidoOperation(eth_rpc, 1)
        with pytest.raises(UnsupportedAssetError):
            lido.validate(1, ContractAction.NATIVE_STAKE, params(asset=LIDO_STETH))

    def test_stake_checks_native_balance(self, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.native_balances[SENDER] = ETH - 1
        lido = LidoOperation(eth_rpc, 1)
        with pytest.raises(InsufficientBalanceError):
            lido.validate(1, ContractAction.NATIVE_STAKE, params())

    def test_stake_timeout_passed(self, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.native_balances[SENDER] = ETH
        LidoOperation(eth_rpc, 1).validate(1, ContractAction.NATIVE_STAKE, params(), timeout=3.0)
        assert eth_rpc.balance_calls == [(SENDER, 3.0)]

    def test_ethereum_only(self, bsc_rpc: FakeRPCClient) -> None:
        with pytest.raises(InvalidChainError):
            LidoOperation(bsc_rpc, 56)

    def test_steth_balance(self, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.respond(LIDO_STETH, "balanceOf(address)", ["uint256"], [7])
        balance = LidoOperation(eth_rpc, 1).get_balance(1, SENDER, NATIVE_TOKEN_ADDRESS)
        assert balance.amount == 7
        assert balance.token.lower() == LIDO_STETH

    def test_protocol_type(self, eth_rpc: FakeRPCClient) -> None:
        assert LidoOperation(eth_rpc, 1).get_protocol_config(1).protocol_type == ProtocolType.STAKE


class TestAnkr:
    """Tests for Ankr staking."""

    def test_stake_calldata(self, eth_rpc: FakeRPCClient) -> None:
        ankr = AnkrOperation(eth_rpc, 1)
        calldata = ankr.generate_calldata(1, ContractAction.NATIVE_STAKE, params())
        assert calldata == "0x" + ankr.abi.method("stakeAndClaimAethC").selector.hex()
        assert ankr.get_contract_address(1).lower() == ANKR_ETH_STAKING_POOL

    def test_unstake_calldata(self, eth_rpc: FakeRPCClient) -> None:
        ankr = AnkrOperation(eth_rpc, 1)
        calldata = ankr.generate_calldata(
            1, ContractAction.NATIVE_UNSTAKE, params(ANKR_ETH_TOKEN, 3987509938965136896)
        )
        assert calldata == (
            "0xc957619d00000000000000000000000000000000000000000000000037567b29aa5b4600"
        )

    def test_unstake_checks_ankreth_balance(self, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.respond(ANKR_ETH_TOKEN, "balanceOf(address)", ["uint256"], [ETH // 2])
        ankr = AnkrOperation(eth_rpc, 1)
        with pytest.raises(InsufficientBalanceError) as exc_info:
            ankr.validate(1, ContractAction.NATIVE_UNSTAKE, params())
        assert exc_info.value.token.lower() == ANKR_ETH_TOKEN

    def test_stake_within_balance(self, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.native_balances[SENDER] = 2 * ETH
        AnkrOperation(eth_rpc, 1).validate(1, ContractAction.NATIVE_STAKE, params())

    def test_balance_read_failure(self, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.error = TimeoutError("timed out")
        with pytest.raises(RPCError, match="eth_getBalance"):
            AnkrOperation(eth_rpc, 1).validate(1, ContractAction.NATIVE_STAKE, params())


class TestRocketPool:
    """Tests for RocketPool staking."""

    @pytest.fixture
    def rocket(self, eth_rpc: FakeRPCClient) -> RocketPoolOperation:
        serve_rocket_storage(eth_rpc)
        return RocketPoolOperation(eth_rpc, 1)

    def test_addresses_resolved(self, rocket: RocketPoolOperation) -> None:
        """Contracts are looked up in RocketStorage by name."""
        assert rocket.contract_address.lower() == DEPOSIT_POOL
        assert rocket.reth_token.lower() == ROCKET_RETH_TOKEN
        assert rocket.deposit_settings.lower() == DEPOSIT_SETTINGS

    def test_registered_under_storage(self, rocket: RocketPoolOperation) -> None:
        """The registry key stays on RocketStorage while calls go to the pool."""
        assert rocket.registry_address.lower() == ROCKET_STORAGE
        assert rocket.contract_address.lower() != ROCKET_STORAGE

    def test_plain_string_action(self, rocket: RocketPoolOperation) -> None:
        assert rocket.target_address("native_unstake").lower() == ROCKET_RETH_TOKEN

    def test_deposit_calldata(self, rocket: RocketPoolOperation) -> None:
        assert rocket.generate_calldata(1, ContractAction.NATIVE_STAKE, params()) == "0xd0e30db0"

    def test_unstake_transfers_reth(self, rocket: RocketPoolOperation) -> None:
        calldata = rocket.generate_calldata(
            1, ContractAction.NATIVE_UNSTAKE, params(ROCKET_RETH_TOKEN)
        )
        assert calldata == (
            "0xa9059cbb"
            + SENDER_WORD
            + "0000000000000000000000000000000000000000000000000de0b6b3a7640000"
        )
        assert rocket.target_address(ContractAction.NATIVE_UNSTAKE).lower() == ROCKET_RETH_TOKEN
        assert rocket.target_address(ContractAction.NATIVE_STAKE).lower() == DEPOSIT_POOL

    def test_deposit_window(self, rocket: RocketPoolOperation, eth_rpc: FakeRPCClient) -> None:
        eth_rpc.respond(DEPOSIT_SETTINGS, "getMinimumDeposit()", ["uint256"], [ETH // 100])
        eth_rpc.respond(DEPOSIT_POOL, "getMaximumDepositAmount()", ["uint256"], [5 * ETH])
        eth_rpc.native_balances[SENDER] = 100 * ETH

        rocket.validate(1, ContractAction.NATIVE_STAKE, params())
        with pytest.raises(DepositLimitError) as exc_info:
            rocket.validate(1, ContractAction.NATIVE_STAKE, params(amount=6 * ETH))
        assert exc_info.value.maximum == 5 * ETH
        with pytest.raises(DepositLimitError):
            rocket.validate(1, ContractAction.NATIVE_STAKE, params(amount=ETH // 1000))

    def test_limits_checked_before_balance(
        self, rocket: RocketPoolOperation, eth_rpc: FakeRPCClient
    ) -> None:
        eth_rpc.respond(DEPOSIT_SETTINGS, "getMinimumDeposit()", ["uint256"], [ETH // 100])
        eth_rpc.respond(DEPOSIT_POOL, "getMaximumDepositAmount()", ["uint256"], [0])
        with pytest.raises(DepositLimitError):
            rocket.validate(1, ContractAction.NATIVE_STAKE, params())
        assert eth_rpc.balance_calls == []

    def test_unstake_checks_reth_balance(
        self, rocket: RocketPoolOperation, eth_rpc: FakeRPCClient
    ) -> None:
        eth_rpc.respond(ROCKET_RETH_TOKEN, "balanceOf(address)", ["uint256"], [0])
        with pytest.raises(InsufficientBalanceError):
            rocket.validate(1, ContractAction.NATIVE_UNSTAKE, params(ROCKET_RETH_TOKEN))

    def test_resolution_failure(self, eth_rpc: FakeRPCClient) -> None:
        """Without a RocketStorage answer construction fails with RPCError."""
        with pytest.raises(RPCError, match="getAddress"):
            RocketPoolOperation(eth_rpc, 1)

    def test_storage_key(self) -> None:
        assert len(storage_key(ROCKET_DEPOSIT_POOL_NAME)) == 32
        assert storage_key("a") != storage_key("b")


class TestListaDao:
    """Tests for ListaDao staking on BSC."""

    def test_deposit_calldata(self, bsc_rpc: FakeRPCClient) -> None:
        lista = ListaDaoOperation(bsc_rpc, 56)
        assert lista.generate_calldata(56, ContractAction.NATIVE_STAKE, params()) == "0xd0e30db0"

    def test_bsc_only(self, eth_rpc: FakeRPCClient) -> None:
        with pytest.raises(InvalidChainError, match="only supported on bsc"):
            ListaDaoOperation(eth_rpc, 1)

    def test_network_verified(self, eth_rpc: FakeRPCClient) -> None:
        with pytest.raises(InvalidChainError, match="connected to network 1"):
            ListaDaoOperation(eth_rpc, 56)

    def test_slisbnb_balance(self, bsc_rpc: FakeRPCClient) -> None:
        bsc_rpc.respond(LISTA_SLISBNB_TOKEN, "balanceOf(address)", ["uint256"], [42])
        balance = ListaDaoOperation(bsc_rpc, 56).get_balance(56, SENDER, NATIVE_TOKEN_ADDRESS)
        assert balance.amount == 42

    def test_stake_checks_native_balance(self, bsc_rpc: FakeRPCClient) -> None:
        lista = ListaDaoOperation(bsc_rpc, 56)
        with pytest.raises(InsufficientBalanceError):
            lista.validate(56, ContractAction.NATIVE_STAKE, params())
