"""Tests for the protocall command line."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Callable

import pytest
from loguru import logger

from conftest import FakeRPCClient, SENDER
from protocol_registry import cli
from protocol_registry.abi.codec import pack
from protocol_registry.abi.types import parse_type
from protocol_registry.core.bootstrap import build_registry
from protocol_registry.core.config import RegistrySettings
from protocol_registry.core.logging import disable_logging
from protocol_registry.data.constants import (
    COMPOUND_USDC_MARKET,
    COMPOUND_WETH_MARKET,
    LIDO_STETH,
    NATIVE_TOKEN_ADDRESS,
    ROCKET_STORAGE,
    WETH_ADDRESS,
)

USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
URL_CHAINS = {
    "http://eth.example:8545": 1,
    "http://bsc.example:8545": 56,
    "http://polygon.example:8545": 137,
}
SUBMIT_CALLDATA = "0xa1903eab000000000000000000000000" + SENDER[2:]


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    yield
    logger.remove()
    disable_logging()


@pytest.fixture
def offline_registry(
    rpc_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    """Build the CLI registry against in-memory RPC clients."""

    def factory(url: str, timeout: float) -> FakeRPCClient:
        rpc = FakeRPCClient(URL_CHAINS[url])
        rpc.respond(COMPOUND_USDC_MARKET, "baseToken()", ["address"], [USDC])
        rpc.respond(COMPOUND_WETH_MARKET, "baseToken()", ["address"], [WETH_ADDRESS])
        rpc.respond_with(
            ROCKET_STORAGE,
            "getAddress(bytes32)",
            lambda _args: pack([parse_type("address")], ["0x" + "22" * 20]),
        )
        rpc.native_balances[SENDER] = 10**18
        return rpc

    def build(settings: RegistrySettings) -> object:
        return build_registry(settings, factory)

    monkeypatch.setattr(cli, "build_registry", build)


def _stake_args(amount: int, *extra: str) -> list[str]:
    return [
        "calldata",
        "--chain-id", "1",
        "--contract", LIDO_STETH,
        "--action", "native_stake",
        "--asset", NATIVE_TOKEN_ADDRESS,
        "--amount", str(amount),
        "--sender", SENDER,
        *extra,
    ]


class TestEncode:
    """Tests for the encode subcommand."""

    def test_signature_without_args(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["encode", "--signature", "deposit()"])
        assert capsys.readouterr().out.strip() == "0xd0e30db0"

    def test_signature_with_args(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["encode", "--signature", "transfer(address,uint256)", SENDER, "1"])
        out = capsys.readouterr().out.strip()
        assert out.startswith("0xa9059cbb000000000000000000000000" + SENDER[2:])
        assert out.endswith("0" * 63 + "1")

    def test_bool_and_array(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["encode", "--signature", "f(bool,uint8[])", "true", "[1, 2]"])
        out = capsys.readouterr().out.strip()
        words = [out[10 + i : 74 + i] for i in range(0, len(out) - 10, 64)]
        assert int(words[0], 16) == 1
        assert int(words[1], 16) == 64
        assert [int(w, 16) for w in words[2:]] == [2, 1, 2]

    def test_generic_operation(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(
            [
                "encode",
                "--protocol", "aave_v3",
                "--action", "supply",
                "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984",
                "1000000000000000000",
                "0x0000000000000000000000000000000000000000",
                "10",
            ]
        )
        assert capsys.readouterr().out.strip().startswith("0x617ba037")

    def test_argument_error_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["encode", "--signature", "transfer(address,uint256)", SENDER])
        assert exc_info.value.code == 1
        assert "ERROR" in capsys.readouterr().err

    def test_unknown_generic_action(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["encode", "--protocol", "aave_v3", "--action", "borrow"])
        assert exc_info.value.code == 1

    def test_missing_target(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["encode", "1"])
        assert "--signature" in str(exc_info.value.code)


class TestCalldata:
    """Tests for the calldata subcommand."""

    def test_missing_environment(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(_stake_args(1))
        assert exc_info.value.code == 1
        assert "ETH_RPC_URL" in capsys.readouterr().err

    def test_validated_stake(
        self, offline_registry: None, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cli.main(_stake_args(10**17))
        assert capsys.readouterr().out.strip() == SUBMIT_CALLDATA

    def test_insufficient_balance(
        self, offline_registry: None, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(_stake_args(2 * 10**18))
        assert exc_info.value.code == 1
        assert "insufficient" in capsys.readouterr().err.lower()

    def test_skip_validation(
        self, offline_registry: None, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cli.main(_stake_args(2 * 10**18, "--skip-validation"))
        assert capsys.readouterr().out.strip() == SUBMIT_CALLDATA

    def test_invalid_sender(
        self, offline_registry: None, capsys: pytest.CaptureFixture[str]
    ) -> None:
        args = _stake_args(1)
        args[args.index("--sender") + 1] = "0x1234"
        with pytest.raises(SystemExit) as exc_info:
            cli.main(args)
        assert exc_info.value.code == 1
        assert "invalid request" in capsys.readouterr().err
