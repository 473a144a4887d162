"""Pytest configuration and fixtures for protocol registry tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Sequence

import pytest

from protocol_registry.abi.codec import pack
from protocol_registry.abi.method import compute_selector
from protocol_registry.abi.types import parse_type
from protocol_registry.core.config import RPC_URL_ENV_VARS
from protocol_registry.data.constants import BSC_CHAIN_ID, ETH_CHAIN_ID, POLYGON_CHAIN_ID

SENDER = "0xb4fbf271143f4fbf7b91a5ded31805e42b2208d6"
RECIPIENT = "0xc0ffee254729296a45a3885639ac7e10f9d54979"


class FakeRPCClient:
    """In-memory RPC collaborator.

    View calls are answered by (contract address, selector); handlers may
    inspect the encoded arguments. Every call is recorded.
    """

    def __init__(self, chain_id: int = ETH_CHAIN_ID) -> None:
        self.chain_id = chain_id
        self.handlers: dict[tuple[str, bytes], Callable[[bytes], bytes]] = {}
        self.native_balances: dict[str, int] = {}
        self.calls: list[tuple[str, bytes, float | None]] = []
        self.balance_calls: list[tuple[str, float | None]] = []
        self.error: Exception | None = None

    def respond(
        self, to: str, signature: str, output_types: Sequence[str], values: Sequence[Any]
    ) -> None:
        """Answer calls of a signature on a contract with fixed outputs."""
        encoded = pack([parse_type(t) for t in output_types], values)
        self.handlers[(to.lower(), compute_selector(signature))] = lambda _args: encoded

    def respond_with(self, to: str, signature: str, handler: Callable[[bytes], bytes]) -> None:
        """Answer calls with a handler receiving the encoded arguments."""
        self.handlers[(to.lower(), compute_selector(signature))] = handler

    def call_contract(self, to: str, data: bytes, timeout: float | None = None) -> bytes:
        self.calls.append((to.lower(), bytes(data), timeout))
        if self.error is not None:
            raise self.error
        try:
            handler = self.handlers[(to.lower(), bytes(data[:4]))]
        except KeyError:
            raise RuntimeError(f"unexpected call to {to} with selector 0x{data[:4].hex()}") from None
        return handler(bytes(data[4:]))

    def balance_at(self, account: str, timeout: float | None = None) -> int:
        self.balance_calls.append((account.lower(), timeout))
        if self.error is not None:
            raise self.error
        return self.native_balances.get(account.lower(), 0)

    def network_id(self, timeout: float | None = None) -> int:
        return self.chain_id


@pytest.fixture(autouse=True)
def clean_rpc_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests independent of the developer's environment and .env file."""
    for env_var in RPC_URL_ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("RPC_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def rpc_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set RPC URLs for every supported chain."""
    urls = {
        "ETH_RPC_URL": "http://eth.example:8545",
        "BSC_RPC_URL": "http://bsc.example:8545",
        "POLYGON_RPC_URL": "http://polygon.example:8545",
    }
    for name, url in urls.items():
        monkeypatch.setenv(name, url)
    return urls


@pytest.fixture
def eth_rpc() -> FakeRPCClient:
    return FakeRPCClient(ETH_CHAIN_ID)


@pytest.fixture
def bsc_rpc() -> FakeRPCClient:
    return FakeRPCClient(BSC_CHAIN_ID)


@pytest.fixture
def polygon_rpc() -> FakeRPCClient:
    return FakeRPCClient(POLYGON_CHAIN_ID)


@pytest.fixture
def temp_log_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for log files."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir
