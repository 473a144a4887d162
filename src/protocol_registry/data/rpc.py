"""Chain RPC collaborator.

Protocol operations only need three read capabilities from a node: a
view-function call, a native balance read, and the network id. The
RPCClient protocol captures those; Web3RPCClient implements them over a
web3 HTTP provider. Every call accepts a timeout in seconds.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from loguru import logger
from web3 import Web3

DEFAULT_RPC_TIMEOUT = 10.0


@runtime_checkable
class RPCClient(Protocol):
    """Read-only access to a chain node."""

    def call_contract(self, to: str, data: bytes, timeout: float | None = None) -> bytes:
        """Execute a view call and return the raw return data."""
        ...

    def balance_at(self, account: str, timeout: float | None = None) -> int:
        """Return the native currency balance of an account in wei."""
        ...

    def network_id(self, timeout: float | None = None) -> int:
        """Return the network id reported by the node."""
        ...


class Web3RPCClient:
    """RPCClient backed by web3's HTTPProvider.

    One Web3 instance is kept per distinct timeout so the timeout is
    applied through the provider's request kwargs.

    Usage:
        client = Web3RPCClient("https://eth.llamarpc.com")
        balance = client.balance_at("0x...", timeout=5)
    """

    def __init__(self, rpc_url: str, default_timeout: float = DEFAULT_RPC_TIMEOUT) -> None:
        """Initialize the client.

        Args:
            rpc_url: HTTP(S) endpoint of the node.
            default_timeout: Timeout used when a call does not pass one.
        """
        self.rpc_url = rpc_url
        self.default_timeout = default_timeout
        self._clients: dict[float, Web3] = {}
        self._lock = threading.Lock()

    def _web3(self, timeout: float | None) -> Web3:
        effective = float(timeout if timeout is not None else self.default_timeout)
        with self._lock:
            client = self._clients.get(effective)
            if client is None:
                client = Web3(
                    Web3.HTTPProvider(self.rpc_url, request_kwargs={"timeout": effective})
                )
                self._clients[effective] = client
            return client

    def call_contract(self, to: str, data: bytes, timeout: float | None = None) -> bytes:
        logger.bind(component="rpc").trace(f"eth_call to={to} selector=0x{data[:4].hex()}")
        result = self._web3(timeout).eth.call(
            {"to": Web3.to_checksum_address(to), "data": "0x" + data.hex()}
        )
        return bytes(result)

    def balance_at(self, account: str, timeout: float | None = None) -> int:
        return int(self._web3(timeout).eth.get_balance(Web3.to_checksum_address(account)))

    def network_id(self, timeout: float | None = None) -> int:
        return int(self._web3(timeout).net.version)

    def __repr__(self) -> str:
        return f"Web3RPCClient({self.rpc_url!r})"
