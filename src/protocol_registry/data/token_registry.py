"""Per-chain token and protocol registry loaded from JSON files.

Each chain has a `<chain_id>.json` file of the form:

    {
        "tokens": [{"token_address": ..., "name": ..., "symbol": ..., "decimals": ...}],
        "protocols": [{"address": ..., "name": ..., "source": true,
                       "destination": true, "tokens": [...], "type": "loan"}]
    }

The bundled files live in the `tokens` directory next to this module.
Data is loaded once and read-only afterwards.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from protocol_registry.core.errors import ConfigurationError, NotFoundError
from protocol_registry.data.constants import BSC_CHAIN_ID, ETH_CHAIN_ID, POLYGON_CHAIN_ID
from protocol_registry.data.models import Token, TokenProtocol

BUNDLED_TOKENS_DIR = Path(__file__).parent / "tokens"
DEFAULT_CHAIN_IDS = (ETH_CHAIN_ID, BSC_CHAIN_ID, POLYGON_CHAIN_ID)


class ChainTokenData(BaseModel):
    """Contents of one chain's token file."""

    tokens: list[Token] = Field(default_factory=list)
    protocols: list[TokenProtocol] = Field(default_factory=list)


class JSONTokenRegistry:
    """Token and protocol lookups backed by JSON files.

    Usage:
        registry = JSONTokenRegistry.load()
        usdc = registry.get_token_by_address(1, "0xa0b8...eb48")
    """

    def __init__(self, data: dict[int, ChainTokenData]) -> None:
        self._data = dict(data)

    @classmethod
    def load(
        cls,
        data_dir: str | Path | None = None,
        chain_ids: Iterable[int] = DEFAULT_CHAIN_IDS,
    ) -> JSONTokenRegistry:
        """Load token files for the given chains.

        Args:
            data_dir: Directory holding `<chain_id>.json` files
                (default: the bundled data).
            chain_ids: Chains to load; each must have a file.

        Returns:
            Loaded registry.

        Raises:
            ConfigurationError: If a file is missing or malformed.
        """
        directory = Path(data_dir) if data_dir is not None else BUNDLED_TOKENS_DIR
        data: dict[int, ChainTokenData] = {}
        for chain_id in chain_ids:
            path = directory / f"{chain_id}.json"
            try:
                content = json.loads(path.read_text())
                data[chain_id] = ChainTokenData.model_validate(content)
            except FileNotFoundError as e:
                raise ConfigurationError(f"token file for chain {chain_id} not found: {path}") from e
            except (json.JSONDecodeError, ValidationError) as e:
                raise ConfigurationError(f"invalid token file {path}: {e}") from e
            logger.bind(component="tokens").debug(
                f"Loaded {len(data[chain_id].tokens)} tokens for chain {chain_id}"
            )
        return cls(data)

    @property
    def chain_ids(self) -> list[int]:
        return sorted(self._data)

    def _chain(self, chain_id: int) -> ChainTokenData:
        try:
            return self._data[chain_id]
        except KeyError:
            raise NotFoundError(f"token data for chain {chain_id}") from None

    def get_tokens(self, chain_id: int) -> list[Token]:
        """All tokens known on a chain."""
        return list(self._chain(chain_id).tokens)

    def get_protocols(self, chain_id: int) -> list[TokenProtocol]:
        """All protocols known on a chain."""
        return list(self._chain(chain_id).protocols)

    def get_token_by_address(self, chain_id: int, address: str) -> Token:
        """Find a token by address, ignoring case.

        Raises:
            NotFoundError: If the chain or token is unknown.
        """
        wanted = address.lower()
        for token in self._chain(chain_id).tokens:
            if token.token_address.lower() == wanted:
                return token
        raise NotFoundError(f"token {address} on chain {chain_id}")

    def get_protocol_by_address(self, chain_id: int, address: str) -> TokenProtocol:
        """Find a protocol by address, ignoring case.

        Raises:
            NotFoundError: If the chain or protocol is unknown.
        """
        wanted = address.lower()
        for protocol in self._chain(chain_id).protocols:
            if protocol.address.lower() == wanted:
                return protocol
        raise NotFoundError(f"protocol {address} on chain {chain_id}")

    def validate(self) -> list[str]:
        """Check that every protocol references only known tokens.

        Returns:
            List of problems found; empty when consistent.
        """
        problems: list[str] = []
        for chain_id, chain_data in sorted(self._data.items()):
            known = {t.token_address.lower() for t in chain_data.tokens}
            for protocol in chain_data.protocols:
                for token in protocol.tokens:
                    if token.lower() not in known:
                        problems.append(
                            f"chain {chain_id}: protocol {protocol.name} references unknown token {token}"
                        )
        return problems
