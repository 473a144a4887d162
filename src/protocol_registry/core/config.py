"""Environment configuration.

Settings are read from the process environment, after loading a `.env`
file if present:
- ETH_RPC_URL, BSC_RPC_URL, POLYGON_RPC_URL: node endpoints per chain
- RPC_TIMEOUT_SECONDS: default timeout for RPC calls (default 10)
- LOG_LEVEL: log level for configure_logging (default INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from protocol_registry.core.errors import ConfigurationError
from protocol_registry.data.constants import BSC_CHAIN_ID, ETH_CHAIN_ID, POLYGON_CHAIN_ID

# Environment variable holding the RPC URL of each supported chain
RPC_URL_ENV_VARS: dict[int, str] = {
    ETH_CHAIN_ID: "ETH_RPC_URL",
    BSC_CHAIN_ID: "BSC_RPC_URL",
    POLYGON_CHAIN_ID: "POLYGON_RPC_URL",
}

REQUIRED_CHAIN_IDS = (ETH_CHAIN_ID, BSC_CHAIN_ID, POLYGON_CHAIN_ID)


@dataclass(frozen=True)
class ChainConfig:
    """Connection settings for one chain."""

    chain_id: int
    rpc_url: str

    def __post_init__(self) -> None:
        if self.chain_id <= 0:
            raise ConfigurationError(f"chain id must be positive, got {self.chain_id}")
        if not self.rpc_url:
            raise ConfigurationError(f"rpc url for chain {self.chain_id} is empty")


@dataclass(frozen=True)
class RegistrySettings:
    """Settings used to build the operation registry."""

    chains: list[ChainConfig] = field(default_factory=list)
    rpc_timeout: float = 10.0
    log_level: str = "INFO"

    def chain(self, chain_id: int) -> ChainConfig:
        """Return the configuration of a chain.

        Raises:
            ConfigurationError: If the chain is not configured.
        """
        for config in self.chains:
            if config.chain_id == chain_id:
                return config
        raise ConfigurationError(f"chain configuration not found for chain id {chain_id}")


def load_settings(require_all: bool = True) -> RegistrySettings:
    """Load settings from the environment.

    Args:
        require_all: Fail unless every supported chain has an RPC URL.

    Returns:
        Loaded settings.

    Raises:
        ConfigurationError: If a required value is missing or malformed.
    """
    load_dotenv()

    chains: list[ChainConfig] = []
    missing: list[str] = []
    for chain_id, env_var in RPC_URL_ENV_VARS.items():
        url = os.getenv(env_var, "").strip()
        if url:
            chains.append(ChainConfig(chain_id=chain_id, rpc_url=url))
        else:
            missing.append(env_var)

    if require_all and missing:
        raise ConfigurationError(
            f"missing RPC configuration: {', '.join(missing)}. "
            "Set them in the environment or in a .env file."
        )

    raw_timeout = os.getenv("RPC_TIMEOUT_SECONDS", "10")
    try:
        rpc_timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"RPC_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}") from None
    if rpc_timeout <= 0:
        raise ConfigurationError(f"RPC_TIMEOUT_SECONDS must be positive, got {rpc_timeout}")

    return RegistrySettings(
        chains=chains,
        rpc_timeout=rpc_timeout,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
