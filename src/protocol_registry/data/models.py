"""Data models for protocol operations.

Pydantic models for representing:
- Transaction parameters supplied by callers
- Protocol configuration and balances returned by operations
- Token and protocol entries of the token registry

Addresses are validated and stored in checksum form.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

from protocol_registry.data.constants import NATIVE_TOKEN_ADDRESS, ZERO_ADDRESS


class ContractAction(str, Enum):
    """Actions a protocol operation can encode."""

    LOAN_SUPPLY = "loan_supply"
    LOAN_WITHDRAW = "loan_withdraw"
    NATIVE_STAKE = "native_stake"
    NATIVE_UNSTAKE = "native_unstake"
    ERC20_STAKE = "erc20_stake"
    ERC20_UNSTAKE = "erc20_unstake"

    @property
    def is_exit(self) -> bool:
        """Whether the action moves funds out of the protocol."""
        return self in (
            ContractAction.LOAN_WITHDRAW,
            ContractAction.NATIVE_UNSTAKE,
            ContractAction.ERC20_UNSTAKE,
        )


class ProtocolType(str, Enum):
    """Classification of protocols."""

    LOAN = "loan"
    STAKE = "stake"


class ProtocolName(str, Enum):
    """Registered protocol names."""

    AAVE_V3 = "aave_v3"
    SPARK_LEND = "spark_lend"
    AVALON_FINANCE = "avalon_finance"
    COMPOUND = "compound"
    LIDO = "lido"
    ANKR = "ankr"
    ROCKET_POOL = "rocket_pool"
    LISTA_DAO = "listadao"


def normalize_address(value: Any) -> str:
    """Validate an address and return its checksum form.

    Raises:
        ValueError: If the value is not a valid address.
    """
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValueError(f"invalid address: {value!r}")
    return Web3.to_checksum_address(value)


def is_native_token(address: str) -> bool:
    """Whether the address is the native currency sentinel."""
    return address.lower() == NATIVE_TOKEN_ADDRESS.lower()


def is_zero_address(address: str | None) -> bool:
    """Whether the address is unset or the zero address."""
    return address is None or address.lower() == ZERO_ADDRESS


class TransactionParams(BaseModel):
    """Parameters of a single calldata request.

    The beneficiary is the recipient when one is set and non-zero,
    otherwise the sender.
    """

    model_config = ConfigDict(frozen=True)

    amount: int = Field(ge=0, description="Amount in the asset's smallest unit")
    sender: str = Field(description="Account submitting the transaction")
    recipient: str | None = Field(default=None, description="Optional beneficiary")
    asset: str = Field(description="Asset address or the native token sentinel")
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("amount", mode="before")
    @classmethod
    def reject_bool_amount(cls, v: Any) -> Any:
        """Reject booleans, which pydantic would otherwise accept as ints."""
        if isinstance(v, bool):
            raise ValueError("amount must be an integer")
        return v

    @field_validator("sender", "asset", mode="before")
    @classmethod
    def checksum_address(cls, v: Any) -> str:
        """Normalize required addresses to checksummed format."""
        return normalize_address(v)

    @field_validator("recipient", mode="before")
    @classmethod
    def checksum_recipient(cls, v: Any) -> str | None:
        """Normalize the optional recipient."""
        if v is None or v == "":
            return None
        return normalize_address(v)

    @property
    def beneficiary(self) -> str:
        """Account that receives the proceeds of the action."""
        if self.recipient is None or is_zero_address(self.recipient):
            return self.sender
        return self.recipient

    @property
    def is_native(self) -> bool:
        """Whether the asset is the native currency sentinel."""
        return is_native_token(self.asset)


class ProtocolConfig(BaseModel):
    """Static description of a registered protocol operation."""

    model_config = ConfigDict(frozen=True)

    chain_id: int = Field(gt=0)
    name: str
    version: str
    contract: str
    protocol_type: ProtocolType
    methods: list[str] = Field(default_factory=list, description="Canonical method signatures")


class TokenBalance(BaseModel):
    """Balance of an account in the token relevant to an operation.

    For withdraw/unstake actions this is the receipt token (aToken, rETH,
    ankrETH, ...); for deposits it is the underlying asset.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    account: str
    amount: int = Field(ge=0)


class Token(BaseModel):
    """A token entry in the token registry."""

    token_address: str
    name: str
    symbol: str
    decimals: int = Field(ge=0, le=36)

    @field_validator("token_address", mode="before")
    @classmethod
    def checksum_token(cls, v: Any) -> str:
        return normalize_address(v)


class TokenProtocol(BaseModel):
    """A protocol entry in the token registry."""

    address: str
    name: str
    source: bool = False
    destination: bool = False
    tokens: list[str] = Field(default_factory=list)
    type: ProtocolType | None = None

    @field_validator("address", mode="before")
    @classmethod
    def checksum_protocol(cls, v: Any) -> str:
        return normalize_address(v)

    @field_validator("tokens", mode="before")
    @classmethod
    def checksum_tokens(cls, v: Any) -> list[str]:
        return [normalize_address(t) for t in v]
