"""Canonical ABI values.

The codec never sees loose Python objects: coercion turns caller input into
one of these frozen value types first, and unpack produces them back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from web3 import Web3


@dataclass(frozen=True)
class UintValue:
    value: int

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True)
class IntValue:
    value: int

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class AddressValue:
    """A 20-byte account address."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != 20:
            raise ValueError(f"address must be 20 bytes, got {len(self.raw)}")

    @classmethod
    def from_hex(cls, address: str) -> AddressValue:
        """Build from a 0x-prefixed hex address of any case."""
        return cls(bytes.fromhex(address[2:]))

    @property
    def hex(self) -> str:
        """Lowercase 0x-prefixed representation."""
        return "0x" + self.raw.hex()

    def to_python(self) -> str:
        return Web3.to_checksum_address(self.hex)


@dataclass(frozen=True)
class BytesValue:
    value: bytes

    def to_python(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class FixedBytesValue:
    value: bytes

    def to_python(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class StringValue:
    value: str

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class ArrayValue:
    """Elements of a fixed or dynamic array, already canonical."""

    items: tuple[Value, ...]

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


Value = Union[
    UintValue,
    IntValue,
    BoolValue,
    AddressValue,
    BytesValue,
    FixedBytesValue,
    StringValue,
    ArrayValue,
]

VALUE_TYPES = (
    UintValue,
    IntValue,
    BoolValue,
    AddressValue,
    BytesValue,
    FixedBytesValue,
    StringValue,
    ArrayValue,
)


def to_python(values: list[Value] | tuple[Value, ...]) -> list[Any]:
    """Convert a sequence of canonical values to plain Python objects."""
    return [value.to_python() for value in values]
