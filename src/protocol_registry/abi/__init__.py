"""Ethereum ABI engine: type parsing, coercion, packing and selectors."""

from protocol_registry.abi.codec import pack, unpack
from protocol_registry.abi.coercion import coerce, coerce_all, matches
from protocol_registry.abi.method import ContractABI, Method, compute_selector
from protocol_registry.abi.types import TypeDescriptor, TypeKind, format_type, parse_type
from protocol_registry.abi.values import (
    AddressValue,
    ArrayValue,
    BoolValue,
    BytesValue,
    FixedBytesValue,
    IntValue,
    StringValue,
    UintValue,
    Value,
    to_python,
)

__all__ = [
    # Types
    "TypeDescriptor",
    "TypeKind",
    "format_type",
    "parse_type",
    # Values
    "AddressValue",
    "ArrayValue",
    "BoolValue",
    "BytesValue",
    "FixedBytesValue",
    "IntValue",
    "StringValue",
    "UintValue",
    "Value",
    "to_python",
    # Coercion
    "coerce",
    "coerce_all",
    "matches",
    # Codec
    "pack",
    "unpack",
    # Methods
    "ContractABI",
    "Method",
    "compute_selector",
]
