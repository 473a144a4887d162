"""Matching and coercion of caller-supplied values into canonical ABI values.

Accepted inputs per kind:
- uint<M>/int<M>: int (never bool or float) in range, or a base-10 digit
  string; a leading sign is accepted for int<M> only
- address: AddressValue, 20 raw bytes, or 0x followed by 40 hex characters
- bool: bool only
- string: str only
- bytes/bytes<N>: bytes, bytearray or an even-length 0x hex string;
  bytes<N> must be exactly N bytes long
- arrays: list or tuple whose elements all match the element type

A value that is already canonical for the declared type is accepted as is.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from protocol_registry.abi.types import TypeDescriptor, TypeKind
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
)
from protocol_registry.core.errors import ArgumentCountMismatchError, TypeMismatchError

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")
_HEX_RE = re.compile(r"0x(?:[0-9a-fA-F]{2})*")
_UNSIGNED_DIGITS_RE = re.compile(r"[0-9]+")
_SIGNED_DIGITS_RE = re.compile(r"[-+]?[0-9]+")


class _Mismatch(Exception):
    """Internal signal carrying the reason a value was rejected."""

    def __init__(self, actual: str, detail: str | None = None) -> None:
        self.actual = actual
        self.detail = detail
        super().__init__(detail or actual)


def _type_name(value: Any) -> str:
    return type(value).__name__


def int_bounds(desc: TypeDescriptor) -> tuple[int, int]:
    """Inclusive value range of an integer type."""
    bits = desc.width
    if desc.kind == TypeKind.UINT:
        return 0, (1 << bits) - 1
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _coerce_integer(desc: TypeDescriptor, value: Any) -> Value:
    signed = desc.kind == TypeKind.INT
    value_class = IntValue if signed else UintValue

    if isinstance(value, value_class):
        number = value.value
    elif isinstance(value, bool):
        raise _Mismatch("bool")
    elif isinstance(value, int):
        number = value
    elif isinstance(value, str):
        pattern = _SIGNED_DIGITS_RE if signed else _UNSIGNED_DIGITS_RE
        if not pattern.fullmatch(value):
            raise _Mismatch("str", f"{value!r} is not a base-10 integer")
        number = int(value, 10)
    else:
        raise _Mismatch(_type_name(value))

    low, high = int_bounds(desc)
    if number < low or number > high:
        raise _Mismatch(_type_name(value), f"{number} out of range for {desc}")
    return value_class(number)


def _coerce_address(value: Any) -> AddressValue:
    if isinstance(value, AddressValue):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise _Mismatch(_type_name(value), f"expected 20 bytes, got {len(value)}")
        return AddressValue(bytes(value))
    if isinstance(value, str):
        if not _ADDRESS_RE.fullmatch(value):
            raise _Mismatch("str", f"{value!r} is not a hex address")
        return AddressValue.from_hex(value)
    raise _Mismatch(_type_name(value))


def _coerce_raw_bytes(value: Any) -> bytes:
    if isinstance(value, (BytesValue, FixedBytesValue)):
        return value.value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        if not _HEX_RE.fullmatch(value):
            raise _Mismatch("str", f"{value!r} is not an even-length 0x hex string")
        return bytes.fromhex(value[2:])
    raise _Mismatch(_type_name(value))


def _coerce_array(desc: TypeDescriptor, value: Any) -> ArrayValue:
    elem = desc.element
    if isinstance(value, ArrayValue):
        items: Sequence[Any] = value.items
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise _Mismatch(_type_name(value))

    if desc.kind == TypeKind.FIXED_ARRAY and len(items) != desc.size:
        raise _Mismatch(_type_name(value), f"expected {desc.size} elements, got {len(items)}")

    coerced: list[Value] = []
    for position, item in enumerate(items):
        try:
            coerced.append(_coerce(elem, item))
        except _Mismatch as e:
            detail = f"element {position}: {e.detail or e.actual}"
            raise _Mismatch(e.actual, detail) from None
    return ArrayValue(tuple(coerced))


def _coerce(desc: TypeDescriptor, value: Any) -> Value:
    kind = desc.kind
    if kind in (TypeKind.UINT, TypeKind.INT):
        return _coerce_integer(desc, value)
    if kind == TypeKind.ADDRESS:
        return _coerce_address(value)
    if kind == TypeKind.BOOL:
        if isinstance(value, BoolValue):
            return value
        if isinstance(value, bool):
            return BoolValue(value)
        raise _Mismatch(_type_name(value))
    if kind == TypeKind.STRING:
        if isinstance(value, StringValue):
            return value
        if isinstance(value, str):
            return StringValue(value)
        raise _Mismatch(_type_name(value))
    if kind == TypeKind.BYTES:
        if isinstance(value, FixedBytesValue):
            raise _Mismatch(_type_name(value))
        return BytesValue(_coerce_raw_bytes(value))
    if kind == TypeKind.FIXED_BYTES:
        if isinstance(value, BytesValue):
            raise _Mismatch(_type_name(value))
        raw = _coerce_raw_bytes(value)
        if len(raw) != desc.size:
            raise _Mismatch(_type_name(value), f"expected {desc.size} bytes, got {len(raw)}")
        return FixedBytesValue(raw)
    return _coerce_array(desc, value)


def coerce(desc: TypeDescriptor, value: Any, index: int = 0) -> Value:
    """Coerce a single value into its canonical form.

    Args:
        desc: Declared ABI type.
        value: Caller-supplied value.
        index: Argument position, reported in errors.

    Returns:
        The canonical Value.

    Raises:
        TypeMismatchError: If the value does not match the declared type.
    """
    try:
        return _coerce(desc, value)
    except _Mismatch as e:
        raise TypeMismatchError(index, desc.canonical, e.actual, e.detail) from None


def matches(desc: TypeDescriptor, value: Any) -> bool:
    """Check whether a value is acceptable for a declared type."""
    try:
        _coerce(desc, value)
    except _Mismatch:
        return False
    return True


def coerce_all(types: Sequence[TypeDescriptor], values: Sequence[Any]) -> list[Value]:
    """Coerce a full argument list, checking the count first.

    Raises:
        ArgumentCountMismatchError: If the lengths differ.
        TypeMismatchError: On the first value that does not match.
    """
    if len(types) != len(values):
        raise ArgumentCountMismatchError(len(types), len(values))
    return [coerce(desc, value, index) for index, (desc, value) in enumerate(zip(types, values))]
