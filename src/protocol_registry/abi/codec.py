"""ABI argument packing and unpacking.

Implements the standard head/tail layout:
- static values occupy their slot in the head (one 32-byte word, or the
  inlined words of a static fixed array)
- dynamic values put an offset word in the head, measured from the start
  of the enclosing argument block, and their content in the tail
- integers, bools and addresses are left-padded, fixed bytes and dynamic
  content are right-padded to a word boundary
- signed integers use two's complement over the full word

Unpacking is strict: truncated data, out-of-range offsets, non-canonical
bools and dirty padding raise DecodeError instead of yielding defaults.
"""

from __future__ import annotations

from typing import Any, Sequence

from protocol_registry.abi.coercion import coerce_all, int_bounds
from protocol_registry.abi.types import WORD_SIZE, TypeDescriptor, TypeKind
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
from protocol_registry.core.errors import DecodeError, TypeMismatchError

_WORD_MODULUS = 1 << (WORD_SIZE * 8)


def _to_word(value: int) -> bytes:
    return (value % _WORD_MODULUS).to_bytes(WORD_SIZE, "big")


def _left_pad(data: bytes) -> bytes:
    return b"\x00" * (WORD_SIZE - len(data)) + data


def _right_pad(data: bytes) -> bytes:
    pad = (WORD_SIZE - len(data) % WORD_SIZE) % WORD_SIZE
    return data + b"\x00" * pad


# Encoding


def _encode_value(desc: TypeDescriptor, value: Value) -> bytes:
    # Values are already coerced to desc, so dispatch on the value kind
    if isinstance(value, (UintValue, IntValue)):
        return _to_word(value.value)
    if isinstance(value, BoolValue):
        return _to_word(1 if value.value else 0)
    if isinstance(value, AddressValue):
        return _left_pad(value.raw)
    if isinstance(value, FixedBytesValue):
        return _right_pad(value.value)
    if isinstance(value, BytesValue):
        return _to_word(len(value.value)) + _right_pad(value.value)
    if isinstance(value, StringValue):
        raw = value.value.encode("utf-8")
        return _to_word(len(raw)) + _right_pad(raw)
    if isinstance(value, ArrayValue):
        elem_types = [desc.element] * len(value.items)
        if desc.kind == TypeKind.ARRAY:
            return _to_word(len(value.items)) + _encode_sequence(elem_types, value.items)
        return _encode_sequence(elem_types, value.items)
    raise TypeMismatchError(0, desc.canonical, type(value).__name__)


def _encode_sequence(types: Sequence[TypeDescriptor], values: Sequence[Value]) -> bytes:
    head_size = sum(desc.head_size for desc in types)
    head_parts: list[bytes] = []
    tail_parts: list[bytes] = []
    tail_size = 0

    for desc, value in zip(types, values):
        encoded = _encode_value(desc, value)
        if desc.is_dynamic:
            head_parts.append(_to_word(head_size + tail_size))
            tail_parts.append(encoded)
            tail_size += len(encoded)
        else:
            head_parts.append(encoded)

    return b"".join(head_parts) + b"".join(tail_parts)


def pack(types: Sequence[TypeDescriptor], values: Sequence[Any]) -> bytes:
    """Encode an argument list.

    Values are coerced first, so plain Python inputs and canonical Values
    are both accepted.

    Args:
        types: Declared parameter types.
        values: One value per type.

    Returns:
        The encoded argument block (without a selector).

    Raises:
        ArgumentCountMismatchError: If the lengths differ.
        TypeMismatchError: If a value does not match its type.
    """
    canonical = coerce_all(types, values)
    return _encode_sequence(types, canonical)


# Decoding


def _read_word(data: bytes, start: int, index: int) -> bytes:
    if start < 0 or start + WORD_SIZE > len(data):
        raise DecodeError(index, f"data truncated at offset {start} (length {len(data)})")
    return data[start : start + WORD_SIZE]


def _read_uint(data: bytes, start: int, index: int) -> int:
    return int.from_bytes(_read_word(data, start, index), "big")


def _decode_value(desc: TypeDescriptor, data: bytes, start: int, index: int) -> Value:
    kind = desc.kind

    if kind == TypeKind.UINT:
        number = _read_uint(data, start, index)
        _, high = int_bounds(desc)
        if number > high:
            raise DecodeError(index, f"value {number} exceeds {desc}")
        return UintValue(number)

    if kind == TypeKind.INT:
        number = _read_uint(data, start, index)
        if number >= _WORD_MODULUS >> 1:
            number -= _WORD_MODULUS
        low, high = int_bounds(desc)
        if number < low or number > high:
            raise DecodeError(index, f"value {number} exceeds {desc}")
        return IntValue(number)

    if kind == TypeKind.BOOL:
        number = _read_uint(data, start, index)
        if number not in (0, 1):
            raise DecodeError(index, f"invalid bool encoding {number}")
        return BoolValue(number == 1)

    if kind == TypeKind.ADDRESS:
        word = _read_word(data, start, index)
        if any(word[:12]):
            raise DecodeError(index, "address has non-zero padding")
        return AddressValue(word[12:])

    if kind == TypeKind.FIXED_BYTES:
        size = desc.length
        word = _read_word(data, start, index)
        if any(word[size:]):
            raise DecodeError(index, f"{desc} has non-zero padding")
        return FixedBytesValue(word[:size])

    if kind in (TypeKind.BYTES, TypeKind.STRING):
        length = _read_uint(data, start, index)
        content_start = start + WORD_SIZE
        if length > len(data) - content_start:
            raise DecodeError(index, f"content length {length} exceeds available data")
        raw = data[content_start : content_start + length]
        if kind == TypeKind.BYTES:
            return BytesValue(raw)
        try:
            return StringValue(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise DecodeError(index, f"invalid utf-8 string: {e.reason}") from e

    elem = desc.element
    if kind == TypeKind.ARRAY:
        length = _read_uint(data, start, index)
        block_start = start + WORD_SIZE
        if length * elem.head_size > len(data) - block_start:
            raise DecodeError(index, f"array length {length} exceeds available data")
        items = _decode_sequence([elem] * length, data, block_start, index)
    else:
        items = _decode_sequence([elem] * desc.length, data, start, index)
    return ArrayValue(tuple(items))


def _decode_sequence(
    types: Sequence[TypeDescriptor],
    data: bytes,
    base: int,
    index: int | None = None,
) -> list[Value]:
    values: list[Value] = []
    position = base
    for i, desc in enumerate(types):
        value_index = i if index is None else index
        if desc.is_dynamic:
            offset = _read_uint(data, position, value_index)
            target = base + offset
            if target >= len(data):
                raise DecodeError(value_index, f"offset {offset} points past end of data")
            values.append(_decode_value(desc, data, target, value_index))
        else:
            values.append(_decode_value(desc, data, position, value_index))
        position += desc.head_size
    return values


def unpack(types: Sequence[TypeDescriptor], data: bytes) -> list[Value]:
    """Decode an argument or return-data block.

    Args:
        types: Declared types of the encoded values.
        data: Raw bytes, without a selector.

    Returns:
        One canonical Value per type.

    Raises:
        DecodeError: If the data does not conform to the declared types.
    """
    return _decode_sequence(types, bytes(data), 0)

