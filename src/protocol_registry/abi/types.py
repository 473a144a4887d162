"""ABI type descriptors and type-string parsing.

Supported subset of the Solidity ABI:
- uint<M> / int<M> for M in 8..256 (multiple of 8), bare uint/int alias 256
- bool, address, string, bytes
- bytes<N> for N in 1..32
- dynamic arrays T[] and fixed arrays T[k] of any supported T

Tuples, function types and fixed-point types are rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from protocol_registry.core.errors import UnsupportedTypeError

WORD_SIZE = 32

_ARRAY_SUFFIX_RE = re.compile(r"(?P<elem>.+)\[(?P<size>[0-9]*)\]")
_INT_RE = re.compile(r"(?P<kind>u?int)(?P<bits>[0-9]*)")
_FIXED_BYTES_RE = re.compile(r"bytes(?P<size>[0-9]+)")


class TypeKind(str, Enum):
    """Kinds of ABI types."""

    UINT = "uint"
    INT = "int"
    BOOL = "bool"
    ADDRESS = "address"
    BYTES = "bytes"
    FIXED_BYTES = "fixed_bytes"
    STRING = "string"
    ARRAY = "array"
    FIXED_ARRAY = "fixed_array"


@dataclass(frozen=True)
class TypeDescriptor:
    """A parsed ABI type.

    Attributes:
        kind: The type kind.
        bits: Bit width for uint/int.
        size: Byte length for fixed bytes, element count for fixed arrays.
        elem: Element descriptor for arrays.
    """

    kind: TypeKind
    bits: int | None = None
    size: int | None = None
    elem: TypeDescriptor | None = None

    def __post_init__(self) -> None:
        if self.kind in (TypeKind.UINT, TypeKind.INT) and self.bits is None:
            raise UnsupportedTypeError(self.kind.value, "integer type without a bit width")
        if self.kind in (TypeKind.FIXED_BYTES, TypeKind.FIXED_ARRAY) and self.size is None:
            raise UnsupportedTypeError(self.kind.value, "fixed-size type without a size")
        if self.kind in (TypeKind.ARRAY, TypeKind.FIXED_ARRAY) and self.elem is None:
            raise UnsupportedTypeError(self.kind.value, "array type without an element type")

    @property
    def element(self) -> TypeDescriptor:
        """Element descriptor of an array type."""
        if self.elem is None:
            raise UnsupportedTypeError(self.kind.value, "not an array type")
        return self.elem

    @property
    def length(self) -> int:
        """Byte length of bytes<N>, or element count of T[k]."""
        if self.size is None:
            raise UnsupportedTypeError(self.kind.value, "type has no fixed size")
        return self.size

    @property
    def width(self) -> int:
        """Bit width of an integer type."""
        if self.bits is None:
            raise UnsupportedTypeError(self.kind.value, "not an integer type")
        return self.bits

    @property
    def is_dynamic(self) -> bool:
        """Whether values of this type are encoded in the tail section."""
        if self.kind in (TypeKind.BYTES, TypeKind.STRING, TypeKind.ARRAY):
            return True
        if self.kind == TypeKind.FIXED_ARRAY:
            return self.element.is_dynamic
        return False

    @property
    def head_size(self) -> int:
        """Bytes this type occupies in the head of an argument block."""
        if self.kind == TypeKind.FIXED_ARRAY and not self.is_dynamic:
            return self.length * self.element.head_size
        return WORD_SIZE

    @property
    def canonical(self) -> str:
        """Canonical type string as used in method signatures."""
        return format_type(self)

    def __str__(self) -> str:
        return self.canonical


def format_type(desc: TypeDescriptor) -> str:
    """Render a descriptor back to its canonical type string."""
    if desc.kind in (TypeKind.UINT, TypeKind.INT):
        return f"{desc.kind.value}{desc.bits}"
    if desc.kind == TypeKind.FIXED_BYTES:
        return f"bytes{desc.size}"
    if desc.kind == TypeKind.ARRAY:
        return f"{format_type(desc.element)}[]"
    if desc.kind == TypeKind.FIXED_ARRAY:
        return f"{format_type(desc.element)}[{desc.length}]"
    return desc.kind.value


@lru_cache(maxsize=512)
def parse_type(type_string: str) -> TypeDescriptor:
    """Parse a Solidity type string into a TypeDescriptor.

    Args:
        type_string: Type as written in an ABI entry, e.g. "uint256[]".

    Returns:
        The parsed descriptor.

    Raises:
        UnsupportedTypeError: If the type is malformed or outside the
            supported subset.
    """
    raw = type_string.strip() if isinstance(type_string, str) else ""
    if not raw:
        raise UnsupportedTypeError(str(type_string), "empty type")
    if "(" in raw or raw.startswith("tuple"):
        raise UnsupportedTypeError(raw, "tuple types are not supported")

    m_array = _ARRAY_SUFFIX_RE.fullmatch(raw)
    if m_array:
        elem = parse_type(m_array.group("elem"))
        size_raw = m_array.group("size")
        if not size_raw:
            return TypeDescriptor(kind=TypeKind.ARRAY, elem=elem)
        size = int(size_raw)
        if size == 0:
            raise UnsupportedTypeError(raw, "fixed array length must be positive")
        return TypeDescriptor(kind=TypeKind.FIXED_ARRAY, size=size, elem=elem)

    if "[" in raw or "]" in raw:
        raise UnsupportedTypeError(raw, "malformed array type")

    if raw == "bool":
        return TypeDescriptor(kind=TypeKind.BOOL)
    if raw == "address":
        return TypeDescriptor(kind=TypeKind.ADDRESS)
    if raw == "string":
        return TypeDescriptor(kind=TypeKind.STRING)
    if raw == "bytes":
        return TypeDescriptor(kind=TypeKind.BYTES)

    m_bytes = _FIXED_BYTES_RE.fullmatch(raw)
    if m_bytes:
        size = int(m_bytes.group("size"))
        if size < 1 or size > WORD_SIZE:
            raise UnsupportedTypeError(raw, "fixed bytes size must be between 1 and 32")
        return TypeDescriptor(kind=TypeKind.FIXED_BYTES, size=size)

    m_int = _INT_RE.fullmatch(raw)
    if m_int:
        bits = int(m_int.group("bits") or "256")
        if bits < 8 or bits > 256 or bits % 8 != 0:
            raise UnsupportedTypeError(raw, "integer width must be a multiple of 8 in 8..256")
        kind = TypeKind.UINT if m_int.group("kind") == "uint" else TypeKind.INT
        return TypeDescriptor(kind=kind, bits=bits)

    raise UnsupportedTypeError(raw)


def parse_types(type_strings: list[str] | tuple[str, ...]) -> tuple[TypeDescriptor, ...]:
    """Parse a sequence of type strings."""
    return tuple(parse_type(t) for t in type_strings)


def split_type_list(raw: str) -> list[str]:
    """Split a comma separated type list, e.g. the inside of a signature."""
    text = raw.strip()
    if not text:
        return []
    items = [item.strip() for item in text.split(",")]
    if any(not item for item in items):
        raise UnsupportedTypeError(raw, "empty type entry in list")
    return items
