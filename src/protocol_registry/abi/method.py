"""Contract methods and ABI documents.

A Method binds a function name to its parsed input and output types and
its 4-byte selector. A ContractABI is the immutable set of Methods built
from a JSON ABI fragment list.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence

from web3 import Web3

from protocol_registry.abi.codec import pack, unpack
from protocol_registry.abi.types import TypeDescriptor, parse_types, split_type_list
from protocol_registry.abi.values import Value, to_python
from protocol_registry.core.errors import UnknownMethodError, UnsupportedTypeError

_SIGNATURE_RE = re.compile(r"(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)\((?P<args>.*)\)")


def compute_selector(signature: str) -> bytes:
    """First four bytes of keccak256 over a canonical signature."""
    return bytes(Web3.keccak(text=signature)[:4])


@dataclass(frozen=True)
class Method:
    """A callable contract function.

    Attributes:
        name: Function name.
        inputs: Parsed parameter types.
        outputs: Parsed return types.
    """

    name: str
    inputs: tuple[TypeDescriptor, ...]
    outputs: tuple[TypeDescriptor, ...] = field(default_factory=tuple)

    @cached_property
    def signature(self) -> str:
        """Canonical signature, e.g. "supply(address,uint256)"."""
        return f"{self.name}({','.join(t.canonical for t in self.inputs)})"

    @cached_property
    def selector(self) -> bytes:
        """The 4-byte function selector."""
        return compute_selector(self.signature)

    @classmethod
    def from_signature(cls, signature: str, outputs: Sequence[str] = ()) -> Method:
        """Build a method from a human-readable signature.

        Args:
            signature: e.g. "transfer(address, uint256)"; whitespace is ignored.
            outputs: Optional return type strings.

        Raises:
            UnsupportedTypeError: If the signature or a type is malformed.
        """
        m = _SIGNATURE_RE.fullmatch(signature.strip())
        if not m:
            raise UnsupportedTypeError(signature, "malformed method signature")
        return cls(
            name=m.group("name"),
            inputs=parse_types(split_type_list(m.group("args"))),
            outputs=parse_types(list(outputs)),
        )

    @classmethod
    def from_abi_entry(cls, entry: Mapping[str, Any]) -> Method:
        """Build a method from one JSON ABI function entry."""
        return cls(
            name=entry["name"],
            inputs=parse_types([param["type"] for param in entry.get("inputs", [])]),
            outputs=parse_types([param["type"] for param in entry.get("outputs", [])]),
        )

    def encode_call(self, *args: Any) -> bytes:
        """Encode selector and arguments.

        Raises:
            ArgumentCountMismatchError: On a wrong number of arguments.
            TypeMismatchError: If an argument does not match its type.
        """
        return self.selector + pack(self.inputs, args)

    def encode_call_hex(self, *args: Any) -> str:
        """Encode a call as a 0x-prefixed lowercase hex string."""
        return "0x" + self.encode_call(*args).hex()

    def decode_output(self, data: bytes) -> list[Value]:
        """Decode return data into canonical values."""
        return unpack(self.outputs, data)

    def decode_output_python(self, data: bytes) -> list[Any]:
        """Decode return data into plain Python objects."""
        return to_python(self.decode_output(data))

    def __repr__(self) -> str:
        return f"Method({self.signature})"


class ContractABI(Mapping[str, Method]):
    """Immutable mapping of method names to Methods.

    Only function entries are considered; events, errors, constructors and
    fallbacks are ignored. Every type is parsed when the ABI is built, so
    unsupported types surface at construction time.

    Usage:
        abi = ContractABI.from_json(POOL_ABI)
        calldata = abi.method("supply").encode_call(asset, amount, owner, 0)
    """

    def __init__(self, methods: Sequence[Method]) -> None:
        self._methods: Mapping[str, Method] = MappingProxyType({m.name: m for m in methods})

    @classmethod
    def from_json(cls, abi: str | Sequence[Mapping[str, Any]]) -> ContractABI:
        """Build from a JSON string or an already-parsed fragment list."""
        entries = json.loads(abi) if isinstance(abi, str) else abi
        return cls([Method.from_abi_entry(e) for e in entries if e.get("type", "function") == "function"])

    @classmethod
    def from_signatures(cls, signatures: Sequence[str]) -> ContractABI:
        return cls([Method.from_signature(s) for s in signatures])

    def method(self, name: str) -> Method:
        """Look up a method by name.

        Raises:
            UnknownMethodError: If the ABI has no such method.
        """
        try:
            return self._methods[name]
        except KeyError:
            raise UnknownMethodError(name) from None

    def __getitem__(self, name: str) -> Method:
        return self._methods[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)

    def __repr__(self) -> str:
        return f"ContractABI({', '.join(self._methods)})"
