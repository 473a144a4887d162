"""Tests for ABI packing and unpacking."""

from __future__ import annotations

import random

import pytest
from web3 import Web3

from protocol_registry.abi.codec import pack, unpack
from protocol_registry.abi.types import parse_types
from protocol_registry.abi.values import (
    AddressValue,
    BoolValue,
    IntValue,
    StringValue,
    UintValue,
    to_python,
)
from protocol_registry.core.errors import (
    ArgumentCountMismatchError,
    DecodeError,
    TypeMismatchError,
)


def word(n: int) -> str:
    """Hex of a left-padded 32-byte word."""
    return f"{n:064x}"


def padded(text: bytes) -> str:
    """Hex of right-padded content."""
    raw = text.hex()
    return raw + "0" * ((64 - len(raw) % 64) % 64)


class TestPackStatic:
    """Tests for static argument layouts."""

    def test_uint_and_bool(self) -> None:
        """baz(69, true) arguments from the Solidity ABI documentation."""
        data = pack(parse_types(["uint32", "bool"]), [69, True])
        assert data.hex() == word(69) + word(1)

    def test_address_left_padded(self) -> None:
        data = pack(parse_types(["address"]), ["0xc0ffee254729296a45a3885639ac7e10f9d54979"])
        assert data.hex() == "0" * 24 + "c0ffee254729296a45a3885639ac7e10f9d54979"

    def test_fixed_bytes_right_padded(self) -> None:
        data = pack(parse_types(["bytes3"]), [b"abc"])
        assert data.hex() == padded(b"abc")

    def test_negative_int_twos_complement(self) -> None:
        data = pack(parse_types(["int8"]), [-1])
        assert data.hex() == "f" * 64

    def test_static_fixed_array_inlined(self) -> None:
        data = pack(parse_types(["uint8[2]", "bool"]), [[1, 2], False])
        assert data.hex() == word(1) + word(2) + word(0)

    def test_word_alignment(self) -> None:
        """Static encodings are always a multiple of 32 bytes."""
        rng = random.Random(42)
        types = parse_types(["uint256", "int128", "bool", "bytes7", "address"])
        for _ in range(50):
            values = [
                rng.randrange(2**256),
                rng.randrange(-(2**127), 2**127),
                rng.random() < 0.5,
                bytes(rng.randrange(256) for _ in range(7)),
                bytes(rng.randrange(256) for _ in range(20)),
            ]
            assert len(pack(types, values)) == 5 * 32

    def test_empty_argument_list(self) -> None:
        assert pack((), []) == b""


class TestPackDynamic:
    """Tests for head/tail layouts."""

    def test_solidity_docs_sam(self) -> None:
        """sam("dave", true, [1, 2, 3]) from the Solidity ABI documentation."""
        data = pack(parse_types(["bytes", "bool", "uint256[]"]), [b"dave", True, [1, 2, 3]])
        expected = (
            word(0x60)
            + word(1)
            + word(0xA0)
            + word(4)
            + padded(b"dave")
            + word(3)
            + word(1)
            + word(2)
            + word(3)
        )
        assert data.hex() == expected

    def test_solidity_docs_f(self) -> None:
        """f(0x123, [0x456, 0x789], "1234567890", "Hello, world!")."""
        data = pack(
            parse_types(["uint256", "uint32[]", "bytes10", "bytes"]),
            [0x123, [0x456, 0x789], b"1234567890", b"Hello, world!"],
        )
        expected = (
            word(0x123)
            + word(0x80)
            + padded(b"1234567890")
            + word(0xE0)
            + word(2)
            + word(0x456)
            + word(0x789)
            + word(13)
            + padded(b"Hello, world!")
        )
        assert data.hex() == expected

    def test_string(self) -> None:
        data = pack(parse_types(["string"]), ["dave"])
        assert data.hex() == word(0x20) + word(4) + padded(b"dave")

    def test_empty_bytes(self) -> None:
        data = pack(parse_types(["bytes"]), [b""])
        assert data.hex() == word(0x20) + word(0)

    def test_offsets_point_to_length_words(self) -> None:
        """Each dynamic head word points at its value's length word."""
        types = parse_types(["string", "uint8", "bytes"])
        data = pack(types, ["hello", 7, b"\x01\x02\x03"])
        first = int.from_bytes(data[0:32], "big")
        third = int.from_bytes(data[64:96], "big")
        assert int.from_bytes(data[first : first + 32], "big") == 5
        assert int.from_bytes(data[third : third + 32], "big") == 3

    def test_dynamic_fixed_array(self) -> None:
        """string[2] is dynamic and its elements use nested offsets."""
        data = pack(parse_types(["string[2]"]), [["a", "b"]])
        expected = (
            word(0x20)
            + word(0x40)
            + word(0x80)
            + word(1)
            + padded(b"a")
            + word(1)
            + padded(b"b")
        )
        assert data.hex() == expected


class TestPackErrors:
    """Tests for rejected inputs."""

    def test_count_mismatch(self) -> None:
        with pytest.raises(ArgumentCountMismatchError):
            pack(parse_types(["uint256", "address"]), [1])

    def test_type_mismatch(self) -> None:
        with pytest.raises(TypeMismatchError, match="argument 0"):
            pack(parse_types(["uint8"]), [256])

    def test_deterministic(self) -> None:
        types = parse_types(["string", "uint256[]"])
        assert pack(types, ["x", [1, 2]]) == pack(types, ["x", [1, 2]])


class TestUnpack:
    """Tests for decoding."""

    def test_roundtrip_mixed(self) -> None:
        """Decoding inverts encoding across static and dynamic types."""
        rng = random.Random(42)
        types = parse_types(["uint64", "int32", "address", "bool", "string", "bytes", "uint16[]"])
        for _ in range(50):
            values = [
                rng.randrange(2**64),
                rng.randrange(-(2**31), 2**31),
                bytes(rng.randrange(256) for _ in range(20)),
                rng.random() < 0.5,
                "".join(rng.choice("abcdefé") for _ in range(rng.randrange(40))),
                bytes(rng.randrange(256) for _ in range(rng.randrange(70))),
                [rng.randrange(2**16) for _ in range(rng.randrange(5))],
            ]
            decoded = unpack(types, pack(types, values))
            assert decoded[0] == UintValue(values[0])
            assert decoded[1] == IntValue(values[1])
            assert decoded[2] == AddressValue(values[2])
            assert decoded[3] == BoolValue(values[3])
            assert decoded[4] == StringValue(values[4])
            assert to_python(decoded[5:]) == [values[5], values[6]]

    def test_roundtrip_fixed_bytes(self) -> None:
        rng = random.Random(42)
        for _ in range(50):
            size = rng.randint(1, 32)
            types = parse_types([f"bytes{size}"])
            value = bytes(rng.randrange(256) for _ in range(size))
            data = pack(types, [value])
            assert len(data) == 32
            assert to_python(unpack(types, data)) == [value]

    def test_roundtrip_arrays(self) -> None:
        """Static and dynamic arrays of both fixed and variable length."""
        rng = random.Random(42)
        types = parse_types(["uint8[3]", "string[]", "string[2]"])

        def text() -> str:
            return "".join(rng.choice("xyzé") for _ in range(rng.randrange(45)))

        for _ in range(50):
            values = [
                [rng.randrange(256) for _ in range(3)],
                [text() for _ in range(rng.randrange(4))],
                [text(), text()],
            ]
            assert to_python(unpack(types, pack(types, values))) == values

    def test_dynamic_offset_and_tail_length(self) -> None:
        """A bytes argument among static ones sits after the whole head."""
        rng = random.Random(42)
        for _ in range(50):
            length = rng.randrange(100)
            before = rng.randrange(3)
            after = rng.randrange(3)
            types = parse_types(["uint256"] * before + ["bytes"] + ["uint256"] * after)
            value = bytes(rng.randrange(256) for _ in range(length))
            data = pack(types, [1] * before + [value] + [2] * after)

            head = 32 * len(types)
            offset = int.from_bytes(data[32 * before : 32 * before + 32], "big")
            assert offset == head
            assert len(data) - head == 32 + -(-length // 32) * 32
            assert int.from_bytes(data[head : head + 32], "big") == length

    def test_to_python_address_checksummed(self) -> None:
        types = parse_types(["address"])
        data = pack(types, ["0xc0ffee254729296a45a3885639ac7e10f9d54979"])
        expected = Web3.to_checksum_address("0xc0ffee254729296a45a3885639ac7e10f9d54979")
        assert to_python(unpack(types, data)) == [expected]

    def test_truncated_static(self) -> None:
        with pytest.raises(DecodeError, match="truncated"):
            unpack(parse_types(["uint256", "uint256"]), bytes.fromhex(word(1)))

    def test_non_canonical_bool(self) -> None:
        with pytest.raises(DecodeError, match="bool"):
            unpack(parse_types(["bool"]), bytes.fromhex(word(2)))

    def test_out_of_range_uint(self) -> None:
        with pytest.raises(DecodeError):
            unpack(parse_types(["uint8"]), bytes.fromhex(word(256)))

    def test_int_sign_extension_checked(self) -> None:
        """int8 -1 decodes; a positive word above int8 range does not."""
        assert unpack(parse_types(["int8"]), b"\xff" * 32) == [IntValue(-1)]
        with pytest.raises(DecodeError):
            unpack(parse_types(["int8"]), bytes.fromhex(word(200)))

    def test_dirty_address_padding(self) -> None:
        data = bytes.fromhex("01" + "0" * 22 + "c0ffee254729296a45a3885639ac7e10f9d54979")
        with pytest.raises(DecodeError, match="padding"):
            unpack(parse_types(["address"]), data)

    def test_dirty_fixed_bytes_padding(self) -> None:
        with pytest.raises(DecodeError, match="padding"):
            unpack(parse_types(["bytes1"]), b"\x01\x01" + b"\x00" * 30)

    def test_offset_past_end(self) -> None:
        with pytest.raises(DecodeError, match="offset"):
            unpack(parse_types(["bytes"]), bytes.fromhex(word(0x40)))

    def test_length_past_end(self) -> None:
        data = bytes.fromhex(word(0x20) + word(100) + padded(b"short"))
        with pytest.raises(DecodeError, match="exceeds"):
            unpack(parse_types(["bytes"]), data)

    def test_array_length_past_end(self) -> None:
        data = bytes.fromhex(word(0x20) + word(10) + word(1))
        with pytest.raises(DecodeError, match="array length"):
            unpack(parse_types(["uint256[]"]), data)

    def test_invalid_utf8(self) -> None:
        data = bytes.fromhex(word(0x20) + word(1) + padded(b"\xff"))
        with pytest.raises(DecodeError, match="utf-8"):
            unpack(parse_types(["string"]), data)

    def test_error_index(self) -> None:
        """The index names the value that failed."""
        data = bytes.fromhex(word(1) + word(5))
        with pytest.raises(DecodeError) as exc_info:
            unpack(parse_types(["bool", "bool"]), data)
        assert exc_info.value.index == 1
