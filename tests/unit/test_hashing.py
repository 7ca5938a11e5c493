"""
Module 02 - Hashing Unit Tests
Tests for distributor/crypto/hashing.py

Covers:
1. Keccak-256 known vectors
2. Identifier hashing for string-keyed entitlements
3. Hex and quantity codecs used in published artifacts
"""
import pytest

from distributor.crypto.hashing import (
    DIGEST_SIZE,
    UINT256_MAX,
    digest_from_hex,
    from_hex,
    hash_concat,
    hash_identifier,
    is_uint256,
    keccak256,
    parse_quantity,
    to_hex,
    to_hex_quantity,
)
from fixtures.common import KNOWN_IDENTIFIER_HASHES


class TestKeccak256:
    """Tests for keccak256."""

    def test_empty_input(self):
        """keccak256(b"") matches the well-known EVM constant."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_abc(self):
        """keccak256(b"abc") known vector."""
        assert keccak256(b"abc").hex() == (
            "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"
        )

    def test_digest_size(self):
        """Digests are always 32 bytes."""
        assert len(keccak256(b"x" * 1000)) == DIGEST_SIZE

    def test_hash_concat(self):
        """hash_concat hashes the concatenation."""
        a, b = keccak256(b"a"), keccak256(b"b")
        assert hash_concat(a, b) == keccak256(a + b)
        assert hash_concat(a, b) != hash_concat(b, a)


class TestHashIdentifier:
    """Tests for string identifier hashing."""

    @pytest.mark.parametrize("raw,expected", list(KNOWN_IDENTIFIER_HASHES.items()))
    def test_known_uuid_hashes(self, raw, expected):
        """UUID hashes match published artifacts."""
        assert to_hex(hash_identifier(raw)) == expected

    def test_utf8_encoding(self):
        """Non-ASCII identifiers hash their UTF-8 bytes."""
        assert hash_identifier("héllo") == keccak256("héllo".encode("utf-8"))

    def test_rejects_non_string(self):
        """Only strings can be hashed as identifiers."""
        with pytest.raises(TypeError):
            hash_identifier(b"bytes")  # type: ignore[arg-type]


class TestHexCodec:
    """Tests for 0x hex helpers."""

    def test_to_hex(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_from_hex_roundtrip(self):
        assert from_hex("0xdeadbeef") == bytes.fromhex("deadbeef")

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")

    def test_digest_from_hex_length(self):
        """Digests must decode to exactly 32 bytes."""
        assert digest_from_hex("0x" + "ab" * 32) == bytes([0xAB]) * 32
        with pytest.raises(ValueError, match="32 bytes"):
            digest_from_hex("0x" + "ab" * 31)


class TestQuantities:
    """Tests for amount encodings."""

    @pytest.mark.parametrize("value,expected", [
        (0, "0x00"),
        (200, "0xc8"),
        (250, "0xfa"),
        (300, "0x012c"),
        (750, "0x02ee"),
        (65535, "0xffff"),
    ])
    def test_to_hex_quantity_even_length(self, value, expected):
        """Quantities are even-length 0x hex."""
        assert to_hex_quantity(value) == expected

    def test_to_hex_quantity_negative(self):
        with pytest.raises(ValueError):
            to_hex_quantity(-1)

    @pytest.mark.parametrize("raw", [100, "100", "0x64", "0x064"])
    def test_parse_quantity_forms(self, raw):
        """int, decimal string and 0x hex all parse."""
        assert parse_quantity(raw) == 100

    def test_parse_quantity_rejects_bool(self):
        with pytest.raises(TypeError):
            parse_quantity(True)

    def test_parse_quantity_rejects_float(self):
        with pytest.raises(TypeError):
            parse_quantity(1.5)  # type: ignore[arg-type]

    def test_parse_quantity_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_quantity("ten")

    @pytest.mark.parametrize("raw", ["1_000", " 100", "100\n", "0X64", "0x", "+5", "0x6_4", ""])
    def test_parse_quantity_rejects_loose_strings(self, raw):
        """Underscores, padding and uppercase prefixes are not quantities."""
        with pytest.raises(ValueError):
            parse_quantity(raw)

    def test_is_uint256_bounds(self):
        assert is_uint256(0)
        assert is_uint256(UINT256_MAX)
        assert not is_uint256(-1)
        assert not is_uint256(UINT256_MAX + 1)
        assert not is_uint256(True)
