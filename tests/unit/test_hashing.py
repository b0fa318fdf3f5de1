"""
Module 02 - Hashing Unit Tests
Tests for nmerkle/crypto/hashing.py

Tests:
- registered algorithms and their digest sizes
- name lookup normalization and unknown names
- custom hash functions
- element hashing and concatenation
- to_hex/from_hex round trip
"""
import hashlib
import pytest

from nmerkle.crypto.hashing import (
    SHA256,
    HashFunction,
    available_hash_functions,
    from_hex,
    get_hash_function,
    hash_concat,
    hash_element,
    sha256,
    to_hex,
)
from nmerkle.schemas.errors import ErrorCodes, UnknownHashAlgorithmException


class TestSha256:
    """Tests for sha256() function."""

    def test_sha256_known_value(self):
        """Test sha256 produces correct hash for known input."""
        result = sha256(b"hello")

        assert result == hashlib.sha256(b"hello").digest()
        assert result.hex() == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_sha256_empty_bytes(self):
        assert sha256(b"") == hashlib.sha256(b"").digest()

    def test_sha256_constant_matches_function(self):
        assert SHA256(b"data") == sha256(b"data")
        assert SHA256.digest_size == 32
        assert SHA256.name == "sha256"


class TestRegistry:
    """Tests for get_hash_function() and available_hash_functions()."""

    @pytest.mark.parametrize("name,size", [
        ("sha224", 28),
        ("sha256", 32),
        ("sha384", 48),
        ("sha512", 64),
        ("sha3-256", 32),
        ("sha3-512", 64),
        ("md5", 16),
        ("blake2b-224", 28),
        ("blake2b-256", 32),
        ("blake2b-512", 64),
        ("blake2s-256", 32),
    ])
    def test_digest_size_matches_output(self, name, size):
        hash_fn = get_hash_function(name)

        assert hash_fn.digest_size == size
        assert len(hash_fn(b"abc")) == size

    def test_matches_hashlib(self):
        assert get_hash_function("sha3-256")(b"x") == hashlib.sha3_256(b"x").digest()
        assert get_hash_function("md5")(b"x") == hashlib.md5(b"x").digest()
        assert get_hash_function("blake2b-224")(b"x") == \
            hashlib.blake2b(b"x", digest_size=28).digest()

    def test_available_is_sorted(self):
        names = available_hash_functions()

        assert names == sorted(names)
        assert "sha256" in names
        assert "blake2b-224" in names

    @pytest.mark.parametrize("alias", ["SHA256", " sha256 ", "Sha256"])
    def test_name_case_insensitive(self, alias):
        assert get_hash_function(alias) is SHA256

    def test_underscore_alias(self):
        assert get_hash_function("blake2b_224") is get_hash_function("blake2b-224")
        assert get_hash_function("SHA3_256").name == "sha3-256"

    def test_unknown_name(self):
        with pytest.raises(UnknownHashAlgorithmException) as exc_info:
            get_hash_function("sha1024")

        assert exc_info.value.code == ErrorCodes.UNKNOWN_HASH_ALGORITHM
        assert exc_info.value.details["name"] == "sha1024"
        assert "sha256" in exc_info.value.details["available"]

    def test_unknown_name_is_value_error(self):
        with pytest.raises(ValueError):
            get_hash_function("whirlpool")


class TestHashFunction:
    """Tests for custom HashFunction instances."""

    def test_from_callable(self):
        sha1 = HashFunction.from_callable(
            lambda b: hashlib.sha1(b).digest(), digest_bits=160, name="sha1"
        )

        assert sha1.digest_size == 20
        assert sha1(b"abc") == hashlib.sha1(b"abc").digest()

    def test_default_name(self):
        h = HashFunction.from_callable(lambda b: b[:4], digest_bits=32)

        assert h.name == "custom"

    @pytest.mark.parametrize("bits,size", [(8, 1), (9, 2), (12, 2), (16, 2), (250, 32)])
    def test_partial_bytes_round_up(self, bits, size):
        h = HashFunction.from_callable(lambda b: b, digest_bits=bits)

        assert h.digest_size == size

    @pytest.mark.parametrize("bits", [0, -8])
    def test_non_positive_bits_rejected(self, bits):
        with pytest.raises(ValueError):
            HashFunction("bad", bits, lambda b: b)

    def test_accepts_bytearray(self):
        assert SHA256(bytearray(b"abc")) == sha256(b"abc")

    def test_frozen(self):
        with pytest.raises(AttributeError):
            SHA256.name = "other"


class TestHashElement:
    """Tests for hash_element() and hash_concat()."""

    def test_bytes_hashed_directly(self):
        assert hash_element(b"0") == sha256(b"0")

    def test_str_utf8_encoded(self):
        assert hash_element("0") == hash_element(b"0")
        assert hash_element("é") == sha256("é".encode("utf-8"))

    def test_dict_key_order_irrelevant(self):
        assert hash_element({"a": 1, "b": 2}) == hash_element({"b": 2, "a": 1})

    def test_custom_hash_and_serializer(self):
        md5 = get_hash_function("md5")
        result = hash_element(7, md5, serializer=lambda n: n.to_bytes(4, "big"))

        assert result == hashlib.md5(b"\x00\x00\x00\x07").digest()

    def test_hash_concat(self):
        a, b, c = sha256(b"a"), sha256(b"b"), sha256(b"c")

        assert hash_concat([a, b, c]) == sha256(a + b + c)

    def test_hash_concat_order_matters(self):
        a, b = sha256(b"a"), sha256(b"b")

        assert hash_concat([a, b]) != hash_concat([b, a])


class TestHexConversion:
    """Tests for to_hex() and from_hex()."""

    def test_to_hex(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_to_hex_empty(self):
        assert to_hex(b"") == "0x"

    def test_round_trip(self):
        digest = sha256(b"round trip")

        assert from_hex(to_hex(digest)) == digest

    def test_from_hex_uppercase(self):
        assert from_hex("0xDEADBEEF") == bytes.fromhex("deadbeef")

    def test_from_hex_missing_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
