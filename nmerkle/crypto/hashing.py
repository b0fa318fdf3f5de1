"""
Module 02 - Hashing Utilities
Hash function capability and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- HashFunction: a named bytes -> digest callable with a fixed digest size
- A registry of hashlib-backed algorithms (get_hash_function)
- Element hashing (serialize + hash)
- Hex encoding/decoding with 0x prefix

The tree never depends on a specific algorithm. Anything with a
`digest_size` attribute that maps bytes to exactly that many bytes
can be used as the hash function.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from nmerkle.schemas.canonical import serialize_element
from nmerkle.schemas.errors import UnknownHashAlgorithmException


class Hasher(Protocol):
    """Structural type accepted wherever a hash function is expected."""

    digest_size: int

    def __call__(self, data: bytes) -> bytes: ...


@dataclass(frozen=True)
class HashFunction:
    """
    A deterministic mapping from bytes to a fixed-size digest.

    Attributes:
        name: Registry name (e.g. "sha256", "blake2b-224")
        digest_bits: Output length in bits
        fn: Callable performing the actual hashing
    """
    name: str
    digest_bits: int
    fn: Callable[[bytes], bytes]

    def __post_init__(self) -> None:
        if self.digest_bits <= 0:
            raise ValueError(f"digest_bits must be positive, got {self.digest_bits}")

    @property
    def digest_size(self) -> int:
        """Digest length in bytes (bit length rounded up to whole bytes)."""
        return self.digest_bits // 8 + (1 if self.digest_bits % 8 else 0)

    def __call__(self, data: bytes) -> bytes:
        return self.fn(bytes(data))

    @classmethod
    def from_callable(
        cls,
        fn: Callable[[bytes], bytes],
        digest_bits: int,
        name: str = "custom",
    ) -> "HashFunction":
        """
        Wrap an arbitrary callable as a HashFunction.

        Example:
            >>> h = HashFunction.from_callable(
            ...     lambda b: hashlib.sha1(b).digest(), digest_bits=160, name="sha1")
            >>> h.digest_size
            20
        """
        return cls(name=name, digest_bits=digest_bits, fn=fn)


def _hashlib_fn(algorithm: str, **kwargs: Any) -> Callable[[bytes], bytes]:
    def _digest(data: bytes) -> bytes:
        return hashlib.new(algorithm, data, **kwargs).digest()
    return _digest


def _blake2b(digest_size: int) -> Callable[[bytes], bytes]:
    def _digest(data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=digest_size).digest()
    return _digest


_REGISTRY: dict[str, HashFunction] = {
    h.name: h
    for h in (
        HashFunction("sha224", 224, _hashlib_fn("sha224")),
        HashFunction("sha256", 256, _hashlib_fn("sha256")),
        HashFunction("sha384", 384, _hashlib_fn("sha384")),
        HashFunction("sha512", 512, _hashlib_fn("sha512")),
        HashFunction("sha3-256", 256, _hashlib_fn("sha3_256")),
        HashFunction("sha3-512", 512, _hashlib_fn("sha3_512")),
        # md5 is only used for compatibility fixtures, not for security
        HashFunction("md5", 128, _hashlib_fn("md5", usedforsecurity=False)),
        HashFunction("blake2b-224", 224, _blake2b(28)),
        HashFunction("blake2b-256", 256, _blake2b(32)),
        HashFunction("blake2b-512", 512, _blake2b(64)),
        HashFunction("blake2s-256", 256, _hashlib_fn("blake2s")),
    )
}


def available_hash_functions() -> list[str]:
    """Names of all registered hash algorithms, sorted."""
    return sorted(_REGISTRY)


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a registered hash algorithm by name.

    Names are case-insensitive; underscores are accepted in place of
    dashes ("blake2b_224" == "blake2b-224").

    Raises:
        UnknownHashAlgorithmException: If no algorithm has that name
    """
    key = name.strip().lower().replace("_", "-")
    try:
        return _REGISTRY[key]
    except KeyError:
        raise UnknownHashAlgorithmException(
            f"Unknown hash algorithm: {name!r}",
            name=name,
            available=available_hash_functions(),
        ) from None


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


SHA256: HashFunction = _REGISTRY["sha256"]


def hash_element(
    element: Any,
    hash_fn: Hasher = SHA256,
    serializer: Callable[[Any], bytes] = serialize_element,
) -> bytes:
    """
    Hash a leaf element: hash_fn(serializer(element)).

    This is exactly how the tree computes its row-0 digests.
    """
    return hash_fn(serializer(element))


def hash_concat(parts: Sequence[bytes], hash_fn: Hasher = SHA256) -> bytes:
    """
    Hash the left-to-right concatenation of byte sequences.

    Used for Merkle parent hashes: parent = H(c0 + c1 + ... + c{n-1})
    """
    return hash_fn(b"".join(parts))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "Hasher",
    "HashFunction",
    "SHA256",
    "available_hash_functions",
    "get_hash_function",
    "sha256",
    "hash_element",
    "hash_concat",
    "to_hex",
    "from_hex",
]
