"""Digest functions used for content identity and verification."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from functools import lru_cache

DigestFunction = Callable[[bytes], bytes]

# Algorithms accepted by get_digest_function(), all fixed-length outputs
SUPPORTED_ALGORITHMS = ("sha256", "sha512", "sha3_256", "blake2b")


def sha256(content: bytes) -> bytes:
    """Raw (non-hex) SHA-256 digest of *content*."""
    return hashlib.sha256(content).digest()


@lru_cache(maxsize=None)
def get_digest_function(algorithm: str = "sha256") -> DigestFunction:
    """Return a digest function for *algorithm*.

    Raises ValueError for anything outside SUPPORTED_ALGORITHMS.
    """
    if algorithm == "sha256":
        return sha256
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(
            f"unsupported digest algorithm {algorithm!r}, "
            f"expected one of {', '.join(SUPPORTED_ALGORITHMS)}"
        )

    def _digest(content: bytes) -> bytes:
        return hashlib.new(algorithm, content).digest()

    _digest.__name__ = algorithm
    return _digest


def to_hex(digest: bytes) -> str:
    return digest.hex()


def from_hex(value: str) -> bytes:
    """Parse a hex digest, accepting surrounding whitespace."""
    text = value.strip().lower()
    if not text:
        raise ValueError("digest cannot be empty")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"not a hex digest: {value!r}") from e
