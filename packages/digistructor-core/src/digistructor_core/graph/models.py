"""Data models for the digest graph: raw leaves and append edges."""

from __future__ import annotations

from dataclasses import dataclass

from digistructor_core.digest import DigestFunction, sha256


def _as_bytes(name: str, value: object) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{name} must be bytes, got {type(value).__name__}")


@dataclass(frozen=True)
class Leaf:
    """Raw data, identified by the hash of that data.

    The digest is taken on trust here; it is only checked when the leaf is
    resolved through a NodeStore.
    """

    digest: bytes
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", _as_bytes("digest", self.digest))
        object.__setattr__(self, "data", _as_bytes("data", self.data))
        if not self.digest:
            raise ValueError("digest cannot be empty")


@dataclass(frozen=True)
class AppendEdge:
    """Concatenation of two other nodes, left bytes followed by right bytes.

    ``digest`` is the hash of the fully resolved concatenation, not of the
    two child digests, so verifying an edge always means resolving it.
    """

    digest: bytes
    left: bytes
    right: bytes

    def __post_init__(self) -> None:
        for name in ("digest", "left", "right"):
            object.__setattr__(self, name, _as_bytes(name, getattr(self, name)))
        if not self.digest:
            raise ValueError("digest cannot be empty")


Node = Leaf | AppendEdge


def make_leaf(data: bytes, digest_fn: DigestFunction = sha256) -> Leaf:
    """Build a well-formed leaf for *data*."""
    data = _as_bytes("data", data)
    return Leaf(digest=digest_fn(data), data=data)


def make_edge(
    left: bytes,
    right: bytes,
    content: bytes,
    digest_fn: DigestFunction = sha256,
) -> AppendEdge:
    """Build an edge joining *left* and *right*.

    *content* is the full concatenation the edge stands for; the caller is
    expected to hold it already (producers usually do).
    """
    return AppendEdge(digest=digest_fn(_as_bytes("content", content)), left=left, right=right)
