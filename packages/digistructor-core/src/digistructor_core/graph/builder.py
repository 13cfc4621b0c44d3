"""Builder for splitting a byte string into leaves and append edges."""

from __future__ import annotations

from dataclasses import dataclass, field

from digistructor_core.digest import DigestFunction, sha256
from digistructor_core.graph.models import AppendEdge, Leaf, Node

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class BuildResult:
    """Output of TreeBuilder.build()."""

    root: bytes
    size: int
    leaves: list[Leaf] = field(default_factory=list)
    edges: list[AppendEdge] = field(default_factory=list)

    @property
    def nodes(self) -> list[Node]:
        return [*self.leaves, *self.edges]


class TreeBuilder:
    """Chunks data into leaves and pairs neighbours into append edges.

    Each edge covers a contiguous span of the input and is identified by the
    hash of exactly those bytes. An odd node at the end of a level is carried
    up unchanged rather than duplicated, since duplication would change the
    content.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        digest_fn: DigestFunction = sha256,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.digest_fn = digest_fn

    def build(self, data: bytes) -> BuildResult:
        data = bytes(data)
        leaves: dict[bytes, Leaf] = {}
        edges: dict[bytes, AppendEdge] = {}

        # (start, end, digest) per node of the current level
        level: list[tuple[int, int, bytes]] = []
        for start in range(0, max(len(data), 1), self.chunk_size):
            chunk = data[start:start + self.chunk_size]
            digest = self.digest_fn(chunk)
            leaves.setdefault(digest, Leaf(digest=digest, data=chunk))
            level.append((start, start + len(chunk), digest))

        while len(level) > 1:
            next_level: list[tuple[int, int, bytes]] = []
            for i in range(0, len(level), 2):
                if i + 1 == len(level):
                    next_level.append(level[i])
                    break
                start, _, left = level[i]
                _, end, right = level[i + 1]
                digest = self.digest_fn(data[start:end])
                edges.setdefault(digest, AppendEdge(digest=digest, left=left, right=right))
                next_level.append((start, end, digest))
            level = next_level

        return BuildResult(
            root=level[0][2],
            size=len(data),
            leaves=list(leaves.values()),
            edges=list(edges.values()),
        )
