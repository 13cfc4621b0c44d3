"""In-memory backing store, mostly for tests and small embedded uses."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from digistructor_core.config.models import BackingConfig
from digistructor_core.graph.models import AppendEdge, Leaf, Node


class MemoryBackingStore:
    """BackingStore kept in plain dicts.

    Mirrors the persistent schema: one leaf per digest, any number of edges
    per digest (an edge is identified by digest, left and right together).
    """

    def __init__(self) -> None:
        self._leaves: dict[bytes, bytes] = {}
        self._edges: dict[bytes, dict[tuple[bytes, bytes], AppendEdge]] = {}

    @classmethod
    def from_config(cls, config: BackingConfig) -> MemoryBackingStore:
        return cls()

    # -- NodeSink --------------------------------------------------------------

    def put_leaf(self, leaf: Leaf) -> None:
        self._leaves.setdefault(leaf.digest, leaf.data)

    def put_edge(self, edge: AppendEdge) -> None:
        self._edges.setdefault(edge.digest, {})[(edge.left, edge.right)] = edge

    def put_nodes(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            if isinstance(node, Leaf):
                self.put_leaf(node)
            else:
                self.put_edge(node)

    # -- BackingStore ----------------------------------------------------------

    def traverse_edges(self, root: bytes) -> list[AppendEdge]:
        """Breadth-first walk from *root*, stopping wherever a leaf exists."""
        found: list[AppendEdge] = []
        seen: set[bytes] = set()
        frontier = deque([root])
        while frontier:
            digest = frontier.popleft()
            if digest in seen or digest in self._leaves:
                continue
            seen.add(digest)
            for edge in self._edges.get(digest, {}).values():
                found.append(edge)
                frontier.append(edge.left)
                frontier.append(edge.right)
        return found

    def find_leaves(self, digests: Iterable[bytes]) -> list[Leaf]:
        return [
            Leaf(digest=d, data=self._leaves[d])
            for d in dict.fromkeys(digests)
            if d in self._leaves
        ]

    # -- extras ----------------------------------------------------------------

    def has(self, digest: bytes) -> bool:
        return digest in self._leaves or digest in self._edges

    def stats(self) -> dict[str, int]:
        return {
            "leaves": len(self._leaves),
            "edges": sum(len(v) for v in self._edges.values()),
        }
