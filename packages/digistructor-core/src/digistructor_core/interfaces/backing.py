"""Backing store interfaces consumed by the hydration loader."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from digistructor_core.graph.models import AppendEdge, Leaf, Node

if TYPE_CHECKING:
    from digistructor_core.config.models import BackingConfig


@runtime_checkable
class EdgeSource(Protocol):
    """Pruned traversal over persisted append edges."""

    def traverse_edges(self, root: bytes) -> list[AppendEdge]:
        """Return every edge needed to resolve *root*.

        Traversal never enters an edge whose digest is also stored as a
        leaf, including *root* itself.
        """
        ...


@runtime_checkable
class LeafSource(Protocol):
    """Bulk lookup of persisted leaves."""

    def find_leaves(self, digests: Iterable[bytes]) -> list[Leaf]: ...


@runtime_checkable
class BackingStore(EdgeSource, LeafSource, Protocol):
    """Everything the Loader needs from a persistent store."""

    ...


@runtime_checkable
class NodeSink(Protocol):
    """Write access for producers persisting freshly built nodes."""

    def put_leaf(self, leaf: Leaf) -> None: ...

    def put_edge(self, edge: AppendEdge) -> None: ...

    def put_nodes(self, nodes: Iterable[Node]) -> None: ...


@runtime_checkable
class BackingPlugin(BackingStore, NodeSink, Protocol):
    """What the CLI needs from a backing store class loaded as a plugin.

    The class is built with ``from_config`` and must persist what it is given;
    a store that forgets writes between processes is not a usable plugin.
    """

    @classmethod
    def from_config(cls, config: BackingConfig) -> BackingPlugin: ...

    def has(self, digest: bytes) -> bool: ...

    def stats(self) -> dict[str, int]: ...

    def close(self) -> None: ...


# Attribute names checked on a plugin class before it is used
BACKING_PLUGIN_MEMBERS = (
    "from_config",
    "traverse_edges",
    "find_leaves",
    "put_leaf",
    "put_edge",
    "put_nodes",
    "has",
    "stats",
    "close",
)
