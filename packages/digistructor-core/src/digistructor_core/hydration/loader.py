"""Hydrates a NodeStore from a persistent backing store on demand."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from digistructor_core.digest import to_hex
from digistructor_core.graph.store import NodeStore
from digistructor_core.interfaces.backing import BackingStore

logger = logging.getLogger(__name__)


@dataclass
class HydrationResult:
    """What a single hydration pass pulled into the store."""

    target: bytes
    store: NodeStore
    edges: int = 0
    leaves: int = 0
    missing: list[bytes] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing


class Loader:
    """Pulls exactly the subgraph needed for one digest into a NodeStore.

    The backing store prunes its traversal at digests it already holds as
    leaves, so a leaf always wins over a deeper reconstruction.
    """

    def __init__(
        self,
        backing: BackingStore,
        store_factory: Callable[[], NodeStore] = NodeStore,
    ) -> None:
        self.backing = backing
        self.store_factory = store_factory

    def hydrate(self, target: bytes, store: NodeStore | None = None) -> HydrationResult:
        """Populate *store* (or a fresh one) with everything *target* needs.

        1. Fetch the pruned edge frontier for *target*.
        2. Collect the target plus each edge's digest, left and right.
        3. Fetch the leaves among those candidates.
        4. Add edges, then leaves, so a leaf replaces an edge of the same digest.
        """
        if store is None:
            store = self.store_factory()

        edges = self.backing.traverse_edges(target)
        candidates: dict[bytes, None] = {target: None}
        for edge in edges:
            candidates[edge.digest] = None
            candidates[edge.left] = None
            candidates[edge.right] = None

        leaves = self.backing.find_leaves(candidates)
        store.add_all(edges)
        store.add_all(leaves)

        missing = [d for d in candidates if not store.check(d)]
        if missing:
            logger.warning(
                "Hydrated %s with %d digest(s) still unavailable, first: %s",
                to_hex(target),
                len(missing),
                to_hex(missing[0]),
            )
        logger.debug(
            "Hydrated %s: %d edge(s), %d leaf/leaves from %d candidate(s)",
            to_hex(target),
            len(edges),
            len(leaves),
            len(candidates),
        )
        return HydrationResult(
            target=target,
            store=store,
            edges=len(edges),
            leaves=len(leaves),
            missing=missing,
        )

    def load(self, target: bytes, store: NodeStore | None = None) -> bytes:
        """Hydrate, then return the verified bytes for *target*."""
        return self.hydrate(target, store).store.get(target)
