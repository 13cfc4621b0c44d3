"""Tests for Loader hydration and the in-memory backing store."""

from __future__ import annotations

import pytest

from digistructor_core.digest import sha256
from digistructor_core.errors import DigestMismatchError, NotFoundError, ResolutionLimitExceeded
from digistructor_core.graph import AppendEdge, Leaf, NodeStore, TreeBuilder, make_leaf
from digistructor_core.hydration import HydrationResult, Loader, MemoryBackingStore
from digistructor_core.interfaces import BackingStore, NodeSink


class RecordingBacking:
    """Wraps a backing store and records every query it receives."""

    def __init__(self, inner: MemoryBackingStore) -> None:
        self.inner = inner
        self.traversals: list[bytes] = []
        self.leaf_queries: list[list[bytes]] = []

    def traverse_edges(self, root: bytes) -> list[AppendEdge]:
        self.traversals.append(root)
        return self.inner.traverse_edges(root)

    def find_leaves(self, digests) -> list[Leaf]:
        digests = list(digests)
        self.leaf_queries.append(digests)
        return self.inner.find_leaves(digests)


# ---------------------------------------------------------------------------
# Protocol conformance
# ---------------------------------------------------------------------------


class TestProtocol:
    def test_memory_backing_satisfies_protocols(self):
        backing = MemoryBackingStore()
        assert isinstance(backing, BackingStore)
        assert isinstance(backing, NodeSink)

    def test_recording_wrapper_is_a_backing_store(self, memory_backing):
        assert isinstance(RecordingBacking(memory_backing), BackingStore)


# ---------------------------------------------------------------------------
# MemoryBackingStore traversal
# ---------------------------------------------------------------------------


class TestMemoryTraversal:
    def test_full_traversal(self, memory_backing, unbalanced_edges):
        edges = memory_backing.traverse_edges(sha256(b"abcd"))
        assert set(edges) == set(unbalanced_edges.values())

    def test_root_covered_by_leaf(self, memory_backing):
        memory_backing.put_leaf(make_leaf(b"abcd"))
        assert memory_backing.traverse_edges(sha256(b"abcd")) == []

    def test_prunes_below_leaf_satisfiable_digest(self, memory_backing, unbalanced_edges):
        """With "bcd" stored as a leaf, neither bcd nor bc is traversed."""
        memory_backing.put_leaf(make_leaf(b"bcd"))
        edges = memory_backing.traverse_edges(sha256(b"abcd"))
        assert edges == [unbalanced_edges["abcd"]]

    def test_unknown_root(self, memory_backing):
        assert memory_backing.traverse_edges(sha256(b"zzz")) == []

    def test_cyclic_edges_terminate(self):
        backing = MemoryBackingStore()
        x, y = b"\x02" * 32, b"\x03" * 32
        backing.put_edge(AppendEdge(digest=x, left=y, right=y))
        backing.put_edge(AppendEdge(digest=y, left=x, right=x))
        assert len(backing.traverse_edges(x)) == 2

    def test_multiple_recipes_for_one_digest(self, leaves, balanced_edges, unbalanced_edges):
        backing = MemoryBackingStore()
        backing.put_nodes([*leaves.values(), *balanced_edges.values(), *unbalanced_edges.values()])
        edges = backing.traverse_edges(sha256(b"abcd"))
        assert len(edges) == 6

    def test_find_leaves_skips_unknown(self, memory_backing, leaves):
        found = memory_backing.find_leaves([leaves["a"].digest, sha256(b"nope"), leaves["a"].digest])
        assert found == [leaves["a"]]

    def test_first_leaf_write_wins(self):
        backing = MemoryBackingStore()
        digest = sha256(b"abc")
        backing.put_leaf(Leaf(digest=digest, data=b"abc"))
        backing.put_leaf(Leaf(digest=digest, data=b"zzz"))
        assert backing.find_leaves([digest])[0].data == b"abc"

    def test_stats(self, memory_backing):
        assert memory_backing.stats() == {"leaves": 4, "edges": 3}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestLoader:
    def test_scenario(self, memory_backing):
        assert Loader(memory_backing).load(sha256(b"abcd")) == b"abcd"

    def test_hydrate_populates_exact_subgraph(self, memory_backing, leaves, unbalanced_edges):
        result = Loader(memory_backing).hydrate(sha256(b"abcd"))

        assert isinstance(result, HydrationResult)
        assert result.complete
        assert result.edges == 3
        assert result.leaves == 4
        expected = {e.digest for e in unbalanced_edges.values()} | {
            leaf.digest for leaf in leaves.values()
        }
        assert set(result.store.digests()) == expected

    def test_pruning_skips_edges_below_leaf(self, memory_backing, unbalanced_edges):
        memory_backing.put_leaf(make_leaf(b"bcd"))
        recording = RecordingBacking(memory_backing)

        result = Loader(recording).hydrate(sha256(b"abcd"))

        assert result.edges == 1
        assert not result.store.check(unbalanced_edges["bc"].digest)
        assert isinstance(result.store._graph[sha256(b"bcd")], Leaf)
        assert result.store.get(sha256(b"abcd")) == b"abcd"
        assert recording.traversals == [sha256(b"abcd")]
        assert len(recording.leaf_queries) == 1

    def test_leaf_wins_over_edge_with_same_digest(self, leaves, unbalanced_edges):
        class BothBacking(MemoryBackingStore):
            def traverse_edges(self, root):
                # A backend that ignores pruning and returns the bcd edge anyway
                return [unbalanced_edges["abcd"], unbalanced_edges["bcd"]]

        backing = BothBacking()
        backing.put_nodes([leaves["a"], make_leaf(b"bcd")])
        result = Loader(backing).hydrate(sha256(b"abcd"))

        assert isinstance(result.store._graph[sha256(b"bcd")], Leaf)
        assert result.store.get(sha256(b"abcd")) == b"abcd"

    def test_pure_leaf_target(self):
        backing = MemoryBackingStore()
        leaf = make_leaf(b"just data")
        backing.put_leaf(leaf)
        assert Loader(backing).load(leaf.digest) == b"just data"

    def test_unknown_target(self, memory_backing):
        loader = Loader(memory_backing)
        result = loader.hydrate(sha256(b"unknown"))
        assert result.missing == [sha256(b"unknown")]
        with pytest.raises(NotFoundError):
            loader.load(sha256(b"unknown"))

    def test_missing_leaf_reported(self, leaves, unbalanced_edges):
        backing = MemoryBackingStore()
        backing.put_nodes([leaves["a"], leaves["b"], leaves["d"], *unbalanced_edges.values()])

        result = Loader(backing).hydrate(sha256(b"abcd"))
        assert not result.complete
        assert result.missing == [leaves["c"].digest]
        with pytest.raises(NotFoundError) as exc_info:
            result.store.get(sha256(b"abcd"))
        assert exc_info.value.digest == leaves["c"].digest

    def test_tampered_backing_detected(self, leaves, unbalanced_edges):
        backing = MemoryBackingStore()
        backing.put_nodes([leaves["a"], leaves["b"], leaves["c"], *unbalanced_edges.values()])
        backing.put_leaf(Leaf(digest=leaves["d"].digest, data=b"D"))

        with pytest.raises(DigestMismatchError):
            Loader(backing).load(sha256(b"abcd"))

    def test_hydrate_into_existing_store(self, memory_backing):
        store = NodeStore()
        extra = make_leaf(b"unrelated")
        store.add(extra)

        result = Loader(memory_backing).hydrate(sha256(b"abcd"), store=store)
        assert result.store is store
        assert store.check(extra.digest)
        assert store.get(sha256(b"abcd")) == b"abcd"

    def test_store_factory(self, memory_backing):
        loader = Loader(memory_backing, store_factory=lambda: NodeStore(max_depth=2))
        with pytest.raises(ResolutionLimitExceeded, match="depth limit"):
            loader.load(sha256(b"abcd"))

    def test_builder_output_round_trips(self):
        data = bytes(range(256)) * 20
        built = TreeBuilder(chunk_size=100).build(data)
        backing = MemoryBackingStore()
        backing.put_nodes(built.nodes)
        assert Loader(backing).load(built.root) == data
