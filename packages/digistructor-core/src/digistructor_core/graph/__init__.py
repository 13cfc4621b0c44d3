"""Digest graph: node models, the verifying store, and a tree builder."""

from digistructor_core.graph.builder import BuildResult, TreeBuilder
from digistructor_core.graph.models import AppendEdge, Leaf, Node, make_edge, make_leaf
from digistructor_core.graph.store import NodeStore


def build_tree(data: bytes, **kwargs) -> BuildResult:
    """Convenience wrapper around TreeBuilder().build()."""
    return TreeBuilder(**kwargs).build(data)


__all__ = [
    "AppendEdge",
    "BuildResult",
    "Leaf",
    "Node",
    "NodeStore",
    "TreeBuilder",
    "build_tree",
    "make_edge",
    "make_leaf",
]
