"""Shared test fixtures for Digistructor."""

import pytest

from digistructor_core.config.models import DigistructorConfig
from digistructor_core.digest import sha256
from digistructor_core.graph import AppendEdge, NodeStore, make_leaf
from digistructor_core.hydration import MemoryBackingStore


@pytest.fixture
def leaves():
    """Leaves for "a", "b", "c" and "d", keyed by their text."""
    return {c: make_leaf(c.encode()) for c in "abcd"}


@pytest.fixture
def unbalanced_edges(leaves):
    """(a . ((b . c) . d)): bc, bcd, abcd."""
    bc = AppendEdge(digest=sha256(b"bc"), left=leaves["b"].digest, right=leaves["c"].digest)
    bcd = AppendEdge(digest=sha256(b"bcd"), left=bc.digest, right=leaves["d"].digest)
    abcd = AppendEdge(digest=sha256(b"abcd"), left=leaves["a"].digest, right=bcd.digest)
    return {"bc": bc, "bcd": bcd, "abcd": abcd}


@pytest.fixture
def balanced_edges(leaves):
    """((a . b) . (c . d)): ab, cd, abcd."""
    ab = AppendEdge(digest=sha256(b"ab"), left=leaves["a"].digest, right=leaves["b"].digest)
    cd = AppendEdge(digest=sha256(b"cd"), left=leaves["c"].digest, right=leaves["d"].digest)
    abcd = AppendEdge(digest=sha256(b"abcd"), left=ab.digest, right=cd.digest)
    return {"ab": ab, "cd": cd, "abcd": abcd}


@pytest.fixture
def store():
    return NodeStore()


@pytest.fixture
def memory_backing(leaves, unbalanced_edges):
    """A backing store holding the four leaves and the unbalanced abcd tree."""
    backing = MemoryBackingStore()
    backing.put_nodes(leaves.values())
    backing.put_nodes(unbalanced_edges.values())
    return backing


@pytest.fixture
def sample_config():
    return DigistructorConfig()
