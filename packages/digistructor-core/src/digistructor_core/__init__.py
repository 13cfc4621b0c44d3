"""Digistructor Core - content-addressed storage with verified reconstruction."""

from digistructor_core.config import DigistructorConfig, load_config
from digistructor_core.digest import get_digest_function, sha256
from digistructor_core.errors import (
    BackingStoreError,
    CycleDetectedError,
    DigestMismatchError,
    DigistructorError,
    NotFoundError,
    ResolutionLimitExceeded,
)
from digistructor_core.graph import AppendEdge, Leaf, NodeStore, TreeBuilder, make_edge, make_leaf
from digistructor_core.hydration import Loader, MemoryBackingStore
from digistructor_core.interfaces import BackingStore

__version__ = "0.1.0"

__all__ = [
    "AppendEdge",
    "BackingStore",
    "BackingStoreError",
    "CycleDetectedError",
    "DigestMismatchError",
    "DigistructorConfig",
    "DigistructorError",
    "Leaf",
    "Loader",
    "MemoryBackingStore",
    "NodeStore",
    "NotFoundError",
    "ResolutionLimitExceeded",
    "TreeBuilder",
    "get_digest_function",
    "load_config",
    "make_edge",
    "make_leaf",
    "sha256",
]
