"""Interfaces implemented by persistent backing stores."""

from digistructor_core.interfaces.backing import (
    BACKING_PLUGIN_MEMBERS,
    BackingPlugin,
    BackingStore,
    EdgeSource,
    LeafSource,
    NodeSink,
)

__all__ = [
    "BACKING_PLUGIN_MEMBERS",
    "BackingPlugin",
    "BackingStore",
    "EdgeSource",
    "LeafSource",
    "NodeSink",
]
