"""Demand-driven hydration of node stores from persistent backing stores."""

from digistructor_core.hydration.loader import HydrationResult, Loader
from digistructor_core.hydration.memory import MemoryBackingStore

__all__ = [
    "HydrationResult",
    "Loader",
    "MemoryBackingStore",
]
