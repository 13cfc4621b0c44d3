"""SQLite-backed persistent store for leaves and append edges."""

from __future__ import annotations

from digistructor_lite.backing.sqlite_backing import SQLiteBackingStore

__all__ = ["SQLiteBackingStore"]
