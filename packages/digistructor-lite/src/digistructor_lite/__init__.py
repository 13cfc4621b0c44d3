"""Digistructor Lite: local-first SQLite backing store and CLI for Digistructor."""

from __future__ import annotations

from digistructor_lite.backing.sqlite_backing import SQLiteBackingStore

__all__ = ["SQLiteBackingStore"]
