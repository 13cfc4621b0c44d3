"""BackingStore implementation backed by a local SQLite database."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from digistructor_core.config.models import BackingConfig
from digistructor_core.errors import BackingStoreError
from digistructor_core.graph.models import AppendEdge, Leaf, Node

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS data_leaves (
    digest BLOB PRIMARY KEY,
    data BLOB NOT NULL
);
CREATE TABLE IF NOT EXISTS append_edges (
    digest BLOB NOT NULL,
    left_digest BLOB NOT NULL,
    right_digest BLOB NOT NULL,
    PRIMARY KEY (digest, left_digest, right_digest)
);
"""

# UNION (not UNION ALL) drops repeated rows, so a cyclic edge table still
# terminates. Both legs skip any digest that a leaf already satisfies.
_TRAVERSE_SQL = """\
WITH RECURSIVE branches (digest, left_digest, right_digest) AS (
    SELECT digest, left_digest, right_digest
    FROM append_edges
    WHERE digest = ?
        AND digest NOT IN (SELECT digest FROM data_leaves)

    UNION

    SELECT child.digest, child.left_digest, child.right_digest
    FROM append_edges child
    JOIN branches parent
        ON child.digest IN (parent.left_digest, parent.right_digest)
    WHERE child.digest NOT IN (SELECT digest FROM data_leaves)
)
SELECT digest, left_digest, right_digest FROM branches
"""

# Stay well below SQLite's host parameter limit
_LOOKUP_BATCH = 500


class SQLiteBackingStore:
    """BackingStore and NodeSink using SQLite with WAL mode.

    Leaves are keyed by digest; edges by (digest, left, right), so several
    recipes for the same digest can coexist.
    """

    def __init__(self, db_path: str = ".digistructor/store.db", timeout: float = 5.0) -> None:
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        try:
            self._conn = sqlite3.connect(self.db_path, timeout=timeout)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise BackingStoreError("sqlite", "open", e) from e

    @classmethod
    def from_config(cls, config: BackingConfig) -> SQLiteBackingStore:
        return cls(db_path=config.path, timeout=config.timeout)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SQLiteBackingStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- NodeSink --------------------------------------------------------------

    def put_leaf(self, leaf: Leaf) -> None:
        self.put_nodes([leaf])

    def put_edge(self, edge: AppendEdge) -> None:
        self.put_nodes([edge])

    def put_nodes(self, nodes: Iterable[Node]) -> None:
        """Persist *nodes* in one transaction; existing rows are left as they are."""
        leaf_rows: list[tuple[bytes, bytes]] = []
        edge_rows: list[tuple[bytes, bytes, bytes]] = []
        for node in nodes:
            if isinstance(node, Leaf):
                leaf_rows.append((node.digest, node.data))
            else:
                edge_rows.append((node.digest, node.left, node.right))

        try:
            with self._conn:
                self._conn.executemany(
                    "INSERT OR IGNORE INTO data_leaves (digest, data) VALUES (?, ?)",
                    leaf_rows,
                )
                self._conn.executemany(
                    "INSERT OR IGNORE INTO append_edges (digest, left_digest, right_digest) "
                    "VALUES (?, ?, ?)",
                    edge_rows,
                )
        except sqlite3.Error as e:
            raise BackingStoreError("sqlite", "put", e) from e
        logger.debug("Stored %d leaf row(s), %d edge row(s)", len(leaf_rows), len(edge_rows))

    # -- BackingStore ----------------------------------------------------------

    def traverse_edges(self, root: bytes) -> list[AppendEdge]:
        try:
            rows = self._conn.execute(_TRAVERSE_SQL, (root,)).fetchall()
        except sqlite3.Error as e:
            raise BackingStoreError("sqlite", "traverse", e) from e
        return [AppendEdge(digest=d, left=left, right=right) for d, left, right in rows]

    def find_leaves(self, digests: Iterable[bytes]) -> list[Leaf]:
        wanted = list(dict.fromkeys(digests))
        leaves: list[Leaf] = []
        try:
            for i in range(0, len(wanted), _LOOKUP_BATCH):
                batch = wanted[i:i + _LOOKUP_BATCH]
                placeholders = ", ".join("?" * len(batch))
                rows = self._conn.execute(
                    f"SELECT digest, data FROM data_leaves WHERE digest IN ({placeholders})",
                    batch,
                ).fetchall()
                leaves.extend(Leaf(digest=d, data=data) for d, data in rows)
        except sqlite3.Error as e:
            raise BackingStoreError("sqlite", "find_leaves", e) from e
        return leaves

    # -- BackingPlugin ---------------------------------------------------------

    def has(self, digest: bytes) -> bool:
        """True if *digest* is stored as a leaf or as the digest of any edge."""
        try:
            row = self._conn.execute(
                "SELECT 1 FROM data_leaves WHERE digest = ? "
                "UNION SELECT 1 FROM append_edges WHERE digest = ? LIMIT 1",
                (digest, digest),
            ).fetchone()
        except sqlite3.Error as e:
            raise BackingStoreError("sqlite", "has", e) from e
        return row is not None

    def stats(self) -> dict[str, int]:
        """Count stored rows per relation."""
        try:
            (leaves,) = self._conn.execute("SELECT COUNT(*) FROM data_leaves").fetchone()
            (edges,) = self._conn.execute("SELECT COUNT(*) FROM append_edges").fetchone()
        except sqlite3.Error as e:
            raise BackingStoreError("sqlite", "stats", e) from e
        return {"leaves": leaves, "edges": edges}
