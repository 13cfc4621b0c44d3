"""In-memory node store with verified reconstruction."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from digistructor_core.digest import DigestFunction, get_digest_function, sha256, to_hex
from digistructor_core.errors import (
    CycleDetectedError,
    DigestMismatchError,
    NotFoundError,
    ResolutionLimitExceeded,
)
from digistructor_core.graph.models import AppendEdge, Leaf, Node

if TYPE_CHECKING:
    from digistructor_core.config.models import DigistructorConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100_000


class NodeStore:
    """Maps digests to nodes and turns digests back into verified bytes.

    ``add`` never verifies anything; every ``get`` re-verifies the whole
    subtree it touches, so a node overwritten between two calls is caught
    on the next call.
    """

    def __init__(
        self,
        digest_fn: DigestFunction = sha256,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_bytes: int | None = None,
        memoize: bool = True,
    ) -> None:
        if max_depth <= 0:
            raise ValueError("max_depth must be positive")
        if max_bytes is not None and max_bytes < 0:
            raise ValueError("max_bytes cannot be negative")
        self.digest_fn = digest_fn
        self.max_depth = max_depth
        self.max_bytes = max_bytes
        self.memoize = memoize
        self._graph: dict[bytes, Node] = {}

    @classmethod
    def from_config(cls, config: DigistructorConfig) -> NodeStore:
        return cls(
            digest_fn=get_digest_function(config.digest.algorithm),
            max_depth=config.resolve.max_depth,
            max_bytes=config.resolve.max_bytes,
            memoize=config.resolve.memoize,
        )

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add(self, node: Node) -> None:
        """Insert *node* under its own declared digest, replacing any previous one."""
        if not isinstance(node, (Leaf, AppendEdge)):
            raise TypeError(f"expected Leaf or AppendEdge, got {type(node).__name__}")
        self._graph[node.digest] = node

    def add_all(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self.add(node)

    def check(self, digest: bytes) -> bool:
        """Membership test only; says nothing about whether *digest* verifies."""
        return digest in self._graph

    def digests(self) -> Iterator[bytes]:
        return iter(self._graph)

    def __contains__(self, digest: object) -> bool:
        return digest in self._graph

    def __len__(self) -> int:
        return len(self._graph)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _lookup(self, want: bytes) -> Node:
        node = self._graph.get(want)
        if node is None:
            raise NotFoundError(want)
        if node.digest != want:
            # Only reachable if something wrote into _graph under the wrong key.
            raise AssertionError(
                "Map retrieved the wrong node. This is a bug. "
                f"Expected {to_hex(want)}, got {to_hex(node.digest)}"
            )
        return node

    def _verify(self, want: bytes, content: bytes) -> bytes:
        if self.max_bytes is not None and len(content) > self.max_bytes:
            raise ResolutionLimitExceeded(want, "bytes", self.max_bytes)
        have = self.digest_fn(content)
        if have != want:
            raise DigestMismatchError(want, have)
        return content

    def get(self, want: bytes) -> bytes:
        """Reconstruct and verify the bytes for *want*.

        Edges resolve their left child completely before the right one. The
        walk runs on an explicit stack, so tree depth is bounded by
        ``max_depth`` rather than the interpreter's recursion limit.

        Raises NotFoundError, DigestMismatchError, ResolutionLimitExceeded or
        CycleDetectedError; an error anywhere in the subtree fails the whole
        call.
        """
        logger.debug("Resolving %s", to_hex(want))
        verified: dict[bytes, bytes] = {}
        in_progress: set[bytes] = set()
        results: list[bytes] = []
        # (digest, depth, children_done)
        stack: list[tuple[bytes, int, bool]] = [(want, 1, False)]

        while stack:
            digest, depth, children_done = stack.pop()

            if children_done:
                right = results.pop()
                left = results.pop()
                content = self._verify(digest, left + right)
                in_progress.discard(digest)
                if self.memoize:
                    verified[digest] = content
                results.append(content)
                continue

            if digest in verified:
                results.append(verified[digest])
                continue
            if depth > self.max_depth:
                raise ResolutionLimitExceeded(digest, "depth", self.max_depth)

            node = self._lookup(digest)
            if isinstance(node, Leaf):
                content = self._verify(digest, node.data)
                if self.memoize:
                    verified[digest] = content
                results.append(content)
                continue

            if digest in in_progress:
                raise CycleDetectedError(digest)
            in_progress.add(digest)
            stack.append((digest, depth, True))
            # Right is pushed first so that left is popped, and finished, first.
            stack.append((node.right, depth + 1, False))
            stack.append((node.left, depth + 1, False))

        content = results.pop()
        logger.debug("Resolved %s (%d bytes)", to_hex(want), len(content))
        return content
