"""Error types raised while resolving and hydrating digests."""

from __future__ import annotations

from digistructor_core.digest import to_hex


class DigistructorError(Exception):
    """Base class for recoverable resolution and hydration errors."""


class NotFoundError(DigistructorError):
    """No node is registered for the requested digest."""

    def __init__(self, digest: bytes) -> None:
        self.digest = digest
        super().__init__(f"cannot find data or a way to construct {to_hex(digest)}")


class DigestMismatchError(DigistructorError):
    """Reconstructed content does not hash to the requested digest."""

    def __init__(self, want: bytes, have: bytes) -> None:
        self.want = want
        self.have = have
        super().__init__(f"digest mismatch; want {to_hex(want)}, have {to_hex(have)}")


class ResolutionLimitExceeded(DigistructorError):
    """Resolution went deeper, or produced more bytes, than allowed."""

    def __init__(self, digest: bytes, kind: str, limit: int) -> None:
        self.digest = digest
        self.kind = kind
        self.limit = limit
        super().__init__(f"{kind} limit of {limit} exceeded while resolving {to_hex(digest)}")


class CycleDetectedError(DigistructorError):
    """A digest turned out to depend on itself."""

    def __init__(self, digest: bytes) -> None:
        self.digest = digest
        super().__init__(f"{to_hex(digest)} depends on itself")


class BackingStoreError(DigistructorError):
    """Wraps backend-specific exceptions with context."""

    def __init__(self, backend: str, operation: str, cause: Exception) -> None:
        self.backend = backend
        self.operation = operation
        super().__init__(f"{backend} {operation} failed: {cause}")
        self.__cause__ = cause
