"""lruindex exception hierarchy.

Keep this module small and dependency-free: it is imported broadly across the
project and by tests.
"""


class LruIndexError(Exception):
    """Base exception for all lruindex errors."""


class LruConfigError(LruIndexError):
    """Raised for invalid configuration or constructor arguments."""


class LruDecodeError(LruIndexError):
    """Raised when a persisted ordering record cannot be decoded."""


class LruReconstructionError(LruIndexError):
    """Raised when rebuilding an ordering from an existing store fails."""


class LruStoreError(LruIndexError):
    """Raised when a file-backed store holds unreadable content."""
