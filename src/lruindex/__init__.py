from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from lruindex.codec import decode_ordering, encode_ordering, index_record_key
from lruindex.errors import (
    LruConfigError,
    LruDecodeError,
    LruIndexError,
    LruReconstructionError,
    LruStoreError,
)
from lruindex.index import LruIndex
from lruindex.reconstruct import (
    FunctionReconstructor,
    JsonFieldReconstructor,
    PrefixReconstructor,
    Reconstructor,
)
from lruindex.store import BackingStore, JsonFileStore, MemoryStore


def _package_version() -> str:
    try:
        return version("lruindex")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "BackingStore",
    "FunctionReconstructor",
    "JsonFieldReconstructor",
    "JsonFileStore",
    "LruConfigError",
    "LruDecodeError",
    "LruIndex",
    "LruIndexError",
    "LruReconstructionError",
    "LruStoreError",
    "MemoryStore",
    "PrefixReconstructor",
    "Reconstructor",
    "__version__",
    "decode_ordering",
    "encode_ordering",
    "index_record_key",
]
