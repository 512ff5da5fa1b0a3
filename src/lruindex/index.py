"""Count-bounded LRU index over a shared key-value store.

The index keeps the recency order of the keys it owns in one JSON-array record
(`<namespace>_lru_idx`) stored next to the entries themselves. Every operation
is load -> pure transform (see `lruindex.ordering`) -> persist, followed by the
matching write or delete of the entry. There is no locking: one writer per
namespace is a precondition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from lruindex.codec import decode_ordering, encode_ordering, index_record_key
from lruindex.errors import LruConfigError, LruReconstructionError
from lruindex.ordering import evict, promote, touch, without
from lruindex.reconstruct import Reconstructor, as_reconstructor
from lruindex.store import BackingStore

logger = logging.getLogger("lruindex.index")


class LruIndex:
    """Keeps at most `limit` entries of `namespace` in `store`.

    `reconstructor` (a `Reconstructor` or a plain `(key, value)` callable) is
    used once, by the first `set` that finds no ordering record, to adopt
    entries already present in the store. `get` and `delete` never rebuild;
    for them a missing record is an empty ordering.
    """

    def __init__(
        self,
        store: BackingStore,
        namespace: str,
        limit: int,
        reconstructor: Reconstructor | Callable[[str, str], Any | None] | None = None,
    ) -> None:
        if not isinstance(namespace, str) or not namespace:
            raise LruConfigError("namespace must be a non-empty string.")
        if not isinstance(limit, int) or isinstance(limit, bool):
            raise LruConfigError(f"limit must be an integer, got {type(limit).__name__}.")
        if limit < 1:
            raise LruConfigError(f"limit must be >= 1, got {limit}.")

        self._store = store
        self.namespace = namespace
        self.limit = limit
        self._reconstructor = as_reconstructor(reconstructor)

    def __repr__(self) -> str:
        return f"LruIndex(namespace={self.namespace!r}, limit={self.limit})"

    @property
    def index_key(self) -> str:
        return index_record_key(self.namespace)

    @property
    def store(self) -> BackingStore:
        return self._store

    def _load(self) -> list[str] | None:
        raw = self._store.get_raw(self.index_key)
        if raw is None:
            return None
        return decode_ordering(raw)

    def _persist(self, keys: list[str]) -> None:
        self._store.set_raw(self.index_key, encode_ordering(keys))

    def _check_key(self, key: str) -> None:
        if key == self.index_key:
            raise ValueError(f"{key!r} is reserved for the ordering record of {self.namespace!r}.")

    def ordering(self) -> list[str]:
        """Return the persisted ordering, least recently used first."""

        return self._load() or []

    def __len__(self) -> int:
        return len(self.ordering())

    def __contains__(self, key: object) -> bool:
        return key in self.ordering()

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key` and mark it most recently used.

        Evicts from the front of the ordering until it fits `limit`; the
        evicted entries are deleted from the store before `value` is written.
        """

        self._check_key(key)
        current = self._load()
        if current is None:
            current = self._bootstrap() if self._reconstructor is not None else []

        keys, evicted = evict(touch(current, key), self.limit)
        for old in evicted:
            logger.debug("Evicting %r from namespace %r", old, self.namespace)
            self._store.delete_raw(old)

        self._persist(keys)
        self._store.set_raw(key, value)

    def get(self, key: str) -> str | None:
        """Return the value stored under `key` (None if absent).

        A tracked key is promoted to most recently used. Untracked keys are
        not adopted, even when the store holds a value for them.
        """

        current = self.ordering()
        if key in current:
            promoted = promote(current, key)
            if promoted != current:
                self._persist(promoted)
        return self._store.get_raw(key)

    def delete(self, key: str) -> None:
        """Stop tracking `key` and remove its entry. Idempotent."""

        self._check_key(key)
        self._persist(without(self.ordering(), key))
        self._store.delete_raw(key)

    def _bootstrap(self) -> list[str]:
        """Build an initial ordering by scanning the whole store."""

        assert self._reconstructor is not None

        keys = self._store.enumerate_keys()
        expected = self._store.count()
        if expected != len(keys):
            logger.warning(
                "Store reported %d keys but enumerated %d while rebuilding %r",
                expected,
                len(keys),
                self.index_key,
            )

        found: list[tuple[str, Any]] = []
        for key in keys:
            value = self._store.get_raw(key)
            if value is None:
                # Removed between enumeration and read.
                logger.debug("Skipping %r: vanished during scan", key)
                continue
            sort_key = self._reconstructor.sort_key(key, value)
            if sort_key is None:
                continue
            if sort_key != sort_key:
                raise LruReconstructionError(f"Sort key for {key!r} is NaN.")
            found.append((key, sort_key))

        try:
            found.sort(key=lambda item: item[1])
        except TypeError as e:
            raise LruReconstructionError(f"Sort keys are not mutually comparable: {e}") from e

        logger.debug(
            "Rebuilt %r from %d of %d stored keys", self.index_key, len(found), len(keys)
        )
        return [key for key, _ in found]
