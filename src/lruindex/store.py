"""Backing stores: the unordered string key-value layer an index sits on.

An `LruIndex` only needs the five methods of `BackingStore`. Two
implementations ship here: `MemoryStore` for tests and throwaway use, and
`JsonFileStore`, a persistent single-file store.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from lruindex.errors import LruStoreError


@runtime_checkable
class BackingStore(Protocol):
    def get_raw(self, key: str) -> str | None:
        """Return the stored value, or None when `key` is absent."""

    def set_raw(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""

    def delete_raw(self, key: str) -> None:
        """Remove `key`; a no-op when it is absent."""

    def enumerate_keys(self) -> list[str]:
        """Return every key currently stored, including foreign ones."""

    def count(self) -> int:
        """Return the number of keys currently stored."""


class MemoryStore:
    """Dict-backed store; enumeration follows insertion order."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_raw(self, key: str) -> str | None:
        return self._data.get(key)

    def set_raw(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete_raw(self, key: str) -> None:
        self._data.pop(key, None)

    def enumerate_keys(self) -> list[str]:
        return list(self._data)

    def count(self) -> int:
        return len(self._data)

    def snapshot(self) -> dict[str, str]:
        """Return a shallow copy of the stored mapping."""

        return dict(self._data)


class JsonFileStore:
    """Persistent store keeping every key in one JSON object file.

    The file is read on first access and rewritten atomically (temp file in the
    same directory, then `os.replace`) after each mutation. A missing file is
    an empty store. OS errors while writing propagate to the caller and leave
    the in-memory copy as it was before the failed write.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._data = {}
            return self._data
        except UnicodeDecodeError as e:
            raise LruStoreError(f"Store file is not valid UTF-8: {self._path}") from e

        try:
            data = json.loads(text)
        except ValueError as e:
            raise LruStoreError(f"Invalid JSON in store file {self._path}: {e}") from e

        if not isinstance(data, dict) or any(not isinstance(v, str) for v in data.values()):
            raise LruStoreError(
                f"Store file must hold a JSON object of string values: {self._path}"
            )
        self._data = data
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        """Write `data` to disk, then adopt it as the in-memory copy."""

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=str(self._path.parent),
            prefix=".lruindex-tmp-",
            suffix=".json",
            text=True,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path)
            self._data = data
        finally:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass

    def get_raw(self, key: str) -> str | None:
        return self._load().get(key)

    def set_raw(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._flush(data)

    def delete_raw(self, key: str) -> None:
        data = dict(self._load())
        if key not in data:
            return
        del data[key]
        self._flush(data)

    def enumerate_keys(self) -> list[str]:
        return list(self._load())

    def count(self) -> int:
        return len(self._load())

    def reload(self) -> None:
        """Drop the in-memory copy so the next access re-reads the file."""

        self._data = None
