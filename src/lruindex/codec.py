"""Encoding of the persisted ordering record."""

from __future__ import annotations

import json
from collections.abc import Sequence

from lruindex.errors import LruDecodeError

INDEX_SUFFIX = "_lru_idx"


def index_record_key(namespace: str) -> str:
    return f"{namespace}{INDEX_SUFFIX}"


def encode_ordering(ordering: Sequence[str]) -> str:
    return json.dumps(list(ordering), separators=(",", ":"), ensure_ascii=False)


def decode_ordering(raw: str) -> list[str]:
    """Decode a record written by `encode_ordering`.

    Anything other than a JSON array of distinct strings raises
    `LruDecodeError`; a corrupt record is never read back as empty.
    """

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise LruDecodeError(f"Ordering record is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise LruDecodeError(
            f"Ordering record must be a JSON array, got {type(data).__name__}."
        )

    seen: set[str] = set()
    for item in data:
        if not isinstance(item, str):
            raise LruDecodeError(f"Ordering record contains a non-string key: {item!r}")
        if item in seen:
            raise LruDecodeError(f"Ordering record contains a duplicate key: {item!r}")
        seen.add(item)
    return data
