"""Pure transforms over a recency ordering (oldest first, newest last).

None of these mutate their argument; callers load an ordering, pass it through
one transform and persist the result.
"""

from __future__ import annotations

from collections.abc import Sequence


def without(ordering: Sequence[str], key: str) -> list[str]:
    """Return `ordering` with every occurrence of `key` removed."""

    return [k for k in ordering if k != key]


def touch(ordering: Sequence[str], key: str) -> list[str]:
    """Move (or add) `key` to the most-recently-used position."""

    out = without(ordering, key)
    out.append(key)
    return out


def promote(ordering: Sequence[str], key: str) -> list[str]:
    """Like `touch`, but only for keys already tracked."""

    if key not in ordering:
        return list(ordering)
    return touch(ordering, key)


def evict(ordering: Sequence[str], limit: int) -> tuple[list[str], list[str]]:
    """Split `ordering` into `(kept, evicted)` so that `len(kept) <= limit`.

    Evicted keys come from the front (least recently used) and are returned in
    the order they were dropped.
    """

    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    overflow = max(0, len(ordering) - limit)
    return list(ordering[overflow:]), list(ordering[:overflow])
