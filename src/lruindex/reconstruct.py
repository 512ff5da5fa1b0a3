"""Reconstructors: how an index claims and orders keys found in a shared store.

When a namespace has no ordering record yet, the index scans the whole store
and asks its reconstructor about every key. A reconstructor returns None for
keys that belong to someone else, or a sort key (older sorts first) for keys
it owns. Implementations must be side-effect free and deterministic for a
fixed store.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from lruindex.errors import LruReconstructionError

DEFAULT_EPOCH = "1970-01-01T00:00:00Z"


class Reconstructor(ABC):
    @abstractmethod
    def sort_key(self, key: str, value: str) -> Any | None:
        """Return a recency sort key for `key`, or None if it is not ours."""


class FunctionReconstructor(Reconstructor):
    """Adapts a plain `(key, value) -> sort key | None` callable."""

    def __init__(self, fn: Callable[[str, str], Any | None]) -> None:
        self._fn = fn

    def sort_key(self, key: str, value: str) -> Any | None:
        return self._fn(key, value)


class PrefixReconstructor(Reconstructor):
    """Claims keys starting with `prefix`.

    The sort key is `sort_key(value)` when given, otherwise the raw value.
    """

    def __init__(self, prefix: str, sort_key: Callable[[str], Any] | None = None) -> None:
        self.prefix = prefix
        self._value_key = sort_key

    def sort_key(self, key: str, value: str) -> Any | None:
        if not key.startswith(self.prefix):
            return None
        if self._value_key is None:
            return value
        return self._value_key(value)


class JsonFieldReconstructor(Reconstructor):
    """Claims keys starting with `prefix` whose values are JSON objects.

    The sort key is the first truthy field among `fields`, else `default`.
    With the defaults this orders exercise-history records such as
    ``{"last_done": "2011-12-08T15:05:18Z", "first_done": ...}`` by the time
    they were last worked on.
    """

    def __init__(
        self,
        prefix: str,
        fields: Sequence[str] = ("last_done", "first_done"),
        default: Any = DEFAULT_EPOCH,
    ) -> None:
        self.prefix = prefix
        self.fields = tuple(fields)
        self.default = default

    def sort_key(self, key: str, value: str) -> Any | None:
        if not key.startswith(self.prefix):
            return None
        try:
            data = json.loads(value)
        except ValueError as e:
            raise LruReconstructionError(f"Value for {key!r} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise LruReconstructionError(f"Value for {key!r} is not a JSON object.")

        for field in self.fields:
            found = data.get(field)
            if found:
                return found
        return self.default


def as_reconstructor(
    obj: Reconstructor | Callable[[str, str], Any | None] | None,
) -> Reconstructor | None:
    """Normalize the `reconstructor` argument accepted by `LruIndex`."""

    if obj is None or isinstance(obj, Reconstructor):
        return obj
    if callable(obj):
        return FunctionReconstructor(obj)
    raise TypeError(f"Expected a Reconstructor or callable, got {type(obj).__name__}.")
