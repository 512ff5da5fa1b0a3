"""Project configuration loading for lruindex.

This module is intentionally small and deterministic: it only reads
`lruindex.toml` and performs light validation.
"""

from __future__ import annotations

import tomllib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lruindex.errors import LruConfigError
from lruindex.index import LruIndex
from lruindex.reconstruct import Reconstructor
from lruindex.store import JsonFileStore

CONFIG_FILENAME = "lruindex.toml"


@dataclass(frozen=True)
class IndexConfig:
    namespace: str
    limit: int


@dataclass(frozen=True)
class StoreConfig:
    path: Path


@dataclass(frozen=True)
class LruIndexConfig:
    version: int
    index: IndexConfig
    store: StoreConfig


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `lruindex.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise LruConfigError(f"Could not find {CONFIG_FILENAME} by walking upward from start path.")


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LruConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise LruConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise LruConfigError(f"Expected {name} to be a string.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> LruIndexConfig:
    """Load and validate `lruindex.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory. A
    relative `store.path` is resolved against the root.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME
    else:
        if root is None:
            root = config_path.parent

    assert root is not None

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise LruConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise LruConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise LruConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise LruConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise LruConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise LruConfigError(f"Unsupported config version: {version_i} (expected 1).")

    index_tbl = _as_table(data.get("index"), name="index")
    store_tbl = _as_table(data.get("store"), name="store")

    if "namespace" not in index_tbl:
        raise LruConfigError("Missing required index.namespace.")
    namespace = _as_str(index_tbl["namespace"], name="index.namespace")

    if "limit" in index_tbl:
        limit = _as_int(index_tbl["limit"], name="index.limit")
    else:
        limit = 100

    if "path" in store_tbl:
        store_path = Path(_as_str(store_tbl["path"], name="store.path"))
    else:
        store_path = Path(".lruindex.json")

    # Validation
    if not namespace:
        raise LruConfigError("Invalid config: index.namespace must not be empty.")

    if limit < 1:
        raise LruConfigError("Invalid config: index.limit must be >= 1.")

    if not store_path.is_absolute():
        store_path = root / store_path

    return LruIndexConfig(
        version=version_i,
        index=IndexConfig(namespace=namespace, limit=limit),
        store=StoreConfig(path=store_path),
    )


def open_index(
    config: LruIndexConfig,
    reconstructor: Reconstructor | Callable[[str, str], Any | None] | None = None,
) -> LruIndex:
    """Build an `LruIndex` over the `JsonFileStore` named by `config`."""

    return LruIndex(
        JsonFileStore(config.store.path),
        config.index.namespace,
        config.index.limit,
        reconstructor,
    )
