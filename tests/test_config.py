from __future__ import annotations

from pathlib import Path

import pytest

from lruindex.config import find_project_root, load_config, open_index
from lruindex.errors import LruConfigError
from lruindex.reconstruct import PrefixReconstructor
from lruindex.store import JsonFileStore


def _write(tmp_path: Path, lines: list[str]) -> None:
    (tmp_path / "lruindex.toml").write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_load_minimal_config_defaults_apply(tmp_path: Path) -> None:
    _write(tmp_path, ["version = 1", "", "[index]", 'namespace = "d"'])
    cfg = load_config(root=tmp_path)

    assert cfg.version == 1
    assert cfg.index.namespace == "d"
    assert cfg.index.limit == 100
    assert cfg.store.path == tmp_path / ".lruindex.json"


def test_load_config_overrides_work(tmp_path: Path) -> None:
    _write(
        tmp_path,
        [
            "version = 1",
            "",
            "[index]",
            'namespace = "exercise"',
            "limit = 8",
            "",
            "[store]",
            'path = "data/store.json"',
        ],
    )
    cfg = load_config(root=tmp_path)
    assert cfg.index.limit == 8
    assert cfg.store.path == tmp_path / "data" / "store.json"


def test_absolute_store_path_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere" / "s.json"
    _write(
        tmp_path,
        ["version = 1", "[index]", 'namespace = "d"', "[store]", f'path = "{target.as_posix()}"'],
    )
    assert load_config(root=tmp_path).store.path == target


def test_config_path_implies_root(tmp_path: Path) -> None:
    _write(tmp_path, ["version = 1", "[index]", 'namespace = "d"'])
    cfg = load_config(config_path=tmp_path / "lruindex.toml")
    assert cfg.store.path == tmp_path / ".lruindex.json"


@pytest.mark.parametrize(
    "lines",
    [
        ["version = "],
        ['[index]', 'namespace = "d"'],
        ["version = 2", "[index]", 'namespace = "d"'],
        ["version = 1"],
        ["version = 1", "[index]", 'namespace = ""'],
        ["version = 1", "[index]", "namespace = 3"],
        ["version = 1", "[index]", 'namespace = "d"', "limit = 0"],
        ["version = 1", "[index]", 'namespace = "d"', "limit = true"],
        ["version = 1", 'index = "d"'],
        ["version = 1", "[index]", 'namespace = "d"', "[store]", "path = 1"],
    ],
)
def test_invalid_config_raises(tmp_path: Path, lines: list[str]) -> None:
    _write(tmp_path, lines)
    with pytest.raises(LruConfigError):
        load_config(root=tmp_path)


def test_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(LruConfigError):
        load_config(config_path=tmp_path / "lruindex.toml")


def test_find_project_root_success(tmp_path: Path) -> None:
    _write(tmp_path, ["version = 1"])
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)

    assert find_project_root(deep) == tmp_path.resolve()
    some_file = deep / "x.py"
    some_file.write_text("x=1\n", encoding="utf-8")
    assert find_project_root(some_file) == tmp_path.resolve()


def test_find_project_root_failure(tmp_path: Path) -> None:
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)
    with pytest.raises(LruConfigError) as ei:
        find_project_root(deep)
    assert "lruindex.toml" in str(ei.value)


def test_open_index_uses_file_store_and_survives_reopen(tmp_path: Path) -> None:
    _write(tmp_path, ["version = 1", "[index]", 'namespace = "a"', "limit = 2"])
    cfg = load_config(root=tmp_path)

    lru = open_index(cfg)
    assert isinstance(lru.store, JsonFileStore)
    for i in range(3):
        lru.set(f"a_{i}", str(i))

    again = open_index(cfg, PrefixReconstructor("a_", sort_key=int))
    assert again.ordering() == ["a_1", "a_2"]
    assert again.get("a_0") is None
    assert again.get("a_1") == "1"
    assert again.ordering() == ["a_2", "a_1"]
