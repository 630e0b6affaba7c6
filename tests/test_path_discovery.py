import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from path_discovery import SearchPath, discover


def _make_location(base: Path, folders, files=()):
    base.mkdir(parents=True, exist_ok=True)
    for name in folders:
        (base / name).mkdir()
    for name in files:
        (base / name).write_text("x = 1\n", encoding="utf-8")
    return base


def test_discover_lists_subfolders_only(tmp_path):
    loc = _make_location(tmp_path / "plugins", ["b_tools", "a_lib"], ["loose.py", "readme.txt"])
    folders = discover([str(loc)])
    assert folders == [str(loc / "a_lib"), str(loc / "b_tools")]
    assert all(os.path.isabs(p) for p in folders)


def test_discover_deduplicates_across_locations(tmp_path):
    loc = _make_location(tmp_path / "plugins", ["one", "two"])
    search_path = SearchPath()
    folders = discover([str(loc), str(loc), str(loc / ".." / "plugins")], search_path)
    assert folders == [str(loc / "one"), str(loc / "two")]
    assert len(folders) == len(set(folders))
    assert list(search_path) == folders


def test_discover_preserves_location_order(tmp_path):
    first = _make_location(tmp_path / "z_first", ["zz"])
    second = _make_location(tmp_path / "a_second", ["aa"])
    assert discover([str(first), str(second)]) == [str(first / "zz"), str(second / "aa")]


def test_discover_skips_folders_already_on_search_path(tmp_path):
    loc = _make_location(tmp_path / "plugins", ["known", "fresh"])
    search_path = SearchPath([str(loc / "known")])
    assert discover([str(loc)], search_path) == [str(loc / "fresh")]
    assert str(loc / "known") in search_path


def test_missing_location_is_skipped(tmp_path, caplog):
    loc = _make_location(tmp_path / "plugins", ["ok"])
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="path_discovery"):
        folders = discover([str(tmp_path / "missing"), str(not_a_dir), str(loc)])
    assert folders == [str(loc / "ok")]
    assert "missing" in caplog.text
    assert "file.txt" in caplog.text


def test_search_path_activation_is_temporary(tmp_path):
    folder = tmp_path / "lib"
    folder.mkdir()
    search_path = SearchPath([str(folder), str(folder)])
    assert len(search_path) == 1
    with search_path.activated():
        assert str(folder) in sys.path
    assert str(folder) not in sys.path
    search_path.install()
    assert str(folder) in sys.path


def test_search_path_resolve_returns_first_match(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    for folder in (first, second):
        (folder / "core").mkdir(parents=True)
        (folder / "core" / "lib.py").write_text("", encoding="utf-8")
    search_path = SearchPath([str(first), str(second)])
    assert search_path.resolve(os.path.join("core", "lib.py")) == str(first / "core" / "lib.py")
    assert search_path.resolve("nothing.py") is None
