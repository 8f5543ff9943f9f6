import os
import time

import pytest

from tofikit.compgen import cache_path, compgen, compgen_cached, compgen_history_sort
from tofikit.entry import Entry, ScoredEntry
from tofikit.history import History, Program


def _make_file(path, executable=True):
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755 if executable else 0o644)


@pytest.fixture
def bin_dirs(tmp_path, monkeypatch):
    first = tmp_path / "bin1"
    second = tmp_path / "bin2"
    first.mkdir()
    second.mkdir()
    _make_file(first / "zeta")
    _make_file(first / "alpha")
    _make_file(first / "notexec", executable=False)
    (first / "subdir").mkdir()
    (first / "subdir").chmod(0o755)
    _make_file(second / "alpha")
    _make_file(second / "beta")
    monkeypatch.setenv("PATH", f"{first}:{second}:{tmp_path / 'missing'}")
    return first, second


def test_compgen_lists_sorted_unique_executables(bin_dirs):
    assert compgen() == "alpha\nbeta\nzeta\n"


def test_compgen_empty_path_dirs(tmp_path, monkeypatch):
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    assert compgen() == ""


def test_compgen_without_path_raises(monkeypatch):
    monkeypatch.delenv("PATH", raising=False)
    with pytest.raises(RuntimeError):
        compgen()


def test_cache_path_prefers_xdg_cache_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert cache_path() == tmp_path / "tofi-compgen"


def test_cache_path_falls_back_to_home(tmp_path, monkeypatch):
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert cache_path() == tmp_path / ".cache" / "tofi-compgen"


def test_cache_path_without_home(monkeypatch):
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    assert cache_path() is None


def test_compgen_cached_creates_cache(bin_dirs, tmp_path, monkeypatch):
    cache_dir = tmp_path / "cache" / "nested"
    monkeypatch.setenv("XDG_CACHE_HOME", str(cache_dir))
    result = compgen_cached()
    assert result == compgen()
    assert (cache_dir / "tofi-compgen").read_text() == result


def test_compgen_cached_uses_fresh_cache(bin_dirs, tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    cache = tmp_path / "tofi-compgen"
    cache.write_text("cached\n")
    future = time.time() + 100000
    os.utime(cache, (future, future))
    assert compgen_cached() == "cached\n"


def test_compgen_cached_refreshes_stale_cache(bin_dirs, tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    cache = tmp_path / "tofi-compgen"
    cache.write_text("stale\n")
    os.utime(cache, (1000, 1000))
    result = compgen_cached()
    assert result == compgen()
    assert cache.read_text() == result


def _programs(*names):
    return [ScoredEntry(Entry(name)) for name in names]


def test_history_sort_moves_known_programs_first():
    programs = _programs("a", "b", "c", "d")
    history = History([Program("c", 2), Program("a", 5), Program("zz", 1)])
    result = compgen_history_sort(programs, history)
    assert [scored.entry.name for scored in result] == ["a", "c", "b", "d"]
    assert [scored.history_score for scored in result] == [5, 2, 0, 0]


def test_history_sort_keeps_all_programs():
    programs = _programs("a", "b", "c", "d", "e")
    history = History([Program("d", 1), Program("b", 1)])
    result = compgen_history_sort(programs, history)
    assert sorted(scored.entry.name for scored in result) == ["a", "b", "c", "d", "e"]
    assert {scored.entry.name for scored in result[:2]} == {"b", "d"}
    assert [scored.entry.name for scored in result[2:]] == ["a", "c", "e"]


def test_history_sort_empty_history_keeps_order():
    programs = _programs("a", "b")
    result = compgen_history_sort(programs, History())
    assert [scored.entry.name for scored in result] == ["a", "b"]