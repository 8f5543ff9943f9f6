import os
from pathlib import Path

import pytest

from tofikit.history import MAX_HISTFILE_SIZE, History, Program, default_path


def names(history):
    return [p.name for p in history]


def test_add_new_programs_appends_with_count_one():
    history = History()
    history.add("foo")
    history.add("bar")
    assert history.programs == [Program("foo", 1), Program("bar", 1)]


def test_add_existing_moves_up():
    history = History()
    history.add("foo")
    history.add("bar")
    history.add("bar")
    assert names(history) == ["bar", "foo"]
    assert history.programs[0].run_count == 2


def test_remove():
    history = History([Program("a", 3), Program("b", 2), Program("c", 1)])
    history.remove("b")
    assert names(history) == ["a", "c"]
    history.remove("missing")
    assert len(history) == 2


def test_save_and_load_round_trip(tmp_path):
    history = History()
    for name in ["foo", "bar baz", "bar baz", "qux"]:
        history.add(name)
    path = tmp_path / "nested" / "dir" / "history"
    history.save(path)
    assert History.load(path) == history


def test_save_format_and_permissions(tmp_path):
    path = tmp_path / "history"
    History([Program("firefox", 2), Program("foot", 1)]).save(path)
    assert path.read_text() == "2 firefox\n1 foot\n"
    assert path.stat().st_mode & 0o777 == 0o600


def test_save_overwrites_longer_file(tmp_path):
    path = tmp_path / "history"
    History([Program("a-long-name", 5), Program("b", 1)]).save(path)
    History([Program("c", 1)]).save(path)
    assert names(History.load(path)) == ["c"]


def test_load_names_with_spaces(tmp_path):
    path = tmp_path / "history"
    path.write_text("5 my program --flag\n3 other\n")
    history = History.load(path)
    assert history.programs == [Program("my program --flag", 5), Program("other", 3)]


def test_load_missing_file_is_empty(tmp_path):
    assert len(History.load(tmp_path / "absent")) == 0


def test_load_ignores_trailing_count_without_name(tmp_path):
    path = tmp_path / "history"
    path.write_text("2 foo\n7")
    assert History.load(path).programs == [Program("foo", 2)]


def test_load_too_large_file_is_empty(tmp_path):
    path = tmp_path / "history"
    with open(path, "wb") as f:
        f.write(b"1 foo\n")
        f.truncate(MAX_HISTFILE_SIZE + 1)
    assert len(History.load(path)) == 0


def test_default_path_uses_state_home(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    assert default_path(False) == tmp_path / "tofi-history"
    assert default_path(True) == tmp_path / "tofi-drun-history"


def test_default_path_falls_back_to_home(monkeypatch, tmp_path):
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_path(False) == tmp_path / ".local" / "state" / "tofi-history"


def test_default_path_without_home(monkeypatch):
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    assert default_path(True) is None


def test_save_and_load_default(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    history = History([Program("app", 4)])
    history.save_default(True)
    assert History.load_default(True) == history
    assert len(History.load_default(False)) == 0


def test_default_without_home_is_empty(monkeypatch):
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    history = History.load_default(False)
    history.save_default(False)
    assert len(history) == 0