import pytest

from tofikit.desktop_vec import DesktopList
from tofikit.drun import (
    application_paths,
    command_line,
    drun_generate,
    drun_history_sort,
    drun_print,
)
from tofikit.history import History, Program


@pytest.fixture(autouse=True)
def plain_locale(monkeypatch):
    for var in ("LANGUAGE", "LC_ALL", "LC_MESSAGES"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LANG", "C")
    monkeypatch.delenv("XDG_CURRENT_DESKTOP", raising=False)


def _desktop(path, **keys):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["[Desktop Entry]"] + [f"{key}={value}" for key, value in keys.items()]
    path.write_text("\n".join(lines) + "\n")
    return path


def test_application_paths_from_xdg(monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", "/h")
    monkeypatch.setenv("XDG_DATA_DIRS", "/a:/b")
    assert application_paths() == ["/h/applications/", "/a/applications/", "/b/applications/"]


def test_application_paths_defaults(monkeypatch):
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.delenv("XDG_DATA_DIRS", raising=False)
    monkeypatch.setenv("HOME", "/home/u")
    assert application_paths() == [
        "/home/u/.local/share//applications/",
        "/usr/local/share//applications/",
        "/usr/share//applications/",
    ]


def test_application_paths_without_home(monkeypatch):
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    with pytest.raises(RuntimeError):
        application_paths()


def test_drun_generate_respects_precedence(tmp_path, monkeypatch):
    home = tmp_path / "home"
    system = tmp_path / "sys"
    _desktop(home / "applications" / "foo.desktop", Name="Foo Home", Exec="foo")
    _desktop(system / "applications" / "foo.desktop", Name="Foo System", Exec="foo")
    _desktop(home / "applications" / "sub" / "bar.desktop", Name="Bar", Exec="bar")
    _desktop(system / "applications" / "hidden.desktop", Name="Hidden", NoDisplay="true")
    (system / "applications" / "readme.txt").write_text("not a desktop file")
    monkeypatch.setenv("XDG_DATA_HOME", str(home))
    monkeypatch.setenv("XDG_DATA_DIRS", str(system))

    apps = drun_generate()
    assert [app.name for app in apps] == ["Bar", "Foo Home"]
    assert {app.id for app in apps} == {"sub-bar.desktop", "foo.desktop"}


def test_drun_generate_no_directories(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "none"))
    monkeypatch.setenv("XDG_DATA_DIRS", str(tmp_path / "also-none"))
    assert len(drun_generate()) == 0


def test_command_line_expands_field_codes(tmp_path):
    path = _desktop(tmp_path / "app.desktop", Name="Foo", Icon="ic", Exec="foo %U --name %c %k %i")
    assert command_line(str(path), "") == f"foo  --name Foo {path} --icon ic"


def test_command_line_icon_code_without_icon(tmp_path):
    path = _desktop(tmp_path / "app.desktop", Name="Foo", Exec="foo %i")
    assert command_line(str(path), "") == "foo "


def test_command_line_terminal_prefix(tmp_path):
    path = _desktop(tmp_path / "app.desktop", Name="Foo", Exec="foo", Terminal="true")
    assert command_line(str(path), "kitty -e") == "kitty -e foo"
    assert command_line(str(path), "") == "foo"


def test_command_line_without_exec(tmp_path):
    path = _desktop(tmp_path / "app.desktop", Name="Foo")
    with pytest.raises(ValueError):
        command_line(str(path), "")


def test_drun_print_writes_line(tmp_path, capsys):
    path = _desktop(tmp_path / "app.desktop", Name="Foo", Exec="foo --bar")
    drun_print(str(path), "")
    assert capsys.readouterr().out == "foo --bar\n"


def test_drun_print_missing_file_prints_nothing(tmp_path, capsys):
    drun_print(str(tmp_path / "missing.desktop"), "")
    assert capsys.readouterr().out == ""


def test_drun_history_sort():
    apps = DesktopList()
    for name in ("c", "a", "b"):
        apps.add(f"{name}.desktop", name, None, f"/{name}.desktop", "")
    apps.sort()
    drun_history_sort(apps, History([Program("b", 3), Program("nothere", 9)]))
    assert apps[0].name == "b"
    assert apps[0].history_score == 3
    assert sorted(app.name for app in apps) == ["a", "b", "c"]
    assert [app.history_score for app in apps[1:3]] == [0, 0]