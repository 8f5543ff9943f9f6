# tofikit

A pure-Python library with the pieces an application launcher in the style of
dmenu needs: theming, matching, ranking, run history and finding what there is
to launch.

## Modules

- `tofikit.color`: `Color` holds red, green, blue and alpha in the range 0 to
  1. `hex_to_color` (also `Color.from_hex`) parses `#RGB`, `#RGBA`, `#RRGGBB`
  and `#RRGGBBAA`, with or without the `#`, and raises `ValueError` on
  anything else. `Color.mix(other, perc)` blends towards `other`.
- `tofikit.css`: a small CSS-like theme language. `parse` turns stylesheet
  text into a `Stylesheet` of `Rule`s. `Stylesheet.select(query)` merges the
  attributes of every rule whose element and pseudo-element match the query
  (later rules win) into one `Rule`. A `Rule` answers `get_color`, `get_str`,
  `get_int` (0 when absent, `em` values times 24, `anchor` values as `Anchor`
  flags), `get_shape` (a `Shape`) and `get_padding` (a `Directional`). The
  shorthands `padding`, `border`, `outline` and `caret` are expanded when
  parsed. Failures raise `CssError`. `DEFAULT_CSS` is a ready-made theme.
- `tofikit.fuzzy_match`: `fuzzy_match`, `fuzzy_match_words` and
  `fuzzy_match_simple_words` score a typed pattern against a string,
  case-insensitively; higher is better and `None` means no match.
- `tofikit.history`: `History` keeps `Program` run counts, most run first.
  `History.load`/`save` read and write a file of `count name` lines;
  `load_default`/`save_default` use `default_path`, under `$XDG_STATE_HOME`
  or `~/.local/state`.
- `tofikit.icon`: `Icon.from_text` makes a glyph icon and applies the known
  per-glyph offsets and colours.
- `tofikit.lock`: `lock_check` takes an exclusive lock on a file (by default
  `lock_path()`, under `$XDG_RUNTIME_DIR`, `$XDG_CACHE_HOME` or `~/.cache`)
  and returns whether another process already holds it. The lock is kept
  until the process exits. It relies on `fcntl`, so it works on POSIX systems
  only.
- `tofikit.entry`: `Entry` and `ScoredEntry`; `filter_entries` keeps and
  ranks entries matching a search, `history_sort` ranks them by run count,
  and `find_sorted` looks one up by name.
- `tofikit.desktop_vec`: `DesktopList` of `DesktopEntry` applications read
  from `.desktop` files (`add_file` honours `Hidden`, `NoDisplay`,
  `OnlyShowIn` and `NotShowIn`), with `sort`, `find_sorted` and `filter`,
  which matches names and, failing that, keywords.
- `tofikit.compgen`: `compgen` lists every executable on `$PATH`, sorted and
  unique, one per line; `compgen_cached` keeps that list in a cache file and
  rebuilds it when a `$PATH` directory is newer. `compgen_history_sort` moves
  programs found in the history to the front.
- `tofikit.drun`: `drun_generate` finds the applications in the XDG data
  directories, keeping only the highest-precedence file for each desktop ID.
  `command_line` builds a desktop file's command line with the `%i`, `%c` and
  `%k` field codes expanded (and the terminal command in front for terminal
  applications); `drun_print` prints it. `drun_history_sort` ranks
  applications by run count.

Messages are reported through the standard `logging` module.

## Installing

```
pip install .
```

Python 3.10 or newer is required. The package has no third-party
dependencies.

## Example

```python
from tofikit.css import parse
from tofikit.fuzzy_match import fuzzy_match_words
from tofikit.history import History

sheet = parse("""
  window { width: 640px; background-color: #303030; anchor: center; }
  entry { color: #767676; }
  entry.selected { color: #FFFFFF; }
""")
window = sheet.select("window")
print(window.get_int("width"), window.get_color("background-color"))

print(fuzzy_match_words("fi fox", "firefox"))

history = History.load_default(False)
history.add("firefox")
history.save_default(False)
```

## What it does not do

This is a library, not a launcher. It has no command to run, draws no window,
renders no text and handles no keyboard input or clipboard. It does not start
applications: `drun` only builds and prints their command lines. There is no
function that turns the text from `compgen` into entries; splitting it into
lines is left to the caller.

## Running the tests

```
pip install .[test]
pytest
```