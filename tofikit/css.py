"""A small CSS-like stylesheet parser used for theming."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag, auto

from tofikit.color import Color, hex_to_color

_WS = " \t\n\v\f\r"
_DELIMITERS = ".:"
_MAX_CLASSES = 9
_EM_SIZE = 24
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

DEFAULT_CSS = """
  window {
    width: 1280px;
    height: 720px;
    scale: 1;
    font-family: "jetbrains mono";
    font-size: 24px;
    anchor: center;
    background-color: #303030;
  }

  body {
    padding: 8px;
    border: 12px #767676;
    outline: 4px #262626;
    background-color: #303030;
  }

  input {
    color: #FFFFFF;
    caret: #FFFFFF block;
  }

  input::before {
    content: "run: ";
    color: #FFFFFF;
    font-weight: bold;
  }

  input::placeholder {
    color: #767676;
    content: "";
    font-style: italic;
  }

  entry::before {
    content: "";
    color: #767676;
    margin-right: 1em;
  }

  entry.firefox::before {
    content: "";
    color: #E66000;
    padding-top: 2;
    padding-right: 3;
  }

  entry {
    color: #767676;
  }

  entry.selected {
    color: #FFFFFF;
  }

  entry.disabled {
    color: #767676;
    font-style: italic;
  }

  entry.selected.disabled {
    color: #303030;
    background-color: #767676;
  }
"""

USE_HISTORY = True
REQUIRE_MATCH = True
FUZZY_MATCH = True
MULTIPLE_INSTANCE = False
EXCLUSIVE_ZONE = -1


class CssError(ValueError):
    """Raised for malformed stylesheets and failed attribute lookups."""


class Unit(Enum):
    EM = auto()
    PX = auto()
    HEX_COLOR = auto()
    TEXT = auto()
    LITERAL = auto()
    INT = auto()
    PERCENT = auto()
    SHAPE = auto()


class Shape(IntEnum):
    BAR = 0
    BLOCK = 1
    UNDERSCORE = 2


class Anchor(IntFlag):
    """Layer-surface anchor edges."""

    TOP = 1
    BOTTOM = 2
    LEFT = 4
    RIGHT = 8


_ANCHORS = {
    "center": Anchor.TOP | Anchor.BOTTOM | Anchor.LEFT | Anchor.RIGHT,
    "top": Anchor.TOP | Anchor.LEFT | Anchor.RIGHT,
    "left": Anchor.LEFT | Anchor.TOP | Anchor.BOTTOM,
    "top-left": Anchor.TOP | Anchor.LEFT,
    "right": Anchor.RIGHT | Anchor.TOP | Anchor.BOTTOM,
    "top-right": Anchor.TOP | Anchor.RIGHT,
    "bottom": Anchor.BOTTOM | Anchor.LEFT | Anchor.RIGHT,
    "bottom-left": Anchor.BOTTOM | Anchor.LEFT,
    "bottom-right": Anchor.BOTTOM | Anchor.RIGHT,
}


@dataclass(frozen=True)
class Directional:
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


def _same(a: str | None, b: str | None) -> bool:
    """Compare names, treating a missing name and an empty one as equal."""
    return (a or "") == (b or "")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _name_end(text: str) -> int:
    """Length of the name at the start of ``text``, up to the next '.' or ':'."""
    for index, ch in enumerate(text[1:], 1):
        if ch in _DELIMITERS:
            return index
    return len(text)


def _segments(text: str, marker: str, limit: int | None = None) -> tuple[str, ...]:
    found: list[str] = []
    pos = 0
    while (index := text.find(marker, pos)) >= 0:
        rest = text[index + 1:]
        if rest.startswith(":"):
            break
        end = _name_end(rest)
        found.append(rest[:end])
        if limit is not None and len(found) >= limit:
            raise CssError(f"too many classes in selector {text!r}")
        pos = index + 1 + end
    return tuple(found)


@dataclass(frozen=True)
class Selector:
    text: str
    element: str
    pseudo_element: str | None = None
    classes: tuple[str, ...] = ()
    pseudo_classes: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Selector:
        """Split a selector such as ``entry.selected::before`` into its parts."""
        element = text[:_name_end(text)]

        pseudo_element = None
        colon = text.find(":")
        if colon >= 0 and text[colon + 1:colon + 2] == ":":
            rest = text[colon + 2:]
            pseudo_element = rest[:_name_end(rest)]

        return cls(
            text=text,
            element=element,
            pseudo_element=pseudo_element,
            classes=_segments(text, ".", _MAX_CLASSES),
            pseudo_classes=_segments(text, ":"),
        )

    def matches(self, query: Selector) -> bool:
        """Whether a rule with this selector applies to ``query``.

        Only the element and pseudo-element take part; classes are ignored.
        """
        if not _same(self.element, query.element):
            return False
        if self.pseudo_element and not _same(self.pseudo_element, query.pseudo_element):
            return False
        return True


@dataclass(frozen=True)
class Attr:
    name: str
    value: str
    unit: Unit


def _classify(name: str, value: str) -> Attr:
    if value.endswith("px"):
        return Attr(name, value[:-2], Unit.PX)
    if value.endswith("em"):
        return Attr(name, value[:-2], Unit.EM)
    if name.endswith("-shape"):
        return Attr(name, value, Unit.SHAPE)
    if value.startswith("#"):
        return Attr(name, value, Unit.HEX_COLOR)
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return Attr(name, value[1:-1], Unit.TEXT)
    if value[:1] and value[0] in "-+0123456789":
        return Attr(name, value, Unit.INT)
    if value.startswith("%"):
        return Attr(name, value, Unit.PERCENT)
    if value[:1] and value[0] in "abcdefghijklmnopqrstuvwxyz":
        return Attr(name, value, Unit.LITERAL)
    raise CssError(f"could not recognise type of value {value!r}")


@dataclass
class Rule:
    selector: Selector
    attrs: list[Attr] = field(default_factory=list)

    def find(self, name: str) -> Attr | None:
        """The first attribute with this name, or None."""
        return next((attr for attr in self.attrs if _same(attr.name, name)), None)

    def apply(self, attr: Attr) -> None:
        """Override the attribute of the same name, or append it."""
        for index, existing in enumerate(self.attrs):
            if existing.name == attr.name:
                self.attrs[index] = attr
                return
        self.attrs.append(attr)

    def _require(self, name: str) -> Attr:
        attr = self.find(name)
        if attr is None:
            raise CssError(f"rule {self.selector.text!r} has no attribute {name!r}")
        return attr

    def get_color(self, name: str) -> Color:
        attr = self._require(name)
        if attr.unit is not Unit.HEX_COLOR:
            raise CssError(f"cannot convert {attr.unit.name} to colour ({attr.name}: {attr.value})")
        try:
            return hex_to_color(attr.value)
        except ValueError as exc:
            raise CssError(str(exc)) from exc

    def get_str(self, name: str) -> str:
        return self._require(name).value

    def get_int(self, name: str) -> int:
        """Integer value of an attribute; 0 if absent, anchors as edge flags."""
        attr = self.find(name)
        if attr is None:
            return 0
        if attr.unit is Unit.LITERAL and _same(attr.name, "anchor"):
            try:
                return _ANCHORS[attr.value]
            except KeyError:
                raise CssError(f"unknown value for anchor {attr.value!r}") from None
        value = _atoi(attr.value)
        if attr.unit is Unit.EM:
            value *= _EM_SIZE
        return value

    def get_shape(self, name: str) -> Shape:
        attr = self._require(name)
        if attr.unit is not Unit.SHAPE:
            raise CssError(f"cannot convert {attr.unit.name} to shape ({attr.name}: {attr.value})")
        try:
            return Shape[attr.value.upper()]
        except KeyError:
            pass
        try:
            return Shape(_atoi(attr.value))
        except ValueError:
            raise CssError(f"unknown shape {attr.value!r}") from None

    def get_padding(self) -> Directional:
        return Directional(
            top=self.get_int("padding-top"),
            right=self.get_int("padding-right"),
            bottom=self.get_int("padding-bottom"),
            left=self.get_int("padding-left"),
        )

    def _add(self, name: str, value: str) -> None:
        self.attrs.append(_classify(name, value))

    def _add_declaration(self, name: str, value: str) -> None:
        if name == "padding":
            for side in ("left", "bottom", "top", "right"):
                self._add(f"padding-{side}", value)
        elif name == "caret":
            color, sep, shape = value.partition(" ")
            if not sep:
                raise CssError(f"caret needs a colour and a shape: {value!r}")
            self._add(f"{name}-color", color)
            self._add(f"{name}-shape", shape)
        elif name in ("border", "outline"):
            width, sep, color = value.partition(" ")
            if not sep:
                raise CssError(f"{name} needs a width and a colour: {value!r}")
            self._add(f"{name}-color", color)
            self._add(f"{name}-width", width)
        else:
            self._add(name, value)


@dataclass
class Stylesheet:
    rules: list[Rule] = field(default_factory=list)

    def select(self, query: str) -> Rule:
        """Merge the attributes of every rule matching ``query``, later rules winning."""
        merged = Rule(Selector.parse(query))
        for rule in self.rules:
            if rule.selector.matches(merged.selector):
                for attr in rule.attrs:
                    merged.apply(attr)
        return merged


def _parse_rule(block: str) -> Rule:
    brace = block.find("{")
    if brace < 0:
        raise CssError(f"rule without '{{': {block.strip(_WS)!r}")
    rule = Rule(Selector.parse(block[:brace].strip(_WS)))
    # Text after the last ';' is not a complete declaration and is ignored.
    for declaration in block[brace + 1:].split(";")[:-1]:
        declaration = declaration.strip(_WS)
        if not declaration:
            continue
        name, sep, value = declaration.partition(":")
        if not sep:
            raise CssError(f"declaration without ':': {declaration!r}")
        rule._add_declaration(name.strip(_WS), value.strip(_WS))
    return rule


def parse(data: str) -> Stylesheet:
    """Parse stylesheet text into rules, stopping at the first non-rule."""
    rules: list[Rule] = []
    pos = 0
    while (end := data.find("}", pos)) > pos:
        rules.append(_parse_rule(data[pos:end]))
        pos = end + 1
    return Stylesheet(rules)