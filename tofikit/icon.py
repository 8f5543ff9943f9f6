"""Glyph icons shown next to entries, with per-glyph position and colour tweaks."""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass

from tofikit.color import Color

log = logging.getLogger(__name__)

# Glyph, horizontal adjustment (None keeps the current one), vertical adjustment, colour.
_GLYPH_RULES: tuple[tuple[str, int | None, int, str], ...] = (
    ("", 2, -3, "#E66000"),
    ("", 2, -3, "#8000d7"),
    ("󱋧", 4, 5, "#7d5bed"),
    ("󱉟", 0, 5, "#5fff5f"),
    ("󰇧", -1, 6, "#1e89c6"),
    ("", 3, -2, "#c0c81f"),
    ("󱇤", 0, 5, "#e2a464"),
    ("󰴸", 0, 6, "#729fcf"),
    ("󰌨", 0, 6, "#a4aad2"),
    ("󱙿", 2, 5, "#deada7"),
    ("󰞇", -2, 5, "#fe1607"),
    ("󱁊", -3, 5, "#FFFFFF"),
    ("󱟛", None, 5, "#FFFFFF"),
)

# Application names replaced by a glyph: replacement text, vertical adjustment, colour.
_NAMED_RULES: dict[str, tuple[str, int, str]] = {
    "qbittorrent": ("󰱦 ", 5, "#4E8AD5"),
    "vlc": ("󰕼 ", 5, "#DF6300"),
}


def _normalize(text: str) -> str:
    return unicodedata.normalize("NFD", text)


@dataclass
class Icon:
    text: str = ""
    color: Color | None = None
    adjust_x: int = 0
    adjust_y: int = 0

    @classmethod
    def from_text(cls, text: str | None) -> Icon:
        """Create an icon from glyph or application name text and apply its rules."""
        icon = cls(text=_normalize(text or ""))
        icon.adjust()
        return icon

    def adjust(self) -> None:
        """Apply the offset and colour rules known for this icon's text."""
        for glyph, adjust_x, adjust_y, color in _GLYPH_RULES:
            if self.text == glyph:
                if adjust_x is not None:
                    self.adjust_x = adjust_x
                self.adjust_y = adjust_y
                self.color = Color.from_hex(color)
                return
        named = _NAMED_RULES.get(self.text)
        if named is not None:
            replacement, adjust_y, color = named
            self.text = _normalize(replacement)
            self.adjust_y = adjust_y
            self.color = Color.from_hex(color)
            return
        log.debug("Could not find rules for icon %s", self.text)