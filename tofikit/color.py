"""RGBA colours and hex colour parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Leading whitespace, an optional sign and an optional 0x prefix are accepted,
# just as a base-16 integer conversion in C would accept them.
_HEX_NUMBER = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")


@dataclass(frozen=True)
class Color:
    """A colour with red, green, blue and alpha channels in the range 0 to 1."""

    r: float
    g: float
    b: float
    a: float

    @classmethod
    def from_hex(cls, hex_string: str) -> Color:
        """Parse ``#RGB``, ``#RGBA``, ``#RRGGBB`` or ``#RRGGBBAA`` (``#`` optional)."""
        return hex_to_color(hex_string)

    def mix(self, other: Color, perc: float) -> Color:
        """Blend towards ``other``: 0 gives this colour, 1 gives ``other``."""
        keep = 1 - perc
        return Color(
            r=self.r * keep + other.r * perc,
            g=self.g * keep + other.g * perc,
            b=self.b * keep + other.b * perc,
            a=self.a * keep + other.a * perc,
        )


def _parse_hex_number(digits: str, original: str) -> int:
    match = _HEX_NUMBER.fullmatch(digits)
    if match is None:
        raise ValueError(f"invalid hex colour {original!r}")
    value = int(match.group(2), 16)
    if match.group(1) == "-" and value:
        raise ValueError(f"invalid hex colour {original!r}")
    return value


def hex_to_color(hex_string: str) -> Color:
    """Parse a hex colour string, raising ValueError if it is malformed."""
    text = hex_string[1:] if hex_string.startswith("#") else hex_string
    length = len(text)
    if length in (3, 4):
        digits = "".join(ch * 2 for ch in text)
    elif length in (6, 8):
        digits = text
    else:
        raise ValueError(f"invalid hex colour {hex_string!r}")

    value = _parse_hex_number(digits, hex_string)
    if length in (3, 6):
        value = (value << 8) | 0xFF
    value &= 0xFFFFFFFF

    return Color(
        r=((value >> 24) & 0xFF) / 255.0,
        g=((value >> 16) & 0xFF) / 255.0,
        b=((value >> 8) & 0xFF) / 255.0,
        a=(value & 0xFF) / 255.0,
    )