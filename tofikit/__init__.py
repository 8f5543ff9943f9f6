"""Building blocks for a dmenu-style application launcher: theming, matching, history and application discovery."""

__version__ = "0.1.0"