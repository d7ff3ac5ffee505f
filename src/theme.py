"""Color & style helpers.

Decisions:
- Priority drives the badge color; completed rows use the done color.
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides (TODO_PRIMARY, TODO_HIGH, ...) come from config.
"""
from __future__ import annotations
import os
import sys
from typing import Dict, Mapping, Optional, TextIO, Tuple

from models import Priority

ON_VALUES = {"1", "true", "yes", "on"}


def color_support(environ: Mapping[str, str], stream: TextIO) -> Tuple[bool, bool]:
    """Return (enabled, truecolor) for the given environment and output stream."""
    if environ.get("NO_COLOR") is not None:
        return False, False
    forced = environ.get("FORCE_COLOR", "").lower() in ON_VALUES
    if not (forced or stream.isatty()):
        return False, False
    colorterm = environ.get("COLORTERM", "").lower()
    return True, "truecolor" in colorterm or "24bit" in colorterm


def ansi_fg(hex_code: str, truecolor: bool) -> str:
    """Foreground sequence for a #rrggbb color; 256-color cube unless truecolor."""
    digits = hex_code.lstrip('#')
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    if truecolor:
        return f"\033[38;2;{r};{g};{b}m"
    cube = [round(channel * 5 / 255) for channel in (r, g, b)]
    return f"\033[38;5;{16 + 36 * cube[0] + 6 * cube[1] + cube[2]}m"


_ENABLE, _USE_TRUECOLOR = color_support(os.environ, sys.stdout)


def fg(hex_code: str) -> str:
    """ANSI foreground sequence for a hex color ('' when color is off)."""
    return ansi_fg(hex_code, _USE_TRUECOLOR) if _ENABLE else ''


def _sgr(code: int) -> str:
    return f"\033[{code}m" if _ENABLE else ''


RESET = _sgr(0)
BOLD = _sgr(1)
DIM = _sgr(2)
STRIKE = _sgr(9)

DEFAULT_HEX: Dict[str, str] = {
    'TODO_PRIMARY': '#476EAE',
    'TODO_HIGH': '#E5484D',
    'TODO_MEDIUM': '#F6C744',
    'TODO_LOW': '#48B3AF',
    'TODO_DONE': '#A7E399',
}

_PRIORITY_KEYS = {
    Priority.HIGH: 'TODO_HIGH',
    Priority.MEDIUM: 'TODO_MEDIUM',
    Priority.LOW: 'TODO_LOW',
}


class Palette:
    """Resolved ANSI sequences for one set of hex colors."""

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        hexes = dict(DEFAULT_HEX)
        hexes.update(overrides or {})
        self.hex = hexes
        self.primary = fg(hexes['TODO_PRIMARY'])
        self.done = fg(hexes['TODO_DONE'])
        self.priority: Dict[Priority, str] = {p: fg(hexes[k]) for p, k in _PRIORITY_KEYS.items()}
        self.header = self.primary + BOLD
        self.position = self.primary + BOLD
        self.muted = DIM + self.primary


def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE or not any(styles):
        return text
    return ''.join(styles) + text + RESET


__all__ = ['color', 'fg', 'ansi_fg', 'color_support', 'Palette', 'RESET', 'BOLD', 'DIM', 'STRIKE', 'DEFAULT_HEX']
