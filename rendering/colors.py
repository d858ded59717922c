"""Hex color helpers: parse, normalize, and lighten/darken a base fabric color."""
from __future__ import annotations

import logging
import re
from typing import Tuple

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")
_SHORT_HEX_RE = re.compile(r"^[0-9a-fA-F]{3}$")


def _clamp_channel(value: int) -> int:
    return max(0, min(255, value))


def parse_hex(hex_color: str) -> Tuple[int, int, int]:
    """Return (r, g, b) for `#rrggbb`, `rrggbb` or the 3-digit shorthand.

    Anything unparseable is treated as black.
    """
    s = hex_color.strip().lstrip("#") if isinstance(hex_color, str) else ""
    if _SHORT_HEX_RE.match(s):
        s = "".join(c * 2 for c in s)
    if not _HEX_RE.match(s):
        logger.debug("Unparseable color %r, using black", hex_color)
        return 0, 0, 0
    return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)


def to_hex(r: int, g: int, b: int) -> str:
    return "#{:02x}{:02x}{:02x}".format(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))


def normalize_hex(hex_color: str) -> str:
    """Canonical `#rrggbb` (lowercase) form of a color."""
    return to_hex(*parse_hex(hex_color))


def adjust_color(hex_color: str, amount: int) -> str:
    """Add `amount` to every channel, clamping each to [0, 255]."""
    r, g, b = parse_hex(hex_color)
    return to_hex(r + amount, g + amount, b + amount)
