"""
Layout Migrator — Color Parser

Converts CSS color strings to RGBA.
Supports: named colors, rgb(), rgba(), hex (#RGB, #RRGGBB, #RRGGBBAA).
Unrecognized input falls back to opaque black and logs a warning. Never raises.
"""

import re

from layout_migrator.config import log
from layout_migrator.models import RGBA

NAMED_COLORS: dict[str, tuple[int, int, int, float]] = {
    "white": (255, 255, 255, 1),
    "black": (0, 0, 0, 1),
    "red": (255, 0, 0, 1),
    "green": (0, 128, 0, 1),
    "blue": (0, 0, 255, 1),
    "gray": (128, 128, 128, 1),
    "grey": (128, 128, 128, 1),
    "transparent": (0, 0, 0, 0),
}

_RGB = re.compile(r"^rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$")
_RGBA = re.compile(r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d*\.?\d+)\s*\)$")
_HEX = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})$")


def parse_color(css_color: str) -> RGBA:
    """Parse a CSS color string. Case-insensitive, surrounding whitespace ignored."""
    text = css_color.strip().lower()

    if text in NAMED_COLORS:
        r, g, b, a = NAMED_COLORS[text]
        return RGBA(r=r, g=g, b=b, a=a)

    match = _RGB.match(text)
    if match:
        r, g, b = (_clamp(int(c), 0, 255) for c in match.groups())
        return RGBA(r=r, g=g, b=b, a=1)

    match = _RGBA.match(text)
    if match:
        r, g, b = (_clamp(int(c), 0, 255) for c in match.groups()[:3])
        return RGBA(r=r, g=g, b=b, a=_clamp(float(match.group(4)), 0, 1))

    match = _HEX.match(text)
    if match:
        return _parse_hex(match.group(1))

    log("WARN", "unrecognized color format, defaulting to black", color=css_color)
    return RGBA(r=0, g=0, b=0, a=1)


def _parse_hex(digits: str) -> RGBA:
    if len(digits) == 3:
        # #RGB → #RRGGBB
        r, g, b = (int(c * 2, 16) for c in digits)
        return RGBA(r=r, g=g, b=b, a=1)

    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    a = round(int(digits[6:8], 16) / 255, 2) if len(digits) == 8 else 1
    return RGBA(r=r, g=g, b=b, a=a)


def _clamp(value, low, high):
    return min(max(value, low), high)
