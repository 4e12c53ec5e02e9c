"""
Layout Migrator — Style Parser

v1 nodes carry `styles: dict[str, str | number]` with CSS property values.
This module turns that dictionary into a fixed-shape ParsedStyles record with
explicit defaults, so transformers never have to touch raw CSS strings.

Nothing here raises on bad input: unparsable values fall back to defaults.
"""

import re
from dataclasses import dataclass
from typing import Mapping

_NUMBER_PREFIX = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[-+]?\d+")
_BORDER_SHORTHAND = re.compile(r"^([\d.]+)px\s+(\w+)\s+(.+)$")
_URL_WRAPPER = re.compile(r"""url\(["']?(.+?)["']?\)""")
_FONT_QUOTES = re.compile(r"""^['"]|['"]$""")
_FONT_EXTENSION = re.compile(r"\.(ttf|otf|woff2?)$", re.IGNORECASE)


@dataclass
class ParsedBorder:
    width: float
    style: str
    color: str


@dataclass
class ParsedStyles:
    x: float = 0
    y: float = 0
    width: float = 100
    height: float = 100
    opacity: float = 1
    visible: bool = True
    z_index: int = 0
    height_auto: bool = False
    background_color: str | None = None
    background_image: str | None = None
    border: ParsedBorder | None = None
    border_radius: float | None = None
    font_family: str | None = None
    font_size: float | None = None
    color: str | None = None
    font_weight: int | None = None
    line_height: float | None = None
    min_height: float | None = None


def parse_float(value: str | None) -> float | None:
    """Leading-number parse: "12.5px" → 12.5, "abc" → None."""
    if value is None:
        return None
    match = _NUMBER_PREFIX.match(value)
    if not match:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    match = _INT_PREFIX.match(value)
    return int(match.group(0)) if match else None


def parse_px(value: str | None) -> float | None:
    """Parse a CSS pixel length: "705px" → 705.0, "auto" / "none" / "" → None."""
    if not value or value in ("auto", "none"):
        return None
    return parse_float(value)


def clean_font_name(name: str) -> str:
    """Strip surrounding CSS quotes and a font-file extension; preserve everything else."""
    cleaned = _FONT_QUOTES.sub("", name)
    cleaned = _FONT_EXTENSION.sub("", cleaned)
    return cleaned.strip()


def resolve_font_family(name: str, font_map: Mapping[str, str] | None = None) -> str:
    """Clean a font name and map it through the font-sync table when one is given.

    Falls back to the cleaned name when the map is absent or has no exact entry.
    """
    cleaned = clean_font_name(name)
    if font_map and font_map.get(cleaned):
        return font_map[cleaned]
    return cleaned


def parse_node_styles(styles: Mapping[str, object] | None) -> ParsedStyles:
    """Parse a v1 node's styles dictionary into structured values."""
    if not styles:
        return ParsedStyles()

    # Coerce everything to strings so the parsers below work uniformly
    s = {k: str(v) for k, v in styles.items() if v is not None}

    opacity = parse_float(s.get("opacity"))
    result = ParsedStyles(
        x=_or(parse_px(s.get("left")), 0),
        y=_or(parse_px(s.get("top")), 0),
        width=_or(parse_px(s.get("width")), 100),
        height=_or(parse_px(s.get("height")), 100),
        opacity=1 if opacity is None else opacity,
        visible=s.get("display") != "none",
        z_index=_or(parse_int(s.get("zIndex")), 0),
        height_auto=s.get("height") == "auto",
    )

    if s.get("backgroundColor"):
        result.background_color = s["backgroundColor"]

    bg_image = s.get("backgroundImage")
    if bg_image and bg_image != "none":
        match = _URL_WRAPPER.search(bg_image)
        result.background_image = match.group(1) if match else bg_image

    result.border = parse_border(s)

    if s.get("borderRadius"):
        result.border_radius = _or(parse_px(s["borderRadius"]), 0)

    # Typography: exact font name preserved, fonts are matched by identity downstream
    if s.get("fontFamily"):
        result.font_family = clean_font_name(s["fontFamily"])
    if s.get("fontSize"):
        result.font_size = _or(parse_px(s["fontSize"]), 16)
    if s.get("color"):
        result.color = s["color"]
    if s.get("fontWeight"):
        result.font_weight = parse_int(s["fontWeight"]) or 400
    if s.get("lineHeight"):
        result.line_height = parse_px(s["lineHeight"])

    # Auto-grow pages
    if s.get("minHeight"):
        result.min_height = parse_px(s["minHeight"])

    return result


def parse_border(styles: Mapping[str, str]) -> ParsedBorder | None:
    """Extract a border: shorthand → longhand triple → borderBottom → borderTop → None."""
    shorthand = _parse_border_shorthand(styles.get("border"))
    if shorthand:
        return shorthand

    if styles.get("borderWidth") or styles.get("borderStyle") or styles.get("borderColor"):
        return ParsedBorder(
            width=_or(parse_px(styles.get("borderWidth")), 1),
            style=styles.get("borderStyle") or "solid",
            color=styles.get("borderColor") or "#000000",
        )

    for side in ("borderBottom", "borderTop"):
        border = _parse_border_shorthand(styles.get(side))
        if border:
            return border

    return None


def _parse_border_shorthand(value: str | None) -> ParsedBorder | None:
    if not value or value == "none":
        return None
    match = _BORDER_SHORTHAND.match(value.strip())
    if not match:
        return None
    width = parse_float(match.group(1))
    if width is None:
        return None
    return ParsedBorder(width=width, style=match.group(2), color=match.group(3).strip())


def _or(value, default):
    return default if value is None else value
