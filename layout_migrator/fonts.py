"""
Layout Migrator — Font Resolver

Turns a layout's embeddedFonts into document font assets. Pure: no IO.

Exact font names are preserved (only the file extension is dropped) because
text markup references fonts by that exact identifier. Weight suffixes are
stripped only to group variants under a family entry.
"""

import re
from dataclasses import dataclass, field

from layout_migrator.config import MIGRATION_CONFIG
from layout_migrator.models import EmbeddedFont, FontAsset, LegacyFont, PopulatedFont, SourceLayout

_EXTENSION = re.compile(r"\.(ttf|otf|woff2?)$", re.IGNORECASE)
_WEIGHT_SUFFIX = re.compile(
    r"[_-](Thin|ExtraLight|UltraLight|Light|Regular|Book|Medium|SemiBold|DemiBold"
    r"|Bold|ExtraBold|UltraBold|Black|Heavy)$",
    re.IGNORECASE,
)

# Checked in order: "extralight" must not be read as "light", "extrabold" not as "bold"
_WEIGHT_KEYWORDS: list[tuple[tuple[str, ...], int]] = [
    (("thin",), 100),
    (("extralight", "ultralight"), 200),
    (("light",), 300),
    (("book", "regular"), 400),
    (("medium",), 500),
    (("semibold", "demibold"), 600),
    (("extrabold", "ultrabold"), 800),
    (("bold",), 700),
    (("black", "heavy"), 900),
]


@dataclass
class ResolvedFonts:
    font_assets: dict[str, FontAsset] = field(default_factory=dict)
    available_fonts: list[str] = field(default_factory=list)
    default_font_family: str = MIGRATION_CONFIG["typography"]["default_font_family"]


def strip_font_extension(file_name: str) -> str:
    return _EXTENSION.sub("", file_name)


def extract_family_base(name: str) -> str:
    """"NouvelR_Bold" → "NouvelR", "Roboto" → "Roboto"."""
    return _WEIGHT_SUFFIX.sub("", name) or name


def infer_weight(name: str) -> int:
    lower = name.lower()
    for keywords, weight in _WEIGHT_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return weight
    return 400


def font_name_and_url(font: EmbeddedFont) -> tuple[str, str] | None:
    """(file or font name, url) for the usable shapes; None for bare id strings."""
    if isinstance(font, PopulatedFont):
        return font.file_name, font.url
    if isinstance(font, LegacyFont):
        return font.font_name, font.font_url
    return None


def resolve_fonts(layout: SourceLayout) -> ResolvedFonts:
    """Build font assets, the available-font list and the default family for a layout."""
    assets: dict[str, FontAsset] = {}
    families: dict[str, FontAsset] = {}
    seen: list[str] = []

    for font in layout.embedded_fonts or []:
        shape = font_name_and_url(font)
        if shape is None:
            continue
        file_name, url = shape

        exact = strip_font_extension(file_name)
        if exact in seen:
            continue
        seen.append(exact)

        weight = infer_weight(exact)
        family = extract_family_base(exact)
        if family in families:
            if weight not in families[family].weights:
                families[family].weights.append(weight)
        else:
            families[family] = FontAsset(family=family, weights=[weight], url=url)

        assets[exact] = FontAsset(family=exact, weights=[weight], url=url)

    # Family-level entries never overwrite an exact-name entry of the same key
    for family, asset in families.items():
        if family not in assets:
            asset.weights.sort()
            assets[family] = asset

    available = sorted(set(seen) | set(families))
    default = layout.default_font or (available[0] if available else "Inter")

    return ResolvedFonts(font_assets=assets, available_fonts=available, default_font_family=default)
