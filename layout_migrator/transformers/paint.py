"""Fill and stroke builders shared by the shape transformers."""

from layout_migrator.colors import parse_color
from layout_migrator.models import SolidFill, Stroke, solid
from layout_migrator.styles import ParsedBorder, ParsedStyles


def fills_from_background(styles: ParsedStyles) -> list[SolidFill]:
    if styles.background_color:
        return [solid(parse_color(styles.background_color))]
    return []


def stroke_from_border(border: ParsedBorder) -> Stroke:
    style = border.style if border.style in ("dashed", "dotted") else "solid"
    return Stroke(color=parse_color(border.color), weight=border.width, style=style)


def strokes_from_border(styles: ParsedStyles) -> list[Stroke]:
    return [stroke_from_border(styles.border)] if styles.border else []
