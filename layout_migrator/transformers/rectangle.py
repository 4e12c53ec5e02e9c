"""
Layout Migrator — Rectangle Transformer

localRectangle → IMAGE when it carries a usable background image (URL or
wildcard expression), otherwise RECTANGLE with background fill and border stroke.
"""

from typing import Union

from layout_migrator.models import ImageNode, RectangleNode, SourceNode
from layout_migrator.styles import parse_node_styles
from layout_migrator.transformers.context import TransformContext
from layout_migrator.transformers.paint import fills_from_background, strokes_from_border
from layout_migrator.wildcards import convert_wildcards, has_wildcard

_IMAGE_URL_PREFIXES = ("http://", "https://", "//", "data:image/")


def has_valid_image_url(url: str | None) -> bool:
    """Wildcard expressions and http(s), protocol-relative or data:image URLs."""
    if not url or url == "none":
        return False
    if has_wildcard(url):
        return True
    return url.startswith(_IMAGE_URL_PREFIXES)


def transform_rectangle(
    node: SourceNode, parent_id: str, ctx: TransformContext
) -> Union[ImageNode, RectangleNode]:
    styles = parse_node_styles(node.styles)
    geometry = dict(
        parent_id=parent_id,
        x=styles.x,
        y=styles.y,
        width=styles.width,
        height=styles.height,
        visible=styles.visible,
        opacity=styles.opacity,
        strokes=strokes_from_border(styles),
        corner_radius=styles.border_radius or 0,
    )

    if has_valid_image_url(styles.background_image):
        ctx.stats.image_nodes += 1
        return ImageNode(
            name=node.name or "Image",
            image_ref=convert_wildcards(styles.background_image),
            **geometry,
        )

    ctx.stats.rectangle_nodes += 1
    return RectangleNode(
        name=node.name or "Rectangle",
        fills=fills_from_background(styles),
        **geometry,
    )
