"""
Layout Migrator — Text Transformer

localText → TEXT. The v1 HTML goes through Quill→Tiptap normalization, then
wildcard conversion; `characters` is the plain-text projection of the result.
"""

from layout_migrator.colors import parse_color
from layout_migrator.models import LineHeight, SourceNode, TextNode, rich_text_content, solid
from layout_migrator.rich_text import dominant_text_align, html_to_plain_text, normalize_rich_text
from layout_migrator.styles import parse_node_styles, resolve_font_family
from layout_migrator.transformers.context import TransformContext
from layout_migrator.wildcards import convert_wildcards


def transform_text(node: SourceNode, parent_id: str, ctx: TransformContext) -> TextNode:
    ctx.stats.text_nodes += 1
    styles = parse_node_styles(node.styles)

    # API payloads use `content`; older exports only carry `value`
    html = node.content or node.value or ""
    html = normalize_rich_text(html, ctx.font_map)
    html = convert_wildcards(html)
    characters = html_to_plain_text(html)

    text = TextNode(
        name=node.name or "Text",
        parent_id=parent_id,
        x=styles.x,
        y=styles.y,
        width=styles.width,
        height=styles.height,
        visible=styles.visible,
        opacity=styles.opacity,
        content=rich_text_content(characters),
        tiptap_state=None,
        html_content=html,
        characters=characters,
        font_family=resolve_font_family(styles.font_family, ctx.font_map) if styles.font_family else "inherit",
        font_size=styles.font_size if styles.font_size is not None else 16,
        font_weight=styles.font_weight if styles.font_weight is not None else 400,
        line_height=(
            LineHeight(value=styles.line_height, unit="px")
            if styles.line_height
            else LineHeight(value=1.5, unit="auto")
        ),
        text_align=dominant_text_align(html),
        text_auto_resize="none",
    )
    if styles.color:
        text.fills = [solid(parse_color(styles.color))]
    return text
