"""localLineHorizontal → LINE, running horizontally across its own width."""

from layout_migrator.models import BLACK, LineNode, Point, SourceNode, Stroke
from layout_migrator.styles import parse_node_styles
from layout_migrator.transformers.context import TransformContext
from layout_migrator.transformers.paint import stroke_from_border


def transform_line(node: SourceNode, parent_id: str, ctx: TransformContext) -> LineNode:
    ctx.stats.line_nodes += 1
    styles = parse_node_styles(node.styles)

    if styles.border:
        stroke = stroke_from_border(styles.border)
    else:
        stroke = Stroke(color=BLACK.model_copy(), weight=1, style="solid")

    return LineNode(
        name=node.name or "Line",
        parent_id=parent_id,
        x=styles.x,
        y=styles.y,
        width=styles.width,
        height=styles.height,
        visible=styles.visible,
        opacity=styles.opacity,
        strokes=[stroke],
        stroke_weight=stroke.weight,
        start_point=Point(x=0, y=0),
        end_point=Point(x=styles.width, y=0),
    )
