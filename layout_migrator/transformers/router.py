"""
Layout Migrator — Node Router

The single dispatch point from a v1 node tag to its transformer. Every source
node passing through here is counted; unknown tags yield no nodes and a
diagnostic, never an exception.
"""

from layout_migrator.models import SceneNode, SourceKind, SourceNode
from layout_migrator.transformers.component import transform_component
from layout_migrator.transformers.context import TransformContext
from layout_migrator.transformers.line import transform_line
from layout_migrator.transformers.rectangle import transform_rectangle
from layout_migrator.transformers.text import transform_text


def route_node(node: SourceNode, parent_id: str, ctx: TransformContext) -> list[SceneNode]:
    """Transform one source node (and, for groups, its subtree) under `parent_id`."""
    ctx.stats.total_source_nodes += 1
    kind = node.kind

    if kind is SourceKind.TEXT:
        ctx.stats.migrated_nodes += 1
        return [transform_text(node, parent_id, ctx)]

    if kind is SourceKind.RECTANGLE:
        ctx.stats.migrated_nodes += 1
        return [transform_rectangle(node, parent_id, ctx)]

    if kind is SourceKind.LINE:
        ctx.stats.migrated_nodes += 1
        return [transform_line(node, parent_id, ctx)]

    if kind is SourceKind.GROUP:
        ctx.stats.migrated_nodes += 1
        return transform_component(node, parent_id, ctx, route_node)

    if kind in (SourceKind.COM, SourceKind.LAYOUT_CONTENT):
        # Consumed by the group transformer / page resolver
        ctx.stats.skipped_nodes += 1
        return []

    ctx.warn(f'UnknownNodeType: "{node.type}" (name: "{node.name}") — skipped')
    ctx.stats.skipped_nodes += 1
    return []
